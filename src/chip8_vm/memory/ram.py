"""RAM: bytearray-backed 4 KB address space with big-endian word fetch."""

MEMORY_SIZE = 4096
ADDR_MASK = MEMORY_SIZE - 1
PROGRAM_START = 0x200
MAX_ROM_SIZE = MEMORY_SIZE - PROGRAM_START


class Memory:
    """Byte-addressable 4 KB memory.

    Single-byte accesses mask the address to 12 bits, so index or program
    counter arithmetic that runs past 0xFFF wraps to the bottom of memory
    instead of raising.
    """

    def __init__(self, size: int = MEMORY_SIZE) -> None:
        self.size = size
        self._data = bytearray(size)

    def __len__(self) -> int:
        return self.size

    def clear(self) -> None:
        """Zero every byte."""
        self._data[:] = bytes(self.size)

    def read8(self, addr: int) -> int:
        """Read an unsigned byte."""
        return self._data[addr & ADDR_MASK]

    def write8(self, addr: int, value: int) -> None:
        """Write a byte. Value masked to 8 bits."""
        self._data[addr & ADDR_MASK] = value & 0xFF

    def read16(self, addr: int) -> int:
        """Read an unsigned 16-bit word (big-endian)."""
        return (self.read8(addr) << 8) | self.read8(addr + 1)

    def read_block(self, addr: int, length: int) -> bytes:
        """Read `length` consecutive bytes, wrapping at the top of memory."""
        return bytes(self.read8(addr + i) for i in range(length))

    def load_segment(self, addr: int, data: bytes) -> None:
        """Bulk-load bytes into memory at an absolute address.

        Copies the entire `data` buffer into memory starting at `addr`.
        Unlike single-byte access this does not wrap: a block that does not
        fit raises MemoryError and leaves memory untouched.

        Args:
            addr: Absolute start address for the load.
            data: Raw bytes to copy into memory.
        """
        if addr < 0 or addr + len(data) > self.size:
            raise MemoryError(
                f"Segment of {len(data)} bytes at 0x{addr:03X} exceeds memory"
            )
        self._data[addr : addr + len(data)] = data
