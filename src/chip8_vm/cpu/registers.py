"""Register file: 16 x 8-bit general purpose registers V0-VF."""

NUM_REGISTERS = 16
VF = 0xF


class RegisterFile:
    """16 general-purpose registers. VF doubles as the carry/borrow/collision flag."""

    def __init__(self) -> None:
        self._regs: list[int] = [0] * NUM_REGISTERS

    def read(self, index: int) -> int:
        """Read register value."""
        return self._regs[index]

    def write(self, index: int, value: int) -> None:
        """Write register value. Value masked to 8 bits."""
        self._regs[index] = value & 0xFF

    def reset(self) -> None:
        """Zero all registers."""
        self._regs = [0] * NUM_REGISTERS

    def snapshot(self) -> list[int]:
        """Copy of all 16 register values."""
        return list(self._regs)
