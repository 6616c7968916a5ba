"""Exception hierarchy for the CHIP-8 VM."""


class Chip8Error(Exception):
    """Base class for all VM errors."""


class Chip8FatalError(Chip8Error):
    """Unrecoverable execution fault. The VM halts when one is raised."""


class StackUnderflowError(Chip8FatalError):
    """RET executed with no pending subroutine call."""

    def __init__(self, pc: int) -> None:
        super().__init__(f"Return with empty call stack at 0x{pc:03X}")
        self.pc = pc


class StackOverflowError(Chip8FatalError):
    """CALL executed with the call stack already full."""

    def __init__(self, pc: int, depth: int) -> None:
        super().__init__(f"Call stack overflow (depth {depth}) at 0x{pc:03X}")
        self.pc = pc
        self.depth = depth


class RomTooLargeError(Chip8Error, ValueError):
    """ROM image does not fit in program memory."""

    def __init__(self, size: int, limit: int) -> None:
        super().__init__(f"ROM is {size} bytes, maximum is {limit}")
        self.size = size
        self.limit = limit
