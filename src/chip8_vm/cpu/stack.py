"""Call stack: bounded return-address stack for CALL/RET."""

from ..errors import StackOverflowError, StackUnderflowError

STACK_DEPTH = 16


class CallStack:
    """Return-address stack holding at most `depth` entries."""

    def __init__(self, depth: int = STACK_DEPTH) -> None:
        self.depth = depth
        self._entries: list[int] = []

    def __len__(self) -> int:
        return len(self._entries)

    def push(self, addr: int, pc: int) -> None:
        """Push a return address.

        Args:
            addr: Return address to save.
            pc: Address of the CALL instruction, reported on overflow.

        Raises:
            StackOverflowError: If the stack is already full.
        """
        if len(self._entries) >= self.depth:
            raise StackOverflowError(pc, self.depth)
        self._entries.append(addr)

    def pop(self, pc: int) -> int:
        """Pop the most recent return address.

        Raises:
            StackUnderflowError: If the stack is empty.
        """
        if not self._entries:
            raise StackUnderflowError(pc)
        return self._entries.pop()

    def clear(self) -> None:
        self._entries.clear()

    def entries(self) -> list[int]:
        """Return addresses, oldest first."""
        return list(self._entries)
