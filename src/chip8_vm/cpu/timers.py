"""Delay and sound timers: 8-bit counters decremented at 60 Hz by the host."""

from dataclasses import dataclass


@dataclass
class Timers:
    """Delay and sound countdown timers."""

    delay: int = 0
    sound: int = 0

    def tick(self) -> None:
        """Decrement each nonzero timer by one."""
        if self.delay > 0:
            self.delay -= 1
        if self.sound > 0:
            self.sound -= 1

    def reset(self) -> None:
        self.delay = 0
        self.sound = 0
