"""Keypad: 16-key hex keypad snapshot and the key-wait state machine."""

from __future__ import annotations

import enum
import logging
from collections.abc import Sequence

NUM_KEYS = 16

logger = logging.getLogger(__name__)


class KeyWaitState(enum.Enum):
    """Execution state with respect to the blocking key-wait instruction."""

    RUNNING = "running"
    AWAITING_KEY = "awaiting_key"


class Keypad:
    """Current key-down flags plus the key-wait latch.

    The host replaces the key snapshot wholesale with `set_keys`. Only the
    executor moves the latch between RUNNING and AWAITING_KEY.
    """

    def __init__(self) -> None:
        self._keys: list[bool] = [False] * NUM_KEYS
        self.state = KeyWaitState.RUNNING
        self.target_register: int | None = None

    @property
    def awaiting_key(self) -> bool:
        return self.state is KeyWaitState.AWAITING_KEY

    def set_keys(self, keys: Sequence[bool]) -> None:
        """Replace the key snapshot.

        Raises:
            ValueError: If `keys` does not hold exactly 16 entries.
        """
        if len(keys) != NUM_KEYS:
            raise ValueError(f"Expected {NUM_KEYS} key states, got {len(keys)}")
        self._keys = [bool(k) for k in keys]

    def is_down(self, key: int) -> bool:
        """True if the key is held. Values outside 0x0-0xF name no key."""
        if not 0 <= key < NUM_KEYS:
            return False
        return self._keys[key]

    def first_pressed(self) -> int | None:
        """Lowest index of a held key, or None if no key is down."""
        for index, down in enumerate(self._keys):
            if down:
                return index
        return None

    def snapshot(self) -> list[bool]:
        return list(self._keys)

    def begin_wait(self, register: int) -> None:
        """Enter AWAITING_KEY; the pressed key will be stored in `register`."""
        self.state = KeyWaitState.AWAITING_KEY
        self.target_register = register
        logger.debug("Waiting for key press into V%X", register)

    def end_wait(self) -> None:
        """Return to RUNNING."""
        self.state = KeyWaitState.RUNNING
        self.target_register = None

    def reset(self) -> None:
        self._keys = [False] * NUM_KEYS
        self.end_wait()
