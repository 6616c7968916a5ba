"""CPU core: the CHIP-8 machine and its fetch-decode-execute loop."""

from __future__ import annotations

import enum
import logging
import random
from collections.abc import Sequence

from ..display.framebuffer import FrameBuffer
from ..errors import Chip8FatalError, RomTooLargeError
from ..memory.font import FONT_BASE, FONTSET
from ..memory.ram import ADDR_MASK, MAX_ROM_SIZE, PROGRAM_START, Memory
from .decode import Op, decode, instruction_mnemonic
from .execute import execute
from .keypad import Keypad
from .registers import RegisterFile
from .stack import CallStack
from .timers import Timers

logger = logging.getLogger(__name__)


class StepOutcome(enum.Enum):
    """Result of a single `Chip8.step()` that did not fault."""

    EXECUTED = "executed"
    UNKNOWN_OPCODE = "unknown_opcode"
    AWAITING_KEY = "awaiting_key"


class Chip8:
    """CHIP-8 virtual machine: memory, registers, stack, display, timers, keypad.

    The host drives two independent clocks: `step()` runs one instruction
    and `tick_60hz()` advances the timers. Neither ever blocks.
    """

    def __init__(self, rng: random.Random | None = None) -> None:
        self.memory = Memory()
        self.registers = RegisterFile()
        self.stack = CallStack()
        self.display = FrameBuffer()
        self.timers = Timers()
        self.keypad = Keypad()
        self.rng = rng if rng is not None else random.Random()
        self._pc: int = PROGRAM_START
        self._index: int = 0
        self.cycle_count: int = 0
        self.instruction_stats: dict[str, int] = {}
        self.fault: Chip8FatalError | None = None
        self.initialize()

    @property
    def pc(self) -> int:
        return self._pc

    @pc.setter
    def pc(self, value: int) -> None:
        self._pc = value & ADDR_MASK

    @property
    def index(self) -> int:
        """Index register I. Always masked to 12 bits."""
        return self._index

    @index.setter
    def index(self, value: int) -> None:
        self._index = value & ADDR_MASK

    @property
    def halted(self) -> bool:
        return self.fault is not None

    @property
    def awaiting_key(self) -> bool:
        return self.keypad.awaiting_key

    def initialize(self) -> None:
        """Reset all machine state and load the font table."""
        self.memory.clear()
        self.memory.load_segment(FONT_BASE, FONTSET)
        self.registers.reset()
        self.stack.clear()
        self.display.clear()
        self.timers.reset()
        self.keypad.reset()
        self.pc = PROGRAM_START
        self.index = 0
        self.cycle_count = 0
        self.instruction_stats = {}
        self.fault = None

    def load_rom(self, data: bytes) -> None:
        """Copy a program image into memory at 0x200.

        Raises:
            RomTooLargeError: If `data` is larger than the program area.
                Memory is left untouched.
        """
        if len(data) > MAX_ROM_SIZE:
            raise RomTooLargeError(len(data), MAX_ROM_SIZE)
        self.memory.load_segment(PROGRAM_START, bytes(data))
        logger.debug("Loaded %d byte ROM at 0x%03X", len(data), PROGRAM_START)

    def step(self) -> StepOutcome:
        """Execute one instruction cycle: fetch, decode, execute.

        Also records the instruction mnemonic in ``instruction_stats``
        for per-instruction profiling.

        Raises:
            Chip8FatalError: On stack underflow or overflow. The VM halts
                and every later call re-raises the same error.
        """
        if self.fault is not None:
            raise self.fault

        inst = decode(self.memory.read16(self.pc))
        try:
            next_pc = execute(inst, self)
        except Chip8FatalError as exc:
            self.fault = exc
            logger.error("Halting: %s", exc)
            raise

        self.pc = next_pc
        self.cycle_count += 1
        mnemonic = instruction_mnemonic(inst)
        self.instruction_stats[mnemonic] = self.instruction_stats.get(mnemonic, 0) + 1

        if inst.op is Op.UNKNOWN:
            return StepOutcome.UNKNOWN_OPCODE
        if self.keypad.awaiting_key:
            return StepOutcome.AWAITING_KEY
        return StepOutcome.EXECUTED

    def tick_60hz(self) -> None:
        """Advance the delay and sound timers by one 60 Hz tick.

        Timers are frozen while the machine waits for a key.
        """
        if self.keypad.awaiting_key:
            return
        self.timers.tick()

    def run_frame(self, steps: int) -> None:
        """Run `steps` instructions followed by one timer tick."""
        for _ in range(steps):
            self.step()
        self.tick_60hz()

    def set_keys(self, keys: Sequence[bool]) -> None:
        """Replace the keypad snapshot with 16 key-down flags."""
        self.keypad.set_keys(keys)

    def get_display(self) -> tuple[tuple[int, ...], ...]:
        """Current framebuffer as an immutable [row][column] grid."""
        return self.display.snapshot()

    def is_sound_active(self) -> bool:
        return self.timers.sound > 0
