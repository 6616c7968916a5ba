"""TUI debugger controller: state management and command processing."""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass, field

from ..cpu.cpu import Chip8
from ..cpu.keypad import NUM_KEYS
from ..errors import Chip8FatalError
from ..memory.ram import ADDR_MASK
from .registers import snapshot_registers

TIMER_HZ = 60


@dataclass
class DebuggerState:
    """Mutable state for the TUI debugger session.

    Holds the VM, breakpoint set, previous register snapshot for change
    tracking, memory view address (None follows I), held keys, the
    steps-per-frame ratio used to tick timers, and the status message.
    """

    vm: Chip8
    breakpoints: set[int] = field(default_factory=set)
    prev_regs: list[int] = field(default_factory=lambda: [0] * 16)
    mem_view_addr: int | None = None
    held_keys: list[bool] = field(default_factory=lambda: [False] * NUM_KEYS)
    steps_per_frame: int = 10
    frame_steps: int = 0
    message: str = "Ready. Type 's' to step, 'c' to continue, 'q' to quit."
    render_fn: Callable[[DebuggerState], None] | None = None


def _step_with_keys(state: DebuggerState) -> None:
    state.vm.set_keys(state.held_keys)
    state.vm.step()


def _advance(state: DebuggerState) -> None:
    """Step once, ticking the timers after every `steps_per_frame` steps."""
    _step_with_keys(state)
    state.frame_steps += 1
    if state.frame_steps >= state.steps_per_frame:
        state.vm.tick_60hz()
        state.frame_steps = 0


def debugger_step(state: DebuggerState) -> None:
    """Execute one instruction and update register snapshot.

    Takes a snapshot of the current registers before stepping, so the
    display can highlight which registers changed.

    Args:
        state: The current debugger state (modified in place).
    """
    if state.vm.halted:
        state.message = f"VM is halted: {state.vm.fault}"
        return

    state.prev_regs = snapshot_registers(state.vm.registers)
    try:
        _advance(state)
    except Chip8FatalError as exc:
        state.message = f"Fatal: {exc}"
        return
    suffix = " (waiting for key)" if state.vm.awaiting_key else ""
    state.message = f"Stepped to 0x{state.vm.pc:03X} (cycle {state.vm.cycle_count}){suffix}"


def debugger_continue(state: DebuggerState, max_cycles: int = 10000) -> None:
    """Run until breakpoint, fault, key wait, or cycle limit.

    Args:
        state: The current debugger state (modified in place).
        max_cycles: Maximum number of cycles to execute before stopping.
    """
    if state.vm.halted:
        state.message = f"VM is halted: {state.vm.fault}"
        return

    state.prev_regs = snapshot_registers(state.vm.registers)
    cycles_run = 0

    while cycles_run < max_cycles:
        try:
            _advance(state)
        except Chip8FatalError as exc:
            state.message = f"Fatal after {cycles_run} cycles: {exc}"
            return
        cycles_run += 1

        if state.vm.pc in state.breakpoints:
            state.message = (
                f"Breakpoint hit at 0x{state.vm.pc:03X} "
                f"(ran {cycles_run} cycles)"
            )
            return

        if state.vm.awaiting_key and not any(state.held_keys):
            state.message = (
                f"Waiting for key at 0x{state.vm.pc:03X} "
                f"(ran {cycles_run} cycles). Use 'k <hex>' to press one."
            )
            return

    state.message = f"Stopped after {max_cycles} cycles (limit reached)."


def debugger_tick(state: DebuggerState, count: int = 1) -> None:
    """Deliver `count` 60 Hz timer ticks without executing instructions."""
    for _ in range(count):
        state.vm.tick_60hz()
    state.message = (
        f"Ticked {count}x: DT={state.vm.timers.delay} ST={state.vm.timers.sound}"
    )


def debugger_run_at_speed(
    state: DebuggerState,
    hz: int,
    max_steps: int | None = None,
) -> None:
    """Run at a fixed speed with live display updates.

    Frames are paced at 60 Hz and each frame delivers exactly one timer
    tick, so the timers run at 60 Hz whatever the instruction rate. Each
    frame runs ``hz / 60`` steps, with the fractional part carried over,
    so rates below 60 Hz leave some frames without an instruction.
    ``state.steps_per_frame`` is left alone for later step/continue
    commands.

    Stops on breakpoint, fault, max_steps limit, or KeyboardInterrupt.

    Args:
        state: The current debugger state (modified in place).
        hz: Target steps per second (must be >= 1).
        max_steps: Optional maximum number of steps before stopping.
    """
    if state.vm.halted:
        state.message = f"VM is halted: {state.vm.fault}"
        return

    frame_interval = 1 / TIMER_HZ
    # Step budget in units of 1/60 step; each frame earns hz of them
    budget = 0
    total_steps = 0

    def _render() -> None:
        if state.render_fn is not None:
            state.render_fn(state)

    try:
        while True:
            frame_start = time.monotonic()
            state.prev_regs = snapshot_registers(state.vm.registers)
            budget += hz

            while budget >= TIMER_HZ:
                if max_steps is not None and total_steps >= max_steps:
                    break

                try:
                    _step_with_keys(state)
                except Chip8FatalError as exc:
                    state.message = f"Fatal after {total_steps} steps: {exc}"
                    _render()
                    return
                total_steps += 1
                budget -= TIMER_HZ

                if state.vm.pc in state.breakpoints:
                    state.message = (
                        f"Breakpoint hit at 0x{state.vm.pc:03X} "
                        f"(ran {total_steps} steps at {hz} Hz)"
                    )
                    _render()
                    return

            state.vm.tick_60hz()
            state.message = (
                f"Running at {hz} Hz: "
                f"step {total_steps}, "
                f"PC 0x{state.vm.pc:03X} "
                f"(Ctrl+C to stop)"
            )
            _render()

            if max_steps is not None and total_steps >= max_steps:
                state.message = f"Stopped after {total_steps} steps (limit reached)."
                _render()
                return

            elapsed = time.monotonic() - frame_start
            remaining = frame_interval - elapsed
            if remaining > 0:
                time.sleep(remaining)

    except KeyboardInterrupt:
        state.message = f"Paused after {total_steps} steps at {hz} Hz."


HELP_TEXT = (
    "s, step                  - step one instruction\n"
    "c, continue              - run until breakpoint/fault/key wait\n"
    "r, run <hz> [max_steps]  - run at fixed speed (Ctrl+C to pause)\n"
    "t, tick [n]              - deliver n timer ticks (default 1)\n"
    "k, key <hex>             - toggle a held key (0-F)\n"
    "b <addr>                 - toggle breakpoint (hex address)\n"
    "g <addr|i>               - set memory view address (hex), or follow I\n"
    "h, help                  - show this help\n"
    "q, quit                  - exit debugger"
)


def _parse_addr(text: str) -> int | None:
    try:
        return int(text, 16) & ADDR_MASK
    except ValueError:
        return None


def process_command(state: DebuggerState, cmd: str) -> bool:
    """Parse and execute a debugger command.

    Supported commands:
        s, step                  -- execute one instruction
        c, continue              -- run until breakpoint/fault/limit
        r, run <hz> [max_steps]  -- run at fixed speed (steps/sec)
        t, tick [n]              -- deliver timer ticks
        k, key <hex>             -- toggle a held key
        b <addr>                 -- toggle breakpoint at hex address
        g <addr|i>               -- set memory view address
        h, help                  -- show command help
        q, quit                  -- exit the debugger

    Args:
        state: The current debugger state (modified in place).
        cmd: The raw command string from the user.

    Returns:
        True to continue the debugger loop, False to quit.
    """
    parts = cmd.strip().split()
    if not parts:
        state.message = HELP_TEXT
        return True

    verb = parts[0].lower()

    if verb in ("s", "step"):
        debugger_step(state)

    elif verb in ("c", "continue"):
        debugger_continue(state)

    elif verb in ("r", "run"):
        if len(parts) < 2:
            state.message = "Usage: run <hz> [max_steps]"
            return True
        try:
            hz = int(parts[1])
        except ValueError:
            state.message = f"Invalid hz: {parts[1]}"
            return True
        if hz < 1:
            state.message = "Hz must be >= 1."
            return True

        max_steps: int | None = None
        if len(parts) >= 3:
            try:
                max_steps = int(parts[2])
            except ValueError:
                state.message = f"Invalid max_steps: {parts[2]}"
                return True
            if max_steps < 1:
                state.message = "max_steps must be >= 1."
                return True

        debugger_run_at_speed(state, hz, max_steps)

    elif verb in ("t", "tick"):
        count = 1
        if len(parts) >= 2:
            try:
                count = int(parts[1])
            except ValueError:
                state.message = f"Invalid tick count: {parts[1]}"
                return True
        debugger_tick(state, count)

    elif verb in ("k", "key"):
        if len(parts) < 2:
            state.message = "Usage: k <hex_key>"
            return True
        try:
            key = int(parts[1], 16)
        except ValueError:
            key = -1
        if not 0 <= key < NUM_KEYS:
            state.message = f"Invalid key: {parts[1]}"
            return True
        state.held_keys[key] = not state.held_keys[key]
        action = "down" if state.held_keys[key] else "up"
        state.message = f"Key {key:X} {action}"

    elif verb in ("b", "breakpoint"):
        if len(parts) < 2:
            state.message = "Usage: b <hex_address>"
            return True
        addr = _parse_addr(parts[1])
        if addr is None:
            state.message = f"Invalid address: {parts[1]}"
            return True

        if addr in state.breakpoints:
            state.breakpoints.discard(addr)
            state.message = f"Breakpoint removed at 0x{addr:03X}"
        else:
            state.breakpoints.add(addr)
            state.message = f"Breakpoint set at 0x{addr:03X}"

    elif verb in ("g", "goto"):
        if len(parts) < 2:
            state.message = "Usage: g <hex_address|i>"
            return True
        if parts[1].lower() == "i":
            state.mem_view_addr = None
            state.message = "Memory view follows I"
            return True
        addr = _parse_addr(parts[1])
        if addr is None:
            state.message = f"Invalid address: {parts[1]}"
            return True
        state.mem_view_addr = addr
        state.message = f"Memory view set to 0x{addr:03X}"

    elif verb in ("h", "help"):
        state.message = HELP_TEXT

    elif verb in ("q", "quit"):
        return False

    else:
        state.message = f"Unknown command: {verb}\n\n{HELP_TEXT}"

    return True
