"""TUI application: main debugger interface using Rich Live display."""

from __future__ import annotations

import random
import readline  # noqa: F401  # pyright: ignore[reportUnusedImport]
import sys

from rich.console import Console
from rich.layout import Layout
from rich.panel import Panel
from rich.text import Text

from ..cpu.cpu import Chip8
from ..loader.rom import load_rom_file
from .debugger import DebuggerState, process_command
from .disasm import disassemble_region
from .display import format_display
from .memory import format_hex_dump
from .registers import format_machine_state, format_registers
from .stats import format_instruction_stats


def render_debugger(state: DebuggerState) -> Layout:
    """Build the Rich Layout with all debugger panels.

    Layout structure:
        +-------------------------+-------------+
        |   Display (64x16)       | Disassembly |
        +------------+------------+             |
        | Registers  | Memory     |             |
        +------------+------------+-------------+
        |   Instruction Statistics              |
        +---------------------------------------+
        |   Status bar (full width)             |
        +---------------------------------------+

    Args:
        state: The current debugger state.

    Returns:
        A Rich Layout object ready for display.
    """
    vm = state.vm
    layout = Layout()

    msg_lines = state.message.count("\n") + 1
    status_height = 2 + 1 + msg_lines

    layout.split_column(
        Layout(name="top", size=vm.display.height // 2 + 12),
        Layout(name="stats", size=8),
        Layout(name="status", size=status_height),
    )

    layout["top"].split_row(
        Layout(name="left_col", ratio=3),
        Layout(name="disassembly", ratio=1),
    )

    layout["left_col"].split_column(
        Layout(name="display", size=vm.display.height // 2 + 2),
        Layout(name="lower"),
    )

    layout["lower"].split_row(
        Layout(name="registers", ratio=1),
        Layout(name="memory", ratio=2),
    )

    layout["display"].update(Panel(Text(format_display(vm.get_display())), title="Display"))

    reg_text = format_registers(vm.registers, state.prev_regs)
    reg_text += "\n\n" + format_machine_state(vm)
    layout["registers"].update(Panel(reg_text, title="Registers"))

    disasm_lines = disassemble_region(vm.memory, vm.pc, 21)
    disasm_text = Text()
    for line in disasm_lines:
        marker = ">" if line.is_current else " "
        bp_marker = "*" if line.addr in state.breakpoints else " "
        entry = f"{marker}{bp_marker} {line.addr:03X}: {line.word:04X}  {line.text}"
        if line.is_current:
            disasm_text.append(entry + "\n", style="bold green")
        elif line.addr in state.breakpoints:
            disasm_text.append(entry + "\n", style="bold red")
        else:
            disasm_text.append(entry + "\n")
    layout["disassembly"].update(Panel(disasm_text, title="Disassembly"))

    mem_addr = vm.index if state.mem_view_addr is None else state.mem_view_addr
    mem_text = format_hex_dump(vm.memory, mem_addr, num_rows=8)
    layout["memory"].update(Panel(Text(mem_text), title=f"Memory @ 0x{mem_addr:03X}"))

    stats_text = format_instruction_stats(vm.instruction_stats)
    layout["stats"].update(Panel(Text(stats_text), title="Instruction Statistics"))

    if vm.halted:
        run_str = "HALTED"
    elif vm.awaiting_key:
        run_str = "AWAITING KEY"
    else:
        run_str = "RUNNING"
    sound_str = "on" if vm.is_sound_active() else "off"
    bp_str = ", ".join(f"0x{a:03X}" for a in sorted(state.breakpoints))
    status_text = Text(
        f"PC: 0x{vm.pc:03X}  |  "
        f"Cycles: {vm.cycle_count}  |  "
        f"State: {run_str}  |  "
        f"Sound: {sound_str}  |  "
        f"Breakpoints: {bp_str if bp_str else 'none'}\n"
        f"{state.message}"
    )
    layout["status"].update(Panel(status_text, title="Status"))

    return layout


def run_debugger(rom_path: str, seed: int | None = None) -> None:
    """Launch the TUI debugger for a ROM file.

    Loads the ROM into a fresh VM and enters the command loop with Rich
    console output.

    Args:
        rom_path: Path to the ROM file to debug.
        seed: Optional seed for the RND instruction's generator.
    """
    vm = Chip8(rng=random.Random(seed))
    load_rom_file(vm, rom_path)

    state = DebuggerState(vm=vm, prev_regs=vm.registers.snapshot())

    console = Console()

    def _render(st: DebuggerState) -> None:
        console.clear()
        console.print(render_debugger(st))

    state.render_fn = _render

    _render(state)

    while True:
        try:
            cmd = input("dbg> ")
        except (EOFError, KeyboardInterrupt):
            console.print("\nExiting debugger.")
            break

        if not process_command(state, cmd):
            console.print("Exiting debugger.")
            break

        _render(state)

    sys.exit(0)
