"""TUI register display: V0-VF, I, PC, timers and stack with change highlighting."""

from __future__ import annotations

from ..cpu.cpu import Chip8
from ..cpu.registers import NUM_REGISTERS, RegisterFile


def format_registers(regs: RegisterFile, prev_values: list[int] | None = None) -> str:
    """Format the 16 V registers for display with change highlighting.

    Produces a 4x4 grid. Registers whose values have changed since the
    previous snapshot are highlighted with Rich markup
    ``[bold yellow]...[/bold yellow]``.

    Args:
        regs: The current register file.
        prev_values: Optional list of 16 previous register values. If None,
            no highlighting is applied.

    Returns:
        A string with Rich markup suitable for display in a Rich Panel.
    """
    lines: list[str] = []
    cols = 4
    rows = NUM_REGISTERS // cols

    for row in range(rows):
        parts: list[str] = []
        for col in range(cols):
            idx = row + col * rows
            val = regs.read(idx)
            entry = f"V{idx:X} 0x{val:02X}"

            if prev_values is not None and val != prev_values[idx]:
                entry = f"[bold yellow]{entry}[/bold yellow]"

            parts.append(entry)
        lines.append("  ".join(parts))

    return "\n".join(lines)


def format_machine_state(vm: Chip8) -> str:
    """Format I, PC, timers, key-wait state and the call stack.

    Args:
        vm: The machine to describe.

    Returns:
        A multi-line string for the register panel footer.
    """
    wait = f"wait->V{vm.keypad.target_register:X}" if vm.awaiting_key else "running"
    stack = " ".join(f"{addr:03X}" for addr in vm.stack.entries()) or "empty"
    held = "".join(f"{k:X}" for k in range(16) if vm.keypad.is_down(k)) or "none"
    return "\n".join([
        f"I  0x{vm.index:03X}  PC 0x{vm.pc:03X}",
        f"DT {vm.timers.delay:3d}    ST {vm.timers.sound:3d}  ({wait})",
        f"Keys: {held}",
        f"Stack ({len(vm.stack)}/{vm.stack.depth}): {stack}",
    ])


def snapshot_registers(regs: RegisterFile) -> list[int]:
    """Capture a snapshot of all 16 register values."""
    return regs.snapshot()
