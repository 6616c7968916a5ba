"""TUI disassembly panel: converts decoded instructions to human-readable text."""

from __future__ import annotations

from dataclasses import dataclass

from ..cpu.decode import Instruction, Op, decode
from ..memory.ram import ADDR_MASK, Memory


@dataclass(frozen=True)
class DisassemblyLine:
    """A single line of disassembly output."""

    addr: int
    word: int
    text: str
    is_current: bool


# Instructions with no operands
_BARE: dict[Op, str] = {
    Op.CLS: "CLS",
    Op.RET: "RET",
}

# Address operand: OP 0xNNN
_ADDR: dict[Op, str] = {
    Op.JP: "JP",
    Op.CALL: "CALL",
}

# Register + byte operands: OP Vx, 0xKK
_VX_BYTE: dict[Op, str] = {
    Op.SE_VX_BYTE: "SE",
    Op.SNE_VX_BYTE: "SNE",
    Op.LD_VX_BYTE: "LD",
    Op.ADD_VX_BYTE: "ADD",
    Op.RND: "RND",
}

# Register + register operands: OP Vx, Vy
_VX_VY: dict[Op, str] = {
    Op.SE_VX_VY: "SE",
    Op.SNE_VX_VY: "SNE",
    Op.LD_VX_VY: "LD",
    Op.OR: "OR",
    Op.AND: "AND",
    Op.XOR: "XOR",
    Op.ADD_VX_VY: "ADD",
    Op.SUB: "SUB",
    Op.SHR: "SHR",
    Op.SUBN: "SUBN",
    Op.SHL: "SHL",
}

# Single register operand, formatted around Vx
_VX_FORMS: dict[Op, str] = {
    Op.SKP: "SKP {vx}",
    Op.SKNP: "SKNP {vx}",
    Op.LD_VX_DT: "LD {vx}, DT",
    Op.LD_VX_K: "LD {vx}, K",
    Op.LD_DT_VX: "LD DT, {vx}",
    Op.LD_ST_VX: "LD ST, {vx}",
    Op.ADD_I_VX: "ADD I, {vx}",
    Op.LD_F_VX: "LD F, {vx}",
    Op.LD_B_VX: "LD B, {vx}",
    Op.LD_MEM_VX: "LD [I], {vx}",
    Op.LD_VX_MEM: "LD {vx}, [I]",
}


def _reg(index: int) -> str:
    """Format a register index as its name (V0-VF)."""
    return f"V{index:X}"


def disassemble_instruction(inst: Instruction) -> str:
    """Convert a decoded Instruction to a human-readable assembly string.

    Uses the conventional CHIP-8 assembler syntax, e.g. ``LD V3, 0x2A``,
    ``DRW V0, V1, 5``, ``LD [I], V4``. Undefined words render as ``DW``
    data directives.

    Args:
        inst: A decoded Instruction.

    Returns:
        Human-readable assembly string.
    """
    op = inst.op

    if op in _BARE:
        return _BARE[op]
    if op in _ADDR:
        return f"{_ADDR[op]} 0x{inst.nnn:03X}"
    if op in _VX_BYTE:
        return f"{_VX_BYTE[op]} {_reg(inst.x)}, 0x{inst.kk:02X}"
    if op in _VX_VY:
        return f"{_VX_VY[op]} {_reg(inst.x)}, {_reg(inst.y)}"
    if op in _VX_FORMS:
        return _VX_FORMS[op].format(vx=_reg(inst.x))
    if op is Op.LD_I:
        return f"LD I, 0x{inst.nnn:03X}"
    if op is Op.JP_V0:
        return f"JP V0, 0x{inst.nnn:03X}"
    if op is Op.DRW:
        return f"DRW {_reg(inst.x)}, {_reg(inst.y)}, {inst.n}"
    return f"DW 0x{inst.word:04X}"


def disassemble_region(
    memory: Memory, center_pc: int, count: int
) -> list[DisassemblyLine]:
    """Disassemble a region of memory centered on center_pc.

    Reads `count` instruction words from memory, centered on `center_pc`.
    Addresses wrap at the top of the 4 KB address space.

    Args:
        memory: The memory to read from.
        center_pc: The PC address to center the disassembly on.
        count: Total number of instructions to disassemble.

    Returns:
        A list of DisassemblyLine objects, one per instruction.
    """
    half = count // 2
    start_addr = (center_pc - half * 2) & ADDR_MASK
    lines: list[DisassemblyLine] = []

    for i in range(count):
        addr = (start_addr + i * 2) & ADDR_MASK
        word = memory.read16(addr)
        text = disassemble_instruction(decode(word))
        lines.append(DisassemblyLine(addr=addr, word=word, text=text, is_current=addr == center_pc))

    return lines


def disassemble_rom(data: bytes, base: int) -> list[DisassemblyLine]:
    """Disassemble a ROM image word by word.

    A trailing odd byte is padded with zero.

    Args:
        data: Raw ROM bytes.
        base: Load address of the first byte.

    Returns:
        One DisassemblyLine per 16-bit word, none marked current.
    """
    lines: list[DisassemblyLine] = []
    for offset in range(0, len(data), 2):
        hi = data[offset]
        lo = data[offset + 1] if offset + 1 < len(data) else 0
        word = (hi << 8) | lo
        lines.append(DisassemblyLine(
            addr=base + offset,
            word=word,
            text=disassemble_instruction(decode(word)),
            is_current=False,
        ))
    return lines
