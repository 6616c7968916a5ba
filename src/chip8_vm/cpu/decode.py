"""Instruction decoder: splits a 16-bit opcode word into fields and names it."""

import enum
from dataclasses import dataclass


class Op(enum.Enum):
    """Every CHIP-8 instruction, plus an explicit variant for undefined words."""

    CLS = enum.auto()          # 00E0
    RET = enum.auto()          # 00EE
    JP = enum.auto()           # 1nnn
    CALL = enum.auto()         # 2nnn
    SE_VX_BYTE = enum.auto()   # 3xkk
    SNE_VX_BYTE = enum.auto()  # 4xkk
    SE_VX_VY = enum.auto()     # 5xy0
    LD_VX_BYTE = enum.auto()   # 6xkk
    ADD_VX_BYTE = enum.auto()  # 7xkk
    LD_VX_VY = enum.auto()     # 8xy0
    OR = enum.auto()           # 8xy1
    AND = enum.auto()          # 8xy2
    XOR = enum.auto()          # 8xy3
    ADD_VX_VY = enum.auto()    # 8xy4
    SUB = enum.auto()          # 8xy5
    SHR = enum.auto()          # 8xy6
    SUBN = enum.auto()         # 8xy7
    SHL = enum.auto()          # 8xyE
    SNE_VX_VY = enum.auto()    # 9xy0
    LD_I = enum.auto()         # Annn
    JP_V0 = enum.auto()        # Bnnn
    RND = enum.auto()          # Cxkk
    DRW = enum.auto()          # Dxyn
    SKP = enum.auto()          # Ex9E
    SKNP = enum.auto()         # ExA1
    LD_VX_DT = enum.auto()     # Fx07
    LD_VX_K = enum.auto()      # Fx0A
    LD_DT_VX = enum.auto()     # Fx15
    LD_ST_VX = enum.auto()     # Fx18
    ADD_I_VX = enum.auto()     # Fx1E
    LD_F_VX = enum.auto()      # Fx29
    LD_B_VX = enum.auto()      # Fx33
    LD_MEM_VX = enum.auto()    # Fx55
    LD_VX_MEM = enum.auto()    # Fx65
    UNKNOWN = enum.auto()


@dataclass(frozen=True)
class Instruction:
    """Decoded CHIP-8 instruction."""

    word: int
    op: Op
    x: int = 0
    y: int = 0
    n: int = 0
    nnn: int = 0
    kk: int = 0


# Families whose high nibble alone selects the instruction
_FAMILY_OPS: dict[int, Op] = {
    0x1: Op.JP,
    0x2: Op.CALL,
    0x3: Op.SE_VX_BYTE,
    0x4: Op.SNE_VX_BYTE,
    0x6: Op.LD_VX_BYTE,
    0x7: Op.ADD_VX_BYTE,
    0xA: Op.LD_I,
    0xB: Op.JP_V0,
    0xC: Op.RND,
    0xD: Op.DRW,
}

# 8xyN: selected by the low nibble
_ALU_OPS: dict[int, Op] = {
    0x0: Op.LD_VX_VY,
    0x1: Op.OR,
    0x2: Op.AND,
    0x3: Op.XOR,
    0x4: Op.ADD_VX_VY,
    0x5: Op.SUB,
    0x6: Op.SHR,
    0x7: Op.SUBN,
    0xE: Op.SHL,
}

# ExKK: selected by the low byte
_KEY_OPS: dict[int, Op] = {
    0x9E: Op.SKP,
    0xA1: Op.SKNP,
}

# FxKK: selected by the low byte
_MISC_OPS: dict[int, Op] = {
    0x07: Op.LD_VX_DT,
    0x0A: Op.LD_VX_K,
    0x15: Op.LD_DT_VX,
    0x18: Op.LD_ST_VX,
    0x1E: Op.ADD_I_VX,
    0x29: Op.LD_F_VX,
    0x33: Op.LD_B_VX,
    0x55: Op.LD_MEM_VX,
    0x65: Op.LD_VX_MEM,
}

# 00KK: only CLS and RET are defined; 0nnn machine calls are not emulated
_SYSTEM_OPS: dict[int, Op] = {
    0x00E0: Op.CLS,
    0x00EE: Op.RET,
}


def _select_op(word: int) -> Op:
    family = word >> 12
    n = word & 0xF
    kk = word & 0xFF

    if family in _FAMILY_OPS:
        return _FAMILY_OPS[family]
    if family == 0x0:
        return _SYSTEM_OPS.get(word, Op.UNKNOWN)
    if family == 0x5:
        return Op.SE_VX_VY if n == 0 else Op.UNKNOWN
    if family == 0x9:
        return Op.SNE_VX_VY if n == 0 else Op.UNKNOWN
    if family == 0x8:
        return _ALU_OPS.get(n, Op.UNKNOWN)
    if family == 0xE:
        return _KEY_OPS.get(kk, Op.UNKNOWN)
    # family == 0xF
    return _MISC_OPS.get(kk, Op.UNKNOWN)


def decode(word: int) -> Instruction:
    """Decode a 16-bit instruction word into an Instruction."""
    word &= 0xFFFF
    return Instruction(
        word=word,
        op=_select_op(word),
        x=(word & 0x0F00) >> 8,
        y=(word & 0x00F0) >> 4,
        n=word & 0x000F,
        nnn=word & 0x0FFF,
        kk=word & 0x00FF,
    )


def instruction_mnemonic(inst: Instruction) -> str:
    """Return the name used to key per-instruction statistics."""
    return inst.op.name
