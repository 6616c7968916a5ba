"""Instruction execution: implements the full CHIP-8 instruction set."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..memory.font import glyph_address
from ..memory.ram import ADDR_MASK
from .decode import Instruction, Op
from .registers import VF, RegisterFile

if TYPE_CHECKING:
    from .cpu import Chip8

logger = logging.getLogger(__name__)

_SKIP_OPS = frozenset({
    Op.SE_VX_BYTE, Op.SNE_VX_BYTE, Op.SE_VX_VY, Op.SNE_VX_VY, Op.SKP, Op.SKNP,
})

_ALU_OPS = frozenset({
    Op.LD_VX_VY, Op.OR, Op.AND, Op.XOR, Op.ADD_VX_VY,
    Op.SUB, Op.SHR, Op.SUBN, Op.SHL,
})


def execute(inst: Instruction, vm: Chip8) -> int:
    """Execute a decoded instruction. Returns the next PC value.

    `vm.pc` still holds the address the instruction was fetched from, so a
    fault raised here leaves the program counter on the faulting
    instruction.
    """
    regs = vm.registers
    pc = vm.pc
    op = inst.op

    if op is Op.CLS:
        vm.display.clear()
        return pc + 2

    elif op is Op.RET:
        return vm.stack.pop(pc)

    elif op is Op.JP:
        return inst.nnn

    elif op is Op.CALL:
        vm.stack.push((pc + 2) & ADDR_MASK, pc)
        return inst.nnn

    elif op in _SKIP_OPS:
        return pc + 4 if _skip_taken(inst, vm) else pc + 2

    elif op is Op.LD_VX_BYTE:
        regs.write(inst.x, inst.kk)
        return pc + 2

    elif op is Op.ADD_VX_BYTE:
        regs.write(inst.x, regs.read(inst.x) + inst.kk)
        return pc + 2

    elif op in _ALU_OPS:
        _exec_alu(inst, regs)
        return pc + 2

    elif op is Op.LD_I:
        vm.index = inst.nnn
        return pc + 2

    elif op is Op.JP_V0:
        return (inst.nnn + regs.read(0)) & ADDR_MASK

    elif op is Op.RND:
        regs.write(inst.x, vm.rng.randrange(256) & inst.kk)
        return pc + 2

    elif op is Op.DRW:
        sprite = vm.memory.read_block(vm.index, inst.n)
        collision = vm.display.draw_sprite(regs.read(inst.x), regs.read(inst.y), sprite)
        regs.write(VF, 1 if collision else 0)
        return pc + 2

    elif op is Op.LD_VX_K:
        return _exec_wait_key(inst, vm, pc)

    elif op is Op.UNKNOWN:
        logger.warning("Unknown opcode 0x%04X at 0x%03X, skipping", inst.word, pc)
        return pc + 2

    else:
        _exec_misc(inst, vm)
        return pc + 2


def _skip_taken(inst: Instruction, vm: Chip8) -> bool:
    """Evaluate the condition of a conditional-skip instruction."""
    vx = vm.registers.read(inst.x)
    op = inst.op

    if op is Op.SE_VX_BYTE:
        return vx == inst.kk
    elif op is Op.SNE_VX_BYTE:
        return vx != inst.kk
    elif op is Op.SE_VX_VY:
        return vx == vm.registers.read(inst.y)
    elif op is Op.SNE_VX_VY:
        return vx != vm.registers.read(inst.y)
    elif op is Op.SKP:
        return vm.keypad.is_down(vx)
    else:  # SKNP
        return not vm.keypad.is_down(vx)


def _exec_alu(inst: Instruction, regs: RegisterFile) -> None:
    """Execute register-register operations (8xyN).

    Flags are computed from the operands before Vx is written, and VF is
    written last so that it holds the flag even when x is F.
    """
    vx = regs.read(inst.x)
    vy = regs.read(inst.y)
    op = inst.op

    if op is Op.LD_VX_VY:
        regs.write(inst.x, vy)
    elif op is Op.OR:
        regs.write(inst.x, vx | vy)
    elif op is Op.AND:
        regs.write(inst.x, vx & vy)
    elif op is Op.XOR:
        regs.write(inst.x, vx ^ vy)
    elif op is Op.ADD_VX_VY:
        total = vx + vy
        regs.write(inst.x, total)
        regs.write(VF, 1 if total > 0xFF else 0)
    elif op is Op.SUB:
        regs.write(inst.x, vx - vy)
        regs.write(VF, 1 if vx >= vy else 0)
    elif op is Op.SHR:
        regs.write(inst.x, vx >> 1)
        regs.write(VF, vx & 0x01)
    elif op is Op.SUBN:
        regs.write(inst.x, vy - vx)
        regs.write(VF, 1 if vy >= vx else 0)
    else:  # SHL
        regs.write(inst.x, vx << 1)
        regs.write(VF, (vx >> 7) & 0x01)


def _exec_wait_key(inst: Instruction, vm: Chip8, pc: int) -> int:
    """Fx0A: block until a key is down, then store its index in Vx.

    The first execution only arms the wait. Later executions poll the
    keypad snapshot and, once a key is down, store the lowest pressed
    index and release the program counter.
    """
    keypad = vm.keypad
    if not keypad.awaiting_key:
        keypad.begin_wait(inst.x)
        return pc

    key = keypad.first_pressed()
    if key is None:
        return pc

    vm.registers.write(inst.x, key)
    keypad.end_wait()
    logger.debug("Key %X pressed, stored in V%X", key, inst.x)
    return pc + 2


def _exec_misc(inst: Instruction, vm: Chip8) -> None:
    """Execute timer, index and memory transfer operations (FxKK)."""
    regs = vm.registers
    mem = vm.memory
    vx = regs.read(inst.x)
    op = inst.op

    if op is Op.LD_VX_DT:
        regs.write(inst.x, vm.timers.delay)
    elif op is Op.LD_DT_VX:
        vm.timers.delay = vx
    elif op is Op.LD_ST_VX:
        vm.timers.sound = vx
    elif op is Op.ADD_I_VX:
        vm.index = vm.index + vx
    elif op is Op.LD_F_VX:
        vm.index = glyph_address(vx)
    elif op is Op.LD_B_VX:
        mem.write8(vm.index, vx // 100)
        mem.write8(vm.index + 1, (vx // 10) % 10)
        mem.write8(vm.index + 2, vx % 10)
    elif op is Op.LD_MEM_VX:
        for i in range(inst.x + 1):
            mem.write8(vm.index + i, regs.read(i))
    elif op is Op.LD_VX_MEM:
        for i in range(inst.x + 1):
            regs.write(i, mem.read8(vm.index + i))
    else:
        raise ValueError(f"Unhandled instruction: {op.name}")
