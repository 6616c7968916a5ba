"""Shared fixtures for CPU tests."""

import random

import pytest

from chip8_vm.cpu.cpu import Chip8


@pytest.fixture
def make_vm():
    """Factory fixture: returns a function that creates a fresh, seeded VM."""
    def _make(seed: int = 0) -> Chip8:
        return Chip8(rng=random.Random(seed))
    return _make


@pytest.fixture
def exec_instruction(make_vm):
    """Write a 16-bit instruction word at PC and execute it, return the vm."""
    def _exec(vm: Chip8 | None = None, word: int = 0) -> Chip8:
        if vm is None:
            vm = make_vm()
        vm.memory.write8(vm.pc, word >> 8)
        vm.memory.write8(vm.pc + 1, word)
        vm.step()
        return vm
    return _exec


@pytest.fixture
def set_regs():
    """Set named registers (e.g., set_regs(vm, v1=5, vf=1))."""
    def _set(vm: Chip8, **kwargs: int) -> None:
        for name, value in kwargs.items():
            if not name.startswith("v"):
                raise ValueError(f"Register name must start with 'v': {name}")
            vm.registers.write(int(name[1:], 16), value)
    return _set
