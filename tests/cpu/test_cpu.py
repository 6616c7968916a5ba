"""Tests for the VM facade: reset, ROM loading, fetch cycle and host interface."""

import pytest

from chip8_vm.cpu.cpu import Chip8, StepOutcome
from chip8_vm.errors import RomTooLargeError
from chip8_vm.memory.font import FONT_BASE, FONTSET

START = 0x200


def _program(*words: int) -> bytes:
    return b"".join(w.to_bytes(2, "big") for w in words)


class TestInitialize:
    def test_program_counter(self) -> None:
        assert Chip8().pc == 0x200

    def test_memory_size(self) -> None:
        assert len(Chip8().memory) == 4096

    def test_registers_zero(self) -> None:
        vm = Chip8()
        assert vm.registers.snapshot() == [0] * 16
        assert vm.index == 0

    def test_stack_empty(self) -> None:
        assert len(Chip8().stack) == 0

    def test_display_blank(self) -> None:
        display = Chip8().get_display()
        assert len(display) == 32
        assert all(len(row) == 64 for row in display)
        assert not any(any(row) for row in display)

    def test_font_loaded(self) -> None:
        vm = Chip8()
        assert vm.memory.read_block(FONT_BASE, len(FONTSET)) == FONTSET
        assert vm.memory.read8(FONT_BASE - 1) == 0

    def test_reinitialize_resets_everything(self) -> None:
        vm = Chip8()
        vm.load_rom(_program(0x6A05, 0x2300))
        vm.step()
        vm.step()
        vm.timers.delay = 9
        vm.display.draw_sprite(0, 0, b"\x80")
        vm.initialize()
        assert vm.pc == START
        assert vm.registers.read(0xA) == 0
        assert len(vm.stack) == 0
        assert vm.timers.delay == 0
        assert vm.display.lit_count() == 0
        assert vm.memory.read8(START) == 0
        assert vm.cycle_count == 0
        assert vm.instruction_stats == {}


class TestLoadRom:
    def test_copies_at_0x200(self) -> None:
        vm = Chip8()
        vm.load_rom(bytes([0x1, 0x2, 0x3]))
        assert vm.memory.read_block(0x200, 3) == bytes([1, 2, 3])

    def test_accepts_maximum_size(self) -> None:
        vm = Chip8()
        vm.load_rom(bytes([0xAB]) * (4096 - 0x200))
        assert vm.memory.read8(0xFFF) == 0xAB

    def test_rejects_oversized_rom_without_touching_memory(self) -> None:
        vm = Chip8()
        vm.load_rom(bytes([0x12, 0x34]))
        with pytest.raises(RomTooLargeError):
            vm.load_rom(bytes([0xFF]) * (4096 - 0x200 + 1))
        assert vm.memory.read_block(0x200, 3) == bytes([0x12, 0x34, 0x00])

    def test_error_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            Chip8().load_rom(bytes(5000))


class TestStep:
    def test_fetches_big_endian_word(self) -> None:
        vm = Chip8()
        vm.load_rom(bytes([0xAA, 0xBB]))
        vm.step()
        assert vm.instruction_stats == {"LD_I": 1}
        assert vm.index == 0xABB
        assert vm.pc == START + 2

    def test_increments_cycle(self) -> None:
        vm = Chip8()
        vm.load_rom(_program(0x6001))
        assert vm.cycle_count == 0
        vm.step()
        assert vm.cycle_count == 1

    def test_returns_executed(self) -> None:
        vm = Chip8()
        vm.load_rom(_program(0x6001))
        assert vm.step() is StepOutcome.EXECUTED

    def test_multiple_steps(self) -> None:
        vm = Chip8()
        vm.load_rom(_program(0x6105, 0x620A, 0x8124))
        for _ in range(3):
            vm.step()
        assert vm.registers.read(1) == 15

    def test_fetch_wraps_at_top_of_memory(self) -> None:
        vm = Chip8()
        vm.pc = 0xFFE
        vm.memory.write8(0xFFE, 0x60)
        vm.memory.write8(0xFFF, 0x07)
        vm.step()
        assert vm.registers.read(0) == 7
        assert vm.pc == 0x000

    def test_instruction_stats(self) -> None:
        vm = Chip8()
        vm.load_rom(_program(0x7001, 0x7001, 0x1200))
        for _ in range(5):
            vm.step()
        assert vm.instruction_stats == {"ADD_VX_BYTE": 4, "JP": 1}


class TestTimers:
    def test_tick_decrements(self) -> None:
        vm = Chip8()
        vm.timers.delay = 2
        vm.timers.sound = 1
        vm.tick_60hz()
        assert vm.timers.delay == 1
        assert vm.timers.sound == 0
        assert not vm.is_sound_active()

    def test_sound_active_while_nonzero(self) -> None:
        vm = Chip8()
        vm.load_rom(_program(0x6102, 0xF118))
        vm.step()
        vm.step()
        assert vm.is_sound_active()
        vm.tick_60hz()
        assert vm.is_sound_active()
        vm.tick_60hz()
        assert not vm.is_sound_active()

    def test_tick_stops_at_zero(self) -> None:
        vm = Chip8()
        vm.tick_60hz()
        assert vm.timers.delay == 0
        assert vm.timers.sound == 0

    def test_frozen_while_awaiting_key(self) -> None:
        vm = Chip8()
        vm.load_rom(_program(0xF00A))
        vm.timers.delay = 5
        vm.timers.sound = 5
        vm.step()
        vm.tick_60hz()
        assert vm.timers.delay == 5
        assert vm.timers.sound == 5

    def test_resume_after_key(self) -> None:
        vm = Chip8()
        vm.load_rom(_program(0xF00A))
        vm.timers.delay = 5
        vm.step()
        vm.set_keys([True] + [False] * 15)
        vm.step()
        vm.tick_60hz()
        assert vm.timers.delay == 4

    def test_steps_do_not_touch_timers(self) -> None:
        vm = Chip8()
        vm.load_rom(_program(0x7001, 0x1200))
        vm.timers.delay = 3
        for _ in range(50):
            vm.step()
        assert vm.timers.delay == 3


class TestRunFrame:
    def test_steps_then_ticks(self) -> None:
        vm = Chip8()
        vm.load_rom(_program(0x7001, 0x1200))
        vm.timers.delay = 10
        vm.run_frame(10)
        assert vm.cycle_count == 10
        assert vm.registers.read(0) == 5
        assert vm.timers.delay == 9


class TestKeys:
    def test_set_keys_requires_sixteen(self) -> None:
        with pytest.raises(ValueError):
            Chip8().set_keys([True] * 15)

    def test_set_keys_replaces_snapshot(self) -> None:
        vm = Chip8()
        vm.set_keys([True] * 16)
        vm.set_keys([False] * 16)
        assert vm.keypad.first_pressed() is None


class TestDisplayView:
    def test_snapshot_is_immutable(self) -> None:
        vm = Chip8()
        display = vm.get_display()
        with pytest.raises(TypeError):
            display[0][0] = 1  # type: ignore[index]

    def test_snapshot_does_not_track_later_draws(self) -> None:
        vm = Chip8()
        before = vm.get_display()
        vm.display.draw_sprite(0, 0, b"\x80")
        assert before[0][0] == 0
        assert vm.get_display()[0][0] == 1


class TestRegisterMasking:
    def test_pc_masked(self) -> None:
        vm = Chip8()
        vm.pc = 0x1202
        assert vm.pc == 0x202

    def test_index_masked(self) -> None:
        vm = Chip8()
        vm.index = 0xF123
        assert vm.index == 0x123
