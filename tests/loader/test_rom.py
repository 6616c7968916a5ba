"""Tests for reading ROM files from disk."""

import logging
from pathlib import Path

import pytest

from chip8_vm.cpu.cpu import Chip8
from chip8_vm.errors import RomTooLargeError
from chip8_vm.loader import MAX_ROM_SIZE, load_rom_file, read_rom


def _write(tmp_path: Path, data: bytes, name: str = "game.ch8") -> Path:
    path = tmp_path / name
    path.write_bytes(data)
    return path


class TestReadRom:
    def test_returns_bytes(self, tmp_path: Path) -> None:
        path = _write(tmp_path, b"\x00\xE0\x12\x00")
        assert read_rom(path) == b"\x00\xE0\x12\x00"

    def test_accepts_str_path(self, tmp_path: Path) -> None:
        path = _write(tmp_path, b"\x12\x00")
        assert read_rom(str(path)) == b"\x12\x00"

    def test_empty_file(self, tmp_path: Path) -> None:
        assert read_rom(_write(tmp_path, b"")) == b""

    def test_maximum_size(self, tmp_path: Path) -> None:
        data = bytes(MAX_ROM_SIZE)
        assert len(read_rom(_write(tmp_path, data))) == 3584

    def test_too_large(self, tmp_path: Path) -> None:
        path = _write(tmp_path, bytes(MAX_ROM_SIZE + 1))
        with pytest.raises(RomTooLargeError) as excinfo:
            read_rom(path)
        assert excinfo.value.size == 3585
        assert excinfo.value.limit == 3584

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(OSError):
            read_rom(tmp_path / "missing.ch8")

    def test_odd_length_warns(self, tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
        path = _write(tmp_path, b"\x12\x00\x00")
        with caplog.at_level(logging.WARNING, logger="chip8_vm.loader.rom"):
            assert read_rom(path) == b"\x12\x00\x00"
        assert "odd length 3" in caplog.text


class TestLoadRomFile:
    def test_loads_at_program_start(self, tmp_path: Path) -> None:
        vm = Chip8()
        size = load_rom_file(vm, _write(tmp_path, b"\x60\x2A"))
        assert size == 2
        assert vm.memory.read16(0x200) == 0x602A

    def test_runs_loaded_program(self, tmp_path: Path) -> None:
        vm = Chip8()
        load_rom_file(vm, _write(tmp_path, b"\x60\x2A"))
        vm.step()
        assert vm.registers.read(0) == 0x2A

    def test_oversized_leaves_vm_untouched(self, tmp_path: Path) -> None:
        vm = Chip8()
        vm.load_rom(b"\x12\x00")
        with pytest.raises(RomTooLargeError):
            load_rom_file(vm, _write(tmp_path, b"\xFF" * 4000))
        assert vm.memory.read16(0x200) == 0x1200
