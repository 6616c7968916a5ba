"""Tests for the TUI disassembly module."""

import pytest

from chip8_vm.cpu.decode import decode
from chip8_vm.memory.ram import Memory
from chip8_vm.tui.disasm import (
    DisassemblyLine,
    disassemble_instruction,
    disassemble_region,
    disassemble_rom,
)


class TestDisassembleInstruction:
    """Test disassemble_instruction produces conventional assembler text."""

    @pytest.mark.parametrize(
        "word, expected",
        [
            (0x00E0, "CLS"),
            (0x00EE, "RET"),
            (0x1228, "JP 0x228"),
            (0x2ABC, "CALL 0xABC"),
            (0x3A2F, "SE VA, 0x2F"),
            (0x4B01, "SNE VB, 0x01"),
            (0x5120, "SE V1, V2"),
            (0x6C7F, "LD VC, 0x7F"),
            (0x7DFF, "ADD VD, 0xFF"),
            (0x8120, "LD V1, V2"),
            (0x8121, "OR V1, V2"),
            (0x8122, "AND V1, V2"),
            (0x8123, "XOR V1, V2"),
            (0x8124, "ADD V1, V2"),
            (0x8125, "SUB V1, V2"),
            (0x8126, "SHR V1, V2"),
            (0x8127, "SUBN V1, V2"),
            (0x812E, "SHL V1, V2"),
            (0x9340, "SNE V3, V4"),
            (0xA123, "LD I, 0x123"),
            (0xB300, "JP V0, 0x300"),
            (0xC50F, "RND V5, 0x0F"),
            (0xD015, "DRW V0, V1, 5"),
            (0xE29E, "SKP V2"),
            (0xE2A1, "SKNP V2"),
            (0xF307, "LD V3, DT"),
            (0xF30A, "LD V3, K"),
            (0xF315, "LD DT, V3"),
            (0xF318, "LD ST, V3"),
            (0xF31E, "ADD I, V3"),
            (0xF329, "LD F, V3"),
            (0xF333, "LD B, V3"),
            (0xF355, "LD [I], V3"),
            (0xF365, "LD V3, [I]"),
        ],
    )
    def test_known(self, word: int, expected: str) -> None:
        assert disassemble_instruction(decode(word)) == expected

    @pytest.mark.parametrize("word", [0x0000, 0x0123, 0x5121, 0x8128, 0x9341, 0xE2FF, 0xF3FF])
    def test_unknown_renders_as_data(self, word: int) -> None:
        assert disassemble_instruction(decode(word)) == f"DW 0x{word:04X}"


class TestDisassembleRegion:
    """Test disassemble_region windows around the PC."""

    def test_centered_on_pc(self) -> None:
        mem = Memory()
        mem.load_segment(0x200, bytes.fromhex("00E0 6105 1200"))
        lines = disassemble_region(mem, 0x202, 5)
        assert [line.addr for line in lines] == [0x1FE, 0x200, 0x202, 0x204, 0x206]
        current = [line for line in lines if line.is_current]
        assert current == [DisassemblyLine(addr=0x202, word=0x6105, text="LD V1, 0x05", is_current=True)]

    def test_wraps_at_bottom(self) -> None:
        lines = disassemble_region(Memory(), 0x000, 3)
        assert [line.addr for line in lines] == [0xFFE, 0x000, 0x002]

    def test_count(self) -> None:
        assert len(disassemble_region(Memory(), 0x200, 21)) == 21


class TestDisassembleRom:
    """Test disassemble_rom walks a raw image word by word."""

    def test_addresses_from_base(self) -> None:
        lines = disassemble_rom(b"\x00\xE0\xA2\x2A", 0x200)
        assert [(line.addr, line.text) for line in lines] == [
            (0x200, "CLS"),
            (0x202, "LD I, 0x22A"),
        ]
        assert not any(line.is_current for line in lines)

    def test_odd_trailing_byte(self) -> None:
        lines = disassemble_rom(b"\x12\x00\x60", 0x200)
        assert len(lines) == 2
        assert lines[1].word == 0x6000

    def test_empty(self) -> None:
        assert disassemble_rom(b"", 0x200) == []
