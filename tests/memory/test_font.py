"""Tests for the built-in font table."""

import pytest

from chip8_vm.memory.font import FONT_BASE, FONTSET, GLYPH_SIZE, glyph_address


class TestFont:
    def test_layout(self) -> None:
        assert FONT_BASE == 0x050
        assert GLYPH_SIZE == 5
        assert len(FONTSET) == 80

    def test_fits_below_0xa0(self) -> None:
        assert FONT_BASE + len(FONTSET) == 0x0A0

    @pytest.mark.parametrize("digit", range(16))
    def test_glyph_address(self, digit: int) -> None:
        assert glyph_address(digit) == 0x050 + digit * 5

    def test_glyph_address_uses_low_nibble(self) -> None:
        assert glyph_address(0x1F) == glyph_address(0xF)

    def test_glyphs_use_left_four_columns(self) -> None:
        assert all(byte & 0x0F == 0 for byte in FONTSET)
