"""TUI display panel: renders the framebuffer as text using half-block glyphs."""

from __future__ import annotations

from collections.abc import Sequence

# Two pixel rows per text line: (top, bottom) -> glyph
_HALF_BLOCKS: dict[tuple[int, int], str] = {
    (0, 0): " ",
    (1, 0): "▀",
    (0, 1): "▄",
    (1, 1): "█",
}


def format_display(pixels: Sequence[Sequence[int]]) -> str:
    """Render a pixel grid, packing two rows into each line of text.

    Args:
        pixels: Grid indexed [row][column], values 0 or 1. An odd final
            row is paired with a blank row.

    Returns:
        One line per pair of pixel rows, each as wide as the grid.
    """
    lines: list[str] = []
    for y in range(0, len(pixels), 2):
        top = pixels[y]
        bottom = pixels[y + 1] if y + 1 < len(pixels) else [0] * len(top)
        lines.append("".join(_HALF_BLOCKS[(t, b)] for t, b in zip(top, bottom)))
    return "\n".join(lines)


def format_display_ascii(pixels: Sequence[Sequence[int]], on: str = "#", off: str = ".") -> str:
    """Render a pixel grid one character per pixel."""
    return "\n".join("".join(on if p else off for p in row) for row in pixels)
