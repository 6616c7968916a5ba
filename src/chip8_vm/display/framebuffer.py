"""Framebuffer: 64x32 grid of 1-bit pixels with XOR sprite drawing."""

from __future__ import annotations

DISPLAY_WIDTH = 64
DISPLAY_HEIGHT = 32


class FrameBuffer:
    """Monochrome display buffer, stored row-major as one bytearray per row."""

    def __init__(self, width: int = DISPLAY_WIDTH, height: int = DISPLAY_HEIGHT) -> None:
        self.width = width
        self.height = height
        self._rows: list[bytearray] = [bytearray(width) for _ in range(height)]

    def clear(self) -> None:
        """Turn every pixel off."""
        for row in self._rows:
            row[:] = bytes(self.width)

    def pixel(self, x: int, y: int) -> int:
        """Pixel value at (x, y); coordinates wrap."""
        return self._rows[y % self.height][x % self.width]

    def draw_sprite(self, x: int, y: int, sprite: bytes) -> bool:
        """XOR a sprite onto the display.

        Each byte of `sprite` is one 8-pixel row, bit 7 leftmost. Pixels
        that fall off an edge wrap around to the opposite side rather than
        being clipped.

        Args:
            x: Column of the sprite's left edge.
            y: Row of the sprite's top edge.
            sprite: Row bytes, top to bottom.

        Returns:
            True if any lit pixel was turned off by the draw.
        """
        collision = False
        for row_index, bits in enumerate(sprite):
            row = self._rows[(y + row_index) % self.height]
            for col in range(8):
                if not bits & (0x80 >> col):
                    continue
                cx = (x + col) % self.width
                if row[cx]:
                    collision = True
                row[cx] ^= 1
        return collision

    def snapshot(self) -> tuple[tuple[int, ...], ...]:
        """Immutable copy of the display, indexed [row][column]."""
        return tuple(tuple(row) for row in self._rows)

    def lit_count(self) -> int:
        """Number of pixels currently on."""
        return sum(sum(row) for row in self._rows)
