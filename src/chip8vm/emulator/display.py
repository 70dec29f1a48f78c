"""
Framebuffer for the CHIP-8 VM
=============================

The CHIP-8 display is a 64 x 32 monochrome grid. Programs draw by XOR-ing
sprites onto it:

- A sprite is 1-15 bytes; each byte is one row of 8 pixels, MSB leftmost
- Coordinates wrap on both axes (column mod 64, row mod 32)
- Turning off a lit pixel is a "collision", reported to the program in VF

The framebuffer only stores pixels. Presentation belongs to the render
collaborator, which receives an immutable snapshot plus two colors. The
PNG renderer here follows the same geometry as the live window:

    cell side   = 10 units (9 lit + 1 gap)
    frame       = 5 units on each edge
    image size  = 10*64+10 x 10*32+10 = 650 x 330

Copyright (c) 2025 CHIP-8 VM Contributors
"""

import io
from typing import Sequence

from PIL import Image, ImageDraw

from .models import DisplayColor

# =============================================================================
# GEOMETRY
# =============================================================================

DISPLAY_WIDTH = 64
DISPLAY_HEIGHT = 32

PIXEL_SIZE = 10
PIXEL_GAP = 1
DISPLAY_FRAME = 5

WINDOW_WIDTH = PIXEL_SIZE * DISPLAY_WIDTH + DISPLAY_FRAME * 2
WINDOW_HEIGHT = PIXEL_SIZE * DISPLAY_HEIGHT + DISPLAY_FRAME * 2

# Immutable copy of the grid, indexed [row][column]
Snapshot = tuple[tuple[bool, ...], ...]


def cell_rect(x: int, y: int) -> tuple[int, int, int, int]:
    """
    Screen rectangle of a grid cell.

    Returns:
        (left, top, width, height) in display units
    """
    return (
        x * PIXEL_SIZE + DISPLAY_FRAME,
        y * PIXEL_SIZE + DISPLAY_FRAME,
        PIXEL_SIZE - PIXEL_GAP,
        PIXEL_SIZE - PIXEL_GAP,
    )


class Framebuffer:
    """
    64 x 32 monochrome pixel grid with XOR sprite drawing.

    Example:
        >>> fb = Framebuffer()
        >>> fb.draw_sprite(0, 0, bytes([0xC0, 0xC0]))
        False
        >>> fb.pixel(1, 1)
        True
        >>> fb.draw_sprite(0, 0, bytes([0xC0, 0xC0]))
        True
        >>> fb.lit_pixels()
        0
    """

    def __init__(self):
        self._pixels = [[False] * DISPLAY_WIDTH for _ in range(DISPLAY_HEIGHT)]

    @property
    def width(self) -> int:
        return DISPLAY_WIDTH

    @property
    def height(self) -> int:
        return DISPLAY_HEIGHT

    def clear(self) -> None:
        """Turn every pixel off."""
        for row in self._pixels:
            for x in range(DISPLAY_WIDTH):
                row[x] = False

    def draw_sprite(self, x: int, y: int, sprite: Sequence[int]) -> bool:
        """
        XOR a sprite onto the grid.

        Args:
            x: Column of the sprite's left edge (wraps mod 64)
            y: Row of the sprite's top edge (wraps mod 32)
            sprite: Sprite rows, one byte per row, MSB leftmost

        Returns:
            True if any lit pixel was turned off
        """
        collision = False

        for offset_y, line in enumerate(sprite):
            row = self._pixels[(y + offset_y) % DISPLAY_HEIGHT]
            for offset_x in range(8):
                wrapped_x = (x + offset_x) % DISPLAY_WIDTH
                old = row[wrapped_x]
                new = (line >> (7 - offset_x)) & 1 == 1
                row[wrapped_x] = old != new
                if old and new:
                    collision = True

        return collision

    def pixel(self, x: int, y: int) -> bool:
        """State of the pixel at column x, row y."""
        return self._pixels[y][x]

    def lit_pixels(self) -> int:
        """Number of lit pixels."""
        return sum(sum(row) for row in self._pixels)

    def snapshot(self) -> Snapshot:
        """Immutable copy of the grid for the render collaborator."""
        return tuple(tuple(row) for row in self._pixels)

    def to_text(self, on: str = "#", off: str = ".") -> str:
        """Render the grid as text, one line per row."""
        return "\n".join(
            "".join(on if lit else off for lit in row)
            for row in self._pixels
        )


def render_image(
    snapshot: Snapshot,
    pixel_color: DisplayColor,
    background_color: DisplayColor,
) -> bytes:
    """
    Render a framebuffer snapshot as a PNG image.

    Uses the same geometry as the live window: each lit cell is a
    9 x 9 square on a 10-unit pitch, inside a 5-unit frame.

    Args:
        snapshot: Grid from Framebuffer.snapshot()
        pixel_color: Color of lit cells
        background_color: Color of everything else

    Returns:
        PNG image bytes (650 x 330)
    """
    img = Image.new("RGB", (WINDOW_WIDTH, WINDOW_HEIGHT), color=background_color.to_rgb())
    draw = ImageDraw.Draw(img)
    ink = pixel_color.to_rgb()

    for y, row in enumerate(snapshot):
        for x, lit in enumerate(row):
            if lit:
                left, top, width, height = cell_rect(x, y)
                draw.rectangle(
                    [left, top, left + width - 1, top + height - 1],
                    fill=ink
                )

    buffer = io.BytesIO()
    img.save(buffer, format="PNG")
    return buffer.getvalue()
