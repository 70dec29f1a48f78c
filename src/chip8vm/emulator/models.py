"""
Display Color Definitions
=========================

Defines the pixel colors selectable for the emulated monochrome display.

Supported colors:
- white: Classic white-on-black
- green: Green phosphor monitor
- amber: Amber phosphor monitor

The background color is never chosen directly: it is derived from the
pixel color by keeping 10% of each channel at full opacity, so every
palette has a matching dim background.

Copyright (c) 2025 CHIP-8 VM Contributors
"""

from dataclasses import dataclass

from ..errors import ConfigurationError


BACKGROUND_DARKEN = 0.1


@dataclass(frozen=True)
class DisplayColor:
    """
    An RGBA color with channels in 0.0-1.0.

    Attributes:
        name: Palette name (e.g., "green")
        r: Red channel
        g: Green channel
        b: Blue channel
        a: Alpha channel (always 1.0 for palette entries)
    """
    name: str
    r: float
    g: float
    b: float
    a: float = 1.0

    def to_rgb(self) -> tuple[int, int, int]:
        """Convert to an 8-bit RGB tuple, as used by Pillow and pygame."""
        return (
            round(self.r * 255),
            round(self.g * 255),
            round(self.b * 255),
        )

    def darken(self, factor: float = BACKGROUND_DARKEN) -> "DisplayColor":
        """Scale every channel by `factor`, keeping full opacity."""
        return DisplayColor(
            name=f"{self.name}-background",
            r=self.r * factor,
            g=self.g * factor,
            b=self.b * factor,
            a=1.0,
        )

    @property
    def background(self) -> "DisplayColor":
        """Background color derived from this pixel color."""
        return self.darken(BACKGROUND_DARKEN)


# =============================================================================
# Predefined Colors
# =============================================================================

COLOR_WHITE = DisplayColor(name="white", r=0.95, g=0.95, b=0.95)
COLOR_GREEN = DisplayColor(name="green", r=0.0, g=0.95, b=0.0)
COLOR_AMBER = DisplayColor(name="amber", r=0.95, g=0.75, b=0.0)

COLOR_DEFAULT = COLOR_WHITE

_COLORS = {
    color.name: color
    for color in (COLOR_WHITE, COLOR_GREEN, COLOR_AMBER)
}


def get_color(name: str) -> DisplayColor:
    """
    Look up a pixel color by name.

    Args:
        name: Color name ("white", "green", "amber"), case-insensitive

    Returns:
        The matching DisplayColor

    Raises:
        ConfigurationError: If the name is not in the palette
    """
    color = _COLORS.get(name.lower())
    if color is None:
        raise ConfigurationError(
            f"Unsupported display color: {name!r} "
            f"(expected one of: {', '.join(list_colors())})"
        )
    return color


def list_colors() -> list[str]:
    """Names of all available pixel colors."""
    return list(_COLORS)
