"""
pygame front end: window presentation, keypad capture and tone output.
"""

from .audio import PygameTone, make_tone
from .window import PygameFrontend

__all__ = ["PygameFrontend", "PygameTone", "make_tone"]
