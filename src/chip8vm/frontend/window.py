"""
pygame Window Front End
=======================

Presents the framebuffer and captures the keypad.

Display:
    Each render tick hands over a framebuffer snapshot. The window fills
    the background color and draws every lit cell as a 9 x 9 square on a
    10-unit pitch inside a 5-unit frame (650 x 330 window).

Keyboard:
    KEYDOWN/KEYUP events for keys in KEY_MAP become keypad events posted to
    the emulator's inbox; they take effect before the next tick. Losing
    window focus releases every held key, since the matching KEYUP events
    never arrive. Closing the window or pressing Escape stops the run loop.

pygame requires event handling on the thread that opened the window, so
events are pumped on every render tick from the run loop.

Copyright (c) 2025 CHIP-8 VM Contributors
"""

import logging
from typing import Optional

import pygame

from ..emulator import Emulator
from ..emulator.display import (
    DISPLAY_HEIGHT,
    DISPLAY_WIDTH,
    WINDOW_HEIGHT,
    WINDOW_WIDTH,
    Snapshot,
    cell_rect,
)
from ..emulator.keyboard import key_event_for
from ..errors import DeviceError
from .audio import PygameTone

logger = logging.getLogger(__name__)


WINDOW_TITLE = "CHIP-8 Emulator"


class PygameFrontend:
    """
    Window, keyboard and tone output for an Emulator.

    Example:
        >>> emu = Emulator.from_file("pong.ch8")
        >>> PygameFrontend(emu).run()
    """

    def __init__(self, emulator: Emulator, audio: bool = True):
        """
        Open the window (and the audio device when `audio` is True).

        Raises:
            DeviceError: If the display or audio device is unavailable
        """
        self.emulator = emulator
        self._pixel = emulator.pixel_color.to_rgb()
        self._background = emulator.background_color.to_rgb()
        self._quit = False

        try:
            pygame.display.init()
            pygame.display.set_caption(WINDOW_TITLE)
            self._screen = pygame.display.set_mode((WINDOW_WIDTH, WINDOW_HEIGHT))
        except pygame.error as e:
            raise DeviceError(f"Display unavailable: {e}") from e

        self._tone: Optional[PygameTone] = None
        if audio:
            try:
                self._tone = PygameTone(emulator.buzzer)
            except DeviceError:
                pygame.display.quit()
                raise

    def present(self, snapshot: Snapshot) -> None:
        """Draw a framebuffer snapshot and flip the window."""
        self._screen.fill(self._background)
        for y in range(DISPLAY_HEIGHT):
            row = snapshot[y]
            for x in range(DISPLAY_WIDTH):
                if row[x]:
                    self._screen.fill(self._pixel, pygame.Rect(cell_rect(x, y)))
        pygame.display.flip()

    def pump_events(self) -> None:
        """Translate pending window events into keypad events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self._quit = True
            elif event.type == pygame.WINDOWFOCUSLOST:
                self.emulator.release_all_keys()
            elif event.type in (pygame.KEYDOWN, pygame.KEYUP):
                if event.key == pygame.K_ESCAPE:
                    self._quit = True
                    continue
                key_event = key_event_for(
                    pygame.key.name(event.key),
                    event.type == pygame.KEYDOWN,
                )
                if key_event is not None:
                    self.emulator.post_key_event(key_event)

    def _on_render(self, snapshot: Snapshot) -> None:
        self.pump_events()
        self.present(snapshot)

    def run(self) -> int:
        """
        Run the emulator until the window is closed.

        Returns:
            Number of ticks dispatched
        """
        if self._tone is not None:
            self._tone.start()
        try:
            return self.emulator.run(
                on_render=self._on_render,
                should_stop=lambda: self._quit,
            )
        finally:
            self.close()

    def close(self) -> None:
        """Release the audio device and close the window."""
        if self._tone is not None:
            self._tone.stop()
            self._tone = None
        pygame.display.quit()
