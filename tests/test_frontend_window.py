"""
Window Front End Unit Tests
===========================

Tests for device setup failures and event translation. pygame's display
calls are replaced so no window is opened.

Copyright (c) 2025 CHIP-8 VM Contributors
"""

import pygame
import pytest
from chip8vm import Emulator, KeyEvent
from chip8vm.emulator.scheduler import ManualClock
from chip8vm.errors import DeviceError
from chip8vm.frontend import window


@pytest.fixture
def display_calls(monkeypatch):
    """Record pygame display calls instead of opening a window."""
    calls = []
    monkeypatch.setattr(pygame.display, "init", lambda: calls.append("init"))
    monkeypatch.setattr(pygame.display, "set_caption", lambda title: calls.append("caption"))
    monkeypatch.setattr(pygame.display, "set_mode", lambda size: calls.append("mode"))
    monkeypatch.setattr(pygame.display, "quit", lambda: calls.append("quit"))
    return calls


@pytest.fixture
def emu():
    return Emulator(bytes([0x12, 0x00]), clock=ManualClock())


def feed_events(monkeypatch, *events):
    monkeypatch.setattr(pygame.event, "get", lambda: list(events))


# =============================================================================
# Device Setup Tests
# =============================================================================

class TestDeviceSetup:
    """Test opening and releasing the display."""

    def test_display_failure(self, monkeypatch, emu):
        def broken_init():
            raise pygame.error("no video device")

        monkeypatch.setattr(pygame.display, "init", broken_init)
        with pytest.raises(DeviceError, match="Display unavailable"):
            window.PygameFrontend(emu, audio=False)

    def test_audio_failure_closes_display(self, monkeypatch, display_calls, emu):
        """A missing audio device leaves no window open behind it."""
        def broken_tone(buzzer):
            raise DeviceError("Audio output unavailable: no audio device")

        monkeypatch.setattr(window, "PygameTone", broken_tone)
        with pytest.raises(DeviceError, match="Audio output unavailable"):
            window.PygameFrontend(emu)
        assert display_calls == ["init", "caption", "mode", "quit"]

    def test_close_without_audio(self, display_calls, emu):
        frontend = window.PygameFrontend(emu, audio=False)
        frontend.close()
        assert display_calls[-1] == "quit"


# =============================================================================
# Event Tests
# =============================================================================

class TestEvents:
    """Test translation of window events."""

    def test_quit_event(self, monkeypatch, display_calls, emu):
        frontend = window.PygameFrontend(emu, audio=False)
        feed_events(monkeypatch, pygame.event.Event(pygame.QUIT))
        frontend.pump_events()
        assert frontend._quit

    def test_escape_stops(self, monkeypatch, display_calls, emu):
        frontend = window.PygameFrontend(emu, audio=False)
        feed_events(monkeypatch, pygame.event.Event(pygame.KEYDOWN, key=pygame.K_ESCAPE))
        frontend.pump_events()
        assert frontend._quit
        assert emu.drain_key_events() == 0

    def test_focus_loss_releases_keys(self, monkeypatch, display_calls, emu):
        """Keys held when focus is lost do not stay pressed."""
        frontend = window.PygameFrontend(emu, audio=False)
        emu.press_key(0x5)
        emu.post_key_event(KeyEvent.press(0xA))
        feed_events(monkeypatch, pygame.event.Event(pygame.WINDOWFOCUSLOST))
        frontend.pump_events()
        assert emu.keys.pressed_keys == frozenset()
