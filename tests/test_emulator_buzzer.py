"""
Buzzer Unit Tests
=================

Tests for the single-slot tone level shared with the audio backend.

Copyright (c) 2025 CHIP-8 VM Contributors
"""

import threading

from chip8vm.emulator import Buzzer
from chip8vm.emulator.buzzer import TONE_AMPLITUDE, TONE_FREQUENCY, ToneLevel


class TestBuzzer:
    """Test on/off commands."""

    def test_initially_off(self):
        buzzer = Buzzer()
        assert not buzzer.is_on
        assert buzzer.level == 0.0

    def test_on_sets_tone_amplitude(self):
        buzzer = Buzzer()
        buzzer.on()
        assert buzzer.is_on
        assert buzzer.level == TONE_AMPLITUDE == 0.2

    def test_off(self):
        buzzer = Buzzer()
        buzzer.on()
        buzzer.off()
        assert buzzer.level == 0.0

    def test_tone_frequency(self):
        assert TONE_FREQUENCY == 440

    def test_latest_command_wins(self):
        """Toggles between samples collapse to the last command."""
        buzzer = Buzzer()
        buzzer.on()
        buzzer.off()
        buzzer.on()
        buzzer.off()
        assert buzzer.level == 0.0


class TestToneLevel:
    """Test the shared level cell."""

    def test_overwrite(self):
        level = ToneLevel()
        level.set(0.5)
        level.set(0.2)
        assert level.get() == 0.2

    def test_reader_thread_sees_write(self):
        level = ToneLevel()
        seen = []

        level.set(TONE_AMPLITUDE)
        reader = threading.Thread(target=lambda: seen.append(level.get()))
        reader.start()
        reader.join()

        assert seen == [TONE_AMPLITUDE]
