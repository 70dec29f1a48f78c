"""
Tone Buffer Unit Tests
======================

Tests for the sample buffer played while the buzzer is on. Only the
buffer is exercised; no audio device is opened.

Copyright (c) 2025 CHIP-8 VM Contributors
"""

import numpy as np
import pytest
from chip8vm.emulator.buzzer import TONE_AMPLITUDE, TONE_FREQUENCY
from chip8vm.frontend.audio import make_tone


class TestMakeTone:
    """Test the generated 440 Hz sine."""

    def test_mono_shape(self):
        wave = make_tone(22050, 1)
        assert wave.shape == (22050,)
        assert wave.dtype == np.int16

    @pytest.mark.parametrize("channels", [2, 4])
    def test_channels_duplicated(self, channels):
        wave = make_tone(44100, channels)
        assert wave.shape == (44100, channels)
        assert wave.dtype == np.int16
        for channel in range(1, channels):
            assert np.array_equal(wave[:, channel], wave[:, 0])

    def test_peak_is_twenty_percent_of_full_scale(self):
        wave = make_tone(44100, 2)
        peak = int(np.abs(wave).max())
        assert abs(peak - int(TONE_AMPLITUDE * 32767)) <= 1

    def test_dominant_frequency(self):
        """One second of samples puts the spectral peak on the 440 Hz bin."""
        wave = make_tone(44100, 1).astype(np.float64)
        spectrum = np.abs(np.fft.rfft(wave))
        assert int(np.argmax(spectrum)) == TONE_FREQUENCY == 440

    def test_loops_without_click(self):
        """The buffer holds whole cycles, so it starts and ends near zero."""
        wave = make_tone(44100, 1)
        assert wave[0] == 0
        assert abs(int(wave[-1])) < abs(int(wave.max())) // 10
