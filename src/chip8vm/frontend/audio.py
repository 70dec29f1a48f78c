"""
pygame Tone Output
==================

Plays the buzzer tone: a constant 440 Hz sine at 20% of full scale.

The tone loops forever on a mixer channel whose volume is switched
between 0 and 1. A daemon thread samples the buzzer's single-slot level
and applies it to the channel, so the VM thread never touches the audio
device. Toggles shorter than the sampling interval may be coalesced.

Copyright (c) 2025 CHIP-8 VM Contributors
"""

import logging
import threading

import numpy as np
import pygame

from ..emulator.buzzer import Buzzer, TONE_AMPLITUDE, TONE_FREQUENCY
from ..errors import DeviceError

logger = logging.getLogger(__name__)


SAMPLE_RATE = 44100
SAMPLE_INTERVAL = 0.005  # Seconds between level samples


def make_tone(sample_rate: int, channels: int) -> np.ndarray:
    """
    One second of the buzzer tone as int16 samples.

    A whole second holds an integer number of 440 Hz cycles, so the
    buffer loops without a click.

    Args:
        sample_rate: Mixer sample rate
        channels: Mixer channel count (the mono wave is duplicated)

    Returns:
        Array of shape (sample_rate,) or (sample_rate, channels)
    """
    t = np.arange(sample_rate) / sample_rate
    wave = np.sin(2 * np.pi * TONE_FREQUENCY * t) * TONE_AMPLITUDE * 32767
    wave = wave.astype(np.int16)
    if channels > 1:
        wave = np.column_stack([wave] * channels)
    return wave


class PygameTone:
    """
    Audio backend driven by a Buzzer's tone level.

    Example:
        >>> buzzer = Buzzer()
        >>> tone = PygameTone(buzzer)
        >>> tone.start()
        >>> buzzer.on()     # audible within SAMPLE_INTERVAL
        >>> tone.stop()
    """

    def __init__(self, buzzer: Buzzer, sample_rate: int = SAMPLE_RATE):
        """
        Open the audio device and prepare the tone.

        Raises:
            DeviceError: If the audio device is unavailable
        """
        self.buzzer = buzzer
        try:
            pygame.mixer.init(sample_rate, -16, 1, 512)
            frequency, _format, channels = pygame.mixer.get_init()
            self._sound = pygame.sndarray.make_sound(make_tone(frequency, channels))
        except pygame.error as e:
            raise DeviceError(f"Audio output unavailable: {e}") from e

        self._channel = None
        self._stop = threading.Event()
        self._thread = threading.Thread(target=self._sample_loop, name="chip8-tone", daemon=True)

    def start(self) -> None:
        """Start the silent loop and the sampling thread."""
        self._channel = self._sound.play(loops=-1)
        if self._channel is None:
            raise DeviceError("Audio output unavailable: no free mixer channel")
        self._channel.set_volume(0.0)
        self._thread.start()
        logger.debug(f"Tone output started ({TONE_FREQUENCY} Hz)")

    def _sample_loop(self) -> None:
        playing = False
        while not self._stop.wait(SAMPLE_INTERVAL):
            audible = self.buzzer.level > 0.0
            if audible != playing:
                self._channel.set_volume(1.0 if audible else 0.0)
                playing = audible

    def stop(self) -> None:
        """Stop sampling and release the audio device."""
        self._stop.set()
        if self._thread.is_alive():
            self._thread.join()
        self._sound.stop()
        pygame.mixer.quit()
