"""
Buzzer for the CHIP-8 VM
========================

The CHIP-8 has a single tone output, gated by the sound timer: while the
timer is positive the tone sounds, when it reaches zero the tone stops.

The VM core only commands on/off. The commanded level is kept in a
single-slot cell (ToneLevel) that the audio backend samples from its own
thread. Writes overwrite, there is no queue: if the core commands ON then
OFF before the backend samples, the backend only ever sees OFF.

Copyright (c) 2025 CHIP-8 VM Contributors
"""

import threading
from typing import Protocol


TONE_FREQUENCY = 440  # Hz
TONE_AMPLITUDE = 0.2  # Fraction of full scale


class BuzzerProtocol(Protocol):
    """
    Protocol defining the tone output interface.

    The CPU drives the buzzer through this interface on every timer tick.
    """
    def on(self) -> None:
        """Command the tone on."""
        ...

    def off(self) -> None:
        """Command the tone off."""
        ...


class ToneLevel:
    """
    Single-slot, overwrite-on-write amplitude cell shared between threads.
    """

    def __init__(self, level: float = 0.0):
        self._lock = threading.Lock()
        self._level = level

    def set(self, level: float) -> None:
        with self._lock:
            self._level = level

    def get(self) -> float:
        with self._lock:
            return self._level


class Buzzer:
    """
    Device-independent buzzer.

    Stores the commanded amplitude; audio backends read `level`.

    Example:
        >>> buzzer = Buzzer()
        >>> buzzer.on()
        >>> buzzer.level
        0.2
        >>> buzzer.off()
        >>> buzzer.is_on
        False
    """

    def __init__(self):
        self._level = ToneLevel()

    def on(self) -> None:
        self._level.set(TONE_AMPLITUDE)

    def off(self) -> None:
        self._level.set(0.0)

    @property
    def level(self) -> float:
        """Latest commanded amplitude (0.0 or TONE_AMPLITUDE)."""
        return self._level.get()

    @property
    def is_on(self) -> bool:
        return self._level.get() > 0.0
