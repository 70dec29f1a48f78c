"""
Keypad State for the CHIP-8 VM
==============================

The CHIP-8 has a 16-key hexadecimal keypad. The host keyboard block
starting at "7" stands in for it:

    Host keys          CHIP-8 keypad
    7 8 9 0            1 2 3 C
    U I O P            4 5 6 D
    J K L ;            7 8 9 E
    M , . /            A 0 B F

Besides the set of pressed keys, the keypad owns the suspend protocol of
the "wait for key" instruction (Fx0A), modelled as a two-state machine:

    Running --await_key(r)--> AwaitingKey(r) --press(k)--> Running
                                   |                  (k written to Vr)
                                   +--release(k)--> AwaitingKey(r)

While AwaitingKey, the VM core does not execute instructions. Only a key
press resolves the wait; there is no cancellation.

Copyright (c) 2025 CHIP-8 VM Contributors
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Union

logger = logging.getLogger(__name__)


NUM_KEYS = 16

# =============================================================================
# KEY MAP
# =============================================================================
# Maps physical key names (as reported by pygame.key.name) to keypad values.

KEY_MAP: Dict[str, int] = {
    ",": 0x0,
    "7": 0x1,
    "8": 0x2,
    "9": 0x3,
    "u": 0x4,
    "i": 0x5,
    "o": 0x6,
    "j": 0x7,
    "k": 0x8,
    "l": 0x9,
    "m": 0xA,
    ".": 0xB,
    "0": 0xC,
    "p": 0xD,
    ";": 0xE,
    "/": 0xF,
}


class KeyEventType(Enum):
    """Keypad transition reported by the input collaborator."""
    PRESS = "press"
    RELEASE = "release"


@dataclass(frozen=True)
class KeyEvent:
    """
    A keypad press or release.

    Attributes:
        kind: PRESS or RELEASE
        key: Keypad value (0x0-0xF)
    """
    kind: KeyEventType
    key: int

    @classmethod
    def press(cls, key: int) -> "KeyEvent":
        return cls(KeyEventType.PRESS, key)

    @classmethod
    def release(cls, key: int) -> "KeyEvent":
        return cls(KeyEventType.RELEASE, key)


def key_event_for(name: str, pressed: bool) -> Optional[KeyEvent]:
    """
    Translate a physical key transition into a keypad event.

    Args:
        name: Physical key name (e.g., "u", ",")
        pressed: True for key down, False for key up

    Returns:
        KeyEvent, or None if the key is not mapped
    """
    key = KEY_MAP.get(name.lower())
    if key is None:
        return None
    return KeyEvent.press(key) if pressed else KeyEvent.release(key)


# =============================================================================
# WAIT STATE MACHINE
# =============================================================================

@dataclass(frozen=True)
class Running:
    """Instructions execute normally."""


@dataclass(frozen=True)
class AwaitingKey:
    """
    Execution suspended until a key press.

    Attributes:
        register: Index of the V register receiving the key value
    """
    register: int


WaitState = Union[Running, AwaitingKey]

RUNNING = Running()


class KeyState:
    """
    Pressed-key set plus the wait-for-key state machine.

    Example:
        >>> keys = KeyState()
        >>> keys.await_key(3)
        >>> keys.release(0x7)        # releases never resolve the wait
        >>> keys.press(0x7)          # returns the destination register
        3
        >>> keys.is_waiting
        False
    """

    def __init__(self):
        self._pressed: set[int] = set()
        self._state: WaitState = RUNNING

    @staticmethod
    def _check(key: int) -> None:
        if not 0 <= key < NUM_KEYS:
            raise ValueError(f"Key must be 0x0-0xF, got {key}")

    @property
    def state(self) -> WaitState:
        """Current wait state (Running or AwaitingKey)."""
        return self._state

    @property
    def is_waiting(self) -> bool:
        """True while an Fx0A instruction is waiting for a key press."""
        return isinstance(self._state, AwaitingKey)

    @property
    def pressed_keys(self) -> frozenset[int]:
        """Keys currently held down."""
        return frozenset(self._pressed)

    def await_key(self, register: int) -> None:
        """
        Suspend execution until the next key press.

        Args:
            register: V register index receiving the pressed key
        """
        if not 0 <= register < NUM_KEYS:
            raise ValueError(f"Register must be 0x0-0xF, got {register}")
        self._state = AwaitingKey(register)
        logger.debug(f"Waiting for keypad input into V{register:X}")

    def press(self, key: int) -> Optional[int]:
        """
        Press a key.

        Pressing an already pressed key leaves the set unchanged, but still
        resolves a pending wait.

        Args:
            key: Keypad value (0x0-0xF)

        Returns:
            Destination register if this press resolved a pending wait,
            otherwise None
        """
        self._check(key)
        self._pressed.add(key)

        state = self._state
        if isinstance(state, AwaitingKey):
            self._state = RUNNING
            logger.debug(f"Key {key:X} resolved wait for V{state.register:X}")
            return state.register
        return None

    def release(self, key: int) -> None:
        """
        Release a key. Releasing an unpressed key is a no-op.

        Args:
            key: Keypad value (0x0-0xF)
        """
        self._check(key)
        self._pressed.discard(key)

    def is_pressed(self, key: int) -> bool:
        """
        Check if a key is held down.

        Values outside 0x0-0xF are never pressed.
        """
        return key in self._pressed

    def clear(self) -> None:
        """Release all keys. A pending wait is kept."""
        self._pressed.clear()
