"""
CHIP-8 Virtual Machine
======================

An emulator for the original CHIP-8 interpreted instruction set.

This package provides:

- **VM Core**: Registers, call stack, timers, all original opcodes
- **Memory**: 4 KB address space with built-in hexadecimal font
- **Framebuffer**: 64 x 32 XOR-drawn monochrome display
- **Keypad**: 16 keys with the "wait for key" suspend protocol
- **Buzzer**: Sound-timer gated tone level
- **Scheduler**: Deterministic merge of clock, timer and render ticks

Quick Start
-----------

Basic usage::

    >>> from chip8vm.emulator import Emulator
    >>> emu = Emulator(bytes([0x6A, 0x3C, 0x7A, 0xFF]))
    >>> emu.run_cycles(2)
    2
    >>> hex(emu.cpu.v[0xA])
    '0x3b'

Deterministic runs with virtual time::

    >>> from chip8vm.emulator import ManualClock, EmulatorConfig
    >>> emu = Emulator(rom, EmulatorConfig(clock_hz=60), clock=ManualClock())
    >>> emu.run(max_ticks=180)  # one virtual second
    180

Module Structure
----------------

- `emulator.py`: Main Emulator class (high-level API)
- `cpu.py`: Registers and fetch-decode-execute
- `decoder.py`: Opcode table, mnemonics, disassembly
- `memory.py`: Address space and font
- `display.py`: Framebuffer and PNG rendering
- `keyboard.py`: Keypad state and key map
- `buzzer.py`: Tone level
- `scheduler.py`: Tick scheduling
- `models.py`: Display colors

Copyright (c) 2025 CHIP-8 VM Contributors
"""

# Main entry point
from .emulator import Emulator, EmulatorConfig

# CPU components
from .cpu import CPU, CPUState
from .decoder import (
    Op,
    Instruction,
    DisassembledInstruction,
    OPCODE_TABLE,
    decode,
    disassemble,
)

# Memory subsystem
from .memory import Memory, FONT, MEMORY_SIZE, PROGRAM_START, PROGRAM_CAPACITY

# I/O
from .display import (
    Framebuffer,
    Snapshot,
    render_image,
    DISPLAY_WIDTH,
    DISPLAY_HEIGHT,
    WINDOW_WIDTH,
    WINDOW_HEIGHT,
)
from .keyboard import (
    KeyState,
    KeyEvent,
    KeyEventType,
    Running,
    AwaitingKey,
    KEY_MAP,
    key_event_for,
)
from .buzzer import Buzzer, BuzzerProtocol, ToneLevel, TONE_FREQUENCY, TONE_AMPLITUDE

# Scheduling
from .scheduler import Scheduler, Tick, TickKind, MonotonicClock, ManualClock

# Colors
from .models import (
    DisplayColor,
    get_color,
    list_colors,
    COLOR_WHITE,
    COLOR_GREEN,
    COLOR_AMBER,
    COLOR_DEFAULT,
)

__all__ = [
    # Main API
    "Emulator",
    "EmulatorConfig",

    # CPU
    "CPU",
    "CPUState",
    "Op",
    "Instruction",
    "DisassembledInstruction",
    "OPCODE_TABLE",
    "decode",
    "disassemble",

    # Memory
    "Memory",
    "FONT",
    "MEMORY_SIZE",
    "PROGRAM_START",
    "PROGRAM_CAPACITY",

    # Display
    "Framebuffer",
    "Snapshot",
    "render_image",
    "DISPLAY_WIDTH",
    "DISPLAY_HEIGHT",
    "WINDOW_WIDTH",
    "WINDOW_HEIGHT",

    # Keypad
    "KeyState",
    "KeyEvent",
    "KeyEventType",
    "Running",
    "AwaitingKey",
    "KEY_MAP",
    "key_event_for",

    # Buzzer
    "Buzzer",
    "BuzzerProtocol",
    "ToneLevel",
    "TONE_FREQUENCY",
    "TONE_AMPLITUDE",

    # Scheduling
    "Scheduler",
    "Tick",
    "TickKind",
    "MonotonicClock",
    "ManualClock",

    # Colors
    "DisplayColor",
    "get_color",
    "list_colors",
    "COLOR_WHITE",
    "COLOR_GREEN",
    "COLOR_AMBER",
    "COLOR_DEFAULT",
]
