"""
chip8vm - CHIP-8 Virtual Machine
================================

This package runs historical CHIP-8 programs unmodified.

CHIP-8 is an interpreted 8-bit instruction set from the late 1970s, with
4 KB of memory, sixteen 8-bit registers, a 64 x 32 monochrome display,
a 16-key hexadecimal keypad and a single-tone buzzer.

Main Components
---------------
- **emulator**: The virtual machine (CPU, memory, framebuffer, keypad,
  timers, scheduler)
- **frontend**: pygame window, keyboard capture and tone output
- **cli**: Command-line tools (chip8run, chip8disasm)

Quick Start
-----------
Run a program headless:
    >>> from chip8vm import Emulator
    >>> emu = Emulator.from_file("maze.ch8")
    >>> emu.run_cycles(1000)
    >>> print(emu.framebuffer.to_text())

Or use the command-line tools:
    $ chip8run maze.ch8 --clock 500 --color green
    $ chip8disasm maze.ch8 --count 20

Reference Documentation
-----------------------
- Cowgod's CHIP-8 Technical Reference: http://devernay.free.fr/hacks/chip8/C8TECH10.HTM
"""

__version__ = "0.1.0"
__author__ = "CHIP-8 VM Contributors"

# =============================================================================
# Public API Exports
# =============================================================================

from chip8vm.emulator import (
    Emulator,
    EmulatorConfig,
    CPU,
    Memory,
    Framebuffer,
    KeyState,
    KeyEvent,
    Buzzer,
    Scheduler,
    decode,
    disassemble,
)
from chip8vm.errors import (
    Chip8Error,
    ConfigurationError,
    RomError,
    RomSizeError,
    MemoryAccessError,
    StackError,
    UnsupportedInstructionError,
    DeviceError,
)

__all__ = [
    # Version info
    "__version__",
    "__author__",
    # Emulator
    "Emulator",
    "EmulatorConfig",
    "CPU",
    "Memory",
    "Framebuffer",
    "KeyState",
    "KeyEvent",
    "Buzzer",
    "Scheduler",
    "decode",
    "disassemble",
    # Errors
    "Chip8Error",
    "ConfigurationError",
    "RomError",
    "RomSizeError",
    "MemoryAccessError",
    "StackError",
    "UnsupportedInstructionError",
    "DeviceError",
]
