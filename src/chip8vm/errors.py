"""
CHIP-8 VM Error Hierarchy
=========================

This module defines the exception hierarchy for the whole package.
All exceptions inherit from Chip8Error, allowing callers to catch every
VM-related error with a single except clause if desired.

Exception Hierarchy
-------------------
Chip8Error (base)
├── ConfigurationError - invalid clock rate or color name
├── RomError (program loading)
│   └── RomSizeError - program does not fit in program space
├── MemoryAccessError - address outside the 4 KB address space
├── StackError - call stack overflow or underflow
├── UnsupportedInstructionError - opcode outside the instruction set
└── DeviceError - display or audio device unavailable

Design Philosophy
-----------------
Except for configuration and ROM errors, which are reported before the VM
starts, every error here is fatal: the VM does not retry or recover from a
bad opcode or an out-of-range access. The exceptions carry enough context
(addresses, opcode nibbles) to produce a useful message on exit.

Copyright (c) 2025 CHIP-8 VM Contributors
"""

from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class Chip8Error(Exception):
    """
    Base exception for all CHIP-8 VM errors.

        try:
            emulator.run()
        except Chip8Error as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Configuration Exceptions
# =============================================================================

class ConfigurationError(Chip8Error):
    """
    Invalid emulator configuration (clock rate, color name).

    Raised at startup, before any instruction executes.
    """
    pass


# =============================================================================
# ROM Exceptions
# =============================================================================

class RomError(Chip8Error):
    """Base exception for program loading errors."""
    pass


class RomSizeError(RomError):
    """
    Program is larger than the available program space.

    Attributes:
        size: Size of the rejected program in bytes
        capacity: Number of bytes available for programs
    """

    def __init__(self, size: int, capacity: int):
        self.size = size
        self.capacity = capacity
        super().__init__(
            f"ROM is {size} bytes, exceeds program capacity of "
            f"{capacity} bytes (0x{capacity:03X})"
        )


# =============================================================================
# Runtime Exceptions
# =============================================================================

class MemoryAccessError(Chip8Error):
    """
    Memory access outside the address space.

    Attributes:
        address: The offending address
    """

    def __init__(self, address: int, message: Optional[str] = None):
        self.address = address
        super().__init__(message or f"Memory access out of range: ${address:04X}")


class StackError(Chip8Error):
    """Call stack overflow (17th nested call) or underflow (return with empty stack)."""

    def __init__(self, message: str, pc: int):
        self.pc = pc
        super().__init__(f"{message} at ${pc:03X}")


class UnsupportedInstructionError(Chip8Error):
    """
    Opcode not part of the instruction set.

    Attributes:
        word: The 16-bit instruction word
        address: Address it was fetched from (None when decoded standalone)
    """

    def __init__(self, word: int, address: Optional[int] = None):
        self.word = word
        self.address = address
        nibbles = "".join(f"{(word >> shift) & 0xF:X}" for shift in (12, 8, 4, 0))
        message = f"Unsupported instruction: {nibbles}"
        if address is not None:
            message += f" at ${address:03X}"
        super().__init__(message)

    @property
    def nibbles(self) -> tuple[int, int, int, int]:
        """The four 4-bit fields of the offending word."""
        return (
            (self.word >> 12) & 0xF,
            (self.word >> 8) & 0xF,
            (self.word >> 4) & 0xF,
            self.word & 0xF,
        )


# =============================================================================
# Front End Exceptions
# =============================================================================

class DeviceError(Chip8Error):
    """Display window or audio output could not be opened."""
    pass
