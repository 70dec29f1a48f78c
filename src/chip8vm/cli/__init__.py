"""
CHIP-8 VM Command-Line Interface
================================

This package provides the command-line tools:

- **chip8run**: Run a program in a window
- **chip8disasm**: Disassemble a program image

Each tool is implemented as a Click-based CLI application with
consistent error reporting and exit codes.
"""

__all__ = ["chip8run", "chip8disasm"]
