"""
Memory Subsystem for the CHIP-8 VM
==================================

Memory Map:
    $000-$04F  Built-in font (16 glyphs x 5 bytes, digits 0-F)
    $050-$1FF  Unused (historically the interpreter itself)
    $200-$FFF  Program space (ROM loaded verbatim at $200)

The address space is a flat 4096-byte array. Every access is validated:
an address outside [0, 4096) is a defect in the running program (or in the
VM) and raises MemoryAccessError instead of wrapping or being ignored.

Copyright (c) 2025 CHIP-8 VM Contributors
"""

import logging

from ..errors import MemoryAccessError, RomSizeError

logger = logging.getLogger(__name__)


MEMORY_SIZE = 0x1000
PROGRAM_START = 0x200
PROGRAM_CAPACITY = MEMORY_SIZE - PROGRAM_START  # 0xE00 bytes

FONT_SIZE = 5  # Bytes per glyph
MAX_SPRITE_SIZE = 15

# Built-in 4x5 hexadecimal font. Each byte is one row, high nibble = pixels.
FONT = bytes([
    0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
    0x20, 0x60, 0x20, 0x20, 0x70,  # 1
    0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
    0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
    0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
    0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
    0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
    0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
    0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
    0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
    0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
    0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
    0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
    0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
    0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
    0xF0, 0x80, 0xF0, 0x80, 0x80,  # F
])


class Memory:
    """
    Flat 4 KB memory holding the font and the loaded program.

    Example:
        >>> memory = Memory(bytes([0x00, 0xE0]))
        >>> memory.load(0x200), memory.load(0x201)
        (0, 224)
        >>> memory.font_addr(0xA)
        50
    """

    def __init__(self, rom: bytes = b""):
        """
        Initialize memory with font and program.

        Args:
            rom: Raw program bytes, copied to $200

        Raises:
            RomSizeError: If the program is larger than 0xE00 bytes
        """
        if len(rom) > PROGRAM_CAPACITY:
            raise RomSizeError(len(rom), PROGRAM_CAPACITY)

        self._data = bytearray(MEMORY_SIZE)
        self._data[0:len(FONT)] = FONT
        self._data[PROGRAM_START:PROGRAM_START + len(rom)] = rom

        logger.debug(f"Loaded {len(rom)} byte program at ${PROGRAM_START:03X}")

    @property
    def size(self) -> int:
        """Size of the address space in bytes."""
        return len(self._data)

    def _check(self, address: int) -> None:
        if not 0 <= address < MEMORY_SIZE:
            raise MemoryAccessError(address)

    def load(self, address: int) -> int:
        """
        Read byte from memory.

        Args:
            address: Address in [0, 4096)

        Returns:
            Byte value at address

        Raises:
            MemoryAccessError: If address is out of range
        """
        self._check(address)
        return self._data[address]

    def store(self, address: int, value: int) -> None:
        """
        Write byte to memory.

        Args:
            address: Address in [0, 4096)
            value: Byte value (masked to 8 bits)

        Raises:
            MemoryAccessError: If address is out of range
        """
        self._check(address)
        self._data[address] = value & 0xFF

    def load_word(self, address: int) -> int:
        """Read a big-endian 16-bit word (an instruction)."""
        return (self.load(address) << 8) | self.load(address + 1)

    def load_sprite(self, address: int, length: int) -> bytes:
        """
        Read sprite rows for drawing.

        The rows are copied out, so the result stays valid across later
        stores to the same region.

        Args:
            address: Address of the first row
            length: Number of rows (0-15)

        Returns:
            Copy of the sprite bytes

        Raises:
            ValueError: If length is not in 0-15
            MemoryAccessError: If any row lies outside memory
        """
        if not 0 <= length <= MAX_SPRITE_SIZE:
            raise ValueError(f"Sprite length must be 0-{MAX_SPRITE_SIZE}, got {length}")
        if length:
            self._check(address)
            self._check(address + length - 1)
        return bytes(self._data[address:address + length])

    def dump(self, address: int, length: int) -> bytes:
        """Return a copy of `length` bytes starting at `address`."""
        if length:
            self._check(address)
            self._check(address + length - 1)
        return bytes(self._data[address:address + length])

    @staticmethod
    def font_addr(digit: int) -> int:
        """
        Address of the built-in glyph for a hex digit.

        Only the low nibble is used, so any register value maps to a glyph.
        """
        return (digit & 0x0F) * FONT_SIZE
