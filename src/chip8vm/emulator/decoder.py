"""
CHIP-8 Instruction Decoder
==========================

Pure mapping from a 16-bit instruction word to a tagged Instruction.

Every CHIP-8 instruction is two bytes, big-endian, read as four nibbles
h1 h2 h3 h4. The operand fields are always in the same place:

    nnn = h2 h3 h4    12-bit address
    kk  = h3 h4       8-bit immediate
    x   = h2          register index
    y   = h3          register index
    n   = h4          4-bit immediate (sprite height)

Dispatch is data driven: OPCODE_TABLE lists (mask, pattern, op) entries and
the first entry whose masked bits match wins. Decoding has no side effects,
so the table can be tested separately from the register and memory effects
applied by the CPU.

The same decoder feeds the execution trace and the disassembler, so both
print identical mnemonics.

Copyright (c) 2025 CHIP-8 VM Contributors
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional

from ..errors import UnsupportedInstructionError


class Op(Enum):
    """Instruction forms of the original CHIP-8 instruction set."""
    CLS = "00E0"
    RET = "00EE"
    JP = "1nnn"
    CALL = "2nnn"
    SE_BYTE = "3xkk"
    SNE_BYTE = "4xkk"
    SE_REG = "5xy0"
    LD_BYTE = "6xkk"
    ADD_BYTE = "7xkk"
    LD_REG = "8xy0"
    OR = "8xy1"
    AND = "8xy2"
    XOR = "8xy3"
    ADD_REG = "8xy4"
    SUB = "8xy5"
    SHR = "8xy6"
    SUBN = "8xy7"
    SHL = "8xyE"
    SNE_REG = "9xy0"
    LD_I = "Annn"
    JP_V0 = "Bnnn"
    RND = "Cxkk"
    DRW = "Dxyn"
    SKP = "Ex9E"
    SKNP = "ExA1"
    LD_VX_DT = "Fx07"
    LD_VX_K = "Fx0A"
    LD_DT_VX = "Fx15"
    LD_ST_VX = "Fx18"
    ADD_I_VX = "Fx1E"
    LD_F_VX = "Fx29"
    LD_B_VX = "Fx33"
    LD_MEM_VX = "Fx55"
    LD_VX_MEM = "Fx65"


# =============================================================================
# OPCODE TABLE
# =============================================================================
# (mask, pattern, op): word matches when (word & mask) == pattern.

OPCODE_TABLE: tuple[tuple[int, int, Op], ...] = (
    (0xFFFF, 0x00E0, Op.CLS),
    (0xFFFF, 0x00EE, Op.RET),
    (0xF000, 0x1000, Op.JP),
    (0xF000, 0x2000, Op.CALL),
    (0xF000, 0x3000, Op.SE_BYTE),
    (0xF000, 0x4000, Op.SNE_BYTE),
    (0xF00F, 0x5000, Op.SE_REG),
    (0xF000, 0x6000, Op.LD_BYTE),
    (0xF000, 0x7000, Op.ADD_BYTE),
    (0xF00F, 0x8000, Op.LD_REG),
    (0xF00F, 0x8001, Op.OR),
    (0xF00F, 0x8002, Op.AND),
    (0xF00F, 0x8003, Op.XOR),
    (0xF00F, 0x8004, Op.ADD_REG),
    (0xF00F, 0x8005, Op.SUB),
    (0xF00F, 0x8006, Op.SHR),
    (0xF00F, 0x8007, Op.SUBN),
    (0xF00F, 0x800E, Op.SHL),
    (0xF00F, 0x9000, Op.SNE_REG),
    (0xF000, 0xA000, Op.LD_I),
    (0xF000, 0xB000, Op.JP_V0),
    (0xF000, 0xC000, Op.RND),
    (0xF000, 0xD000, Op.DRW),
    (0xF0FF, 0xE09E, Op.SKP),
    (0xF0FF, 0xE0A1, Op.SKNP),
    (0xF0FF, 0xF007, Op.LD_VX_DT),
    (0xF0FF, 0xF00A, Op.LD_VX_K),
    (0xF0FF, 0xF015, Op.LD_DT_VX),
    (0xF0FF, 0xF018, Op.LD_ST_VX),
    (0xF0FF, 0xF01E, Op.ADD_I_VX),
    (0xF0FF, 0xF029, Op.LD_F_VX),
    (0xF0FF, 0xF033, Op.LD_B_VX),
    (0xF0FF, 0xF055, Op.LD_MEM_VX),
    (0xF0FF, 0xF065, Op.LD_VX_MEM),
)


@dataclass(frozen=True)
class Instruction:
    """
    A decoded instruction.

    All operand fields are extracted for every word; each op reads only
    the fields its pattern defines.

    Attributes:
        op: Instruction form
        word: Raw 16-bit instruction word
        x: Register index from h2
        y: Register index from h3
        n: 4-bit immediate from h4
        kk: 8-bit immediate from h3 h4
        nnn: 12-bit address from h2 h3 h4
    """
    op: Op
    word: int
    x: int = 0
    y: int = 0
    n: int = 0
    kk: int = 0
    nnn: int = 0

    @property
    def mnemonic(self) -> str:
        """Assembly text, e.g. "LD VA, 0x3C" or "DRW V0, V1, 5"."""
        x, y = f"V{self.x:X}", f"V{self.y:X}"
        kk, nnn = f"0x{self.kk:02X}", f"0x{self.nnn:03X}"

        match self.op:
            case Op.CLS:
                return "CLS"
            case Op.RET:
                return "RET"
            case Op.JP:
                return f"JP {nnn}"
            case Op.CALL:
                return f"CALL {nnn}"
            case Op.SE_BYTE:
                return f"SE {x}, {kk}"
            case Op.SNE_BYTE:
                return f"SNE {x}, {kk}"
            case Op.SE_REG:
                return f"SE {x}, {y}"
            case Op.LD_BYTE:
                return f"LD {x}, {kk}"
            case Op.ADD_BYTE:
                return f"ADD {x}, {kk}"
            case Op.LD_REG:
                return f"LD {x}, {y}"
            case Op.OR:
                return f"OR {x}, {y}"
            case Op.AND:
                return f"AND {x}, {y}"
            case Op.XOR:
                return f"XOR {x}, {y}"
            case Op.ADD_REG:
                return f"ADD {x}, {y}"
            case Op.SUB:
                return f"SUB {x}, {y}"
            case Op.SHR:
                return f"SHR {x} {{, {y}}}"
            case Op.SUBN:
                return f"SUBN {x}, {y}"
            case Op.SHL:
                return f"SHL {x} {{, {y}}}"
            case Op.SNE_REG:
                return f"SNE {x}, {y}"
            case Op.LD_I:
                return f"LD I, {nnn}"
            case Op.JP_V0:
                return f"JP V0, {nnn}"
            case Op.RND:
                return f"RND {x}, {kk}"
            case Op.DRW:
                return f"DRW {x}, {y}, {self.n}"
            case Op.SKP:
                return f"SKP {x}"
            case Op.SKNP:
                return f"SKNP {x}"
            case Op.LD_VX_DT:
                return f"LD {x}, DT"
            case Op.LD_VX_K:
                return f"LD {x}, K"
            case Op.LD_DT_VX:
                return f"LD DT, {x}"
            case Op.LD_ST_VX:
                return f"LD ST, {x}"
            case Op.ADD_I_VX:
                return f"ADD I, {x}"
            case Op.LD_F_VX:
                return f"LD F, {x}"
            case Op.LD_B_VX:
                return f"LD B, {x}"
            case Op.LD_MEM_VX:
                return f"LD [I], {x}"
            case Op.LD_VX_MEM:
                return f"LD {x}, [I]"

    def __str__(self) -> str:
        return self.mnemonic


def decode(word: int, address: Optional[int] = None) -> Instruction:
    """
    Decode a 16-bit instruction word.

    Args:
        word: Instruction word (big-endian byte pair)
        address: Where the word was fetched from, for error messages

    Returns:
        The decoded Instruction

    Raises:
        UnsupportedInstructionError: If no instruction form matches
    """
    word &= 0xFFFF
    for mask, pattern, op in OPCODE_TABLE:
        if word & mask == pattern:
            return Instruction(
                op=op,
                word=word,
                x=(word >> 8) & 0xF,
                y=(word >> 4) & 0xF,
                n=word & 0xF,
                kk=word & 0xFF,
                nnn=word & 0xFFF,
            )
    raise UnsupportedInstructionError(word, address)


# =============================================================================
# Disassembly
# =============================================================================

@dataclass(frozen=True)
class DisassembledInstruction:
    """
    A single disassembled instruction word.

    Attributes:
        address: Memory address of the word
        word: Raw 16-bit instruction word
        text: Mnemonic, or "DW 0xNNNN" for words that do not decode
        instruction: The decoded Instruction, or None for data words
    """
    address: int
    word: int
    text: str
    instruction: Optional[Instruction] = None

    @property
    def is_data(self) -> bool:
        return self.instruction is None

    def format(self, show_bytes: bool = True) -> str:
        """Format as listing line: ADDRESS: BYTES  MNEMONIC"""
        if show_bytes:
            return f"${self.address:03X}: {self.word >> 8:02X} {self.word & 0xFF:02X}  {self.text}"
        return f"${self.address:03X}: {self.text}"

    def __str__(self) -> str:
        return self.format()


def disassemble(
    data: bytes,
    start_address: int = 0x200,
    count: Optional[int] = None,
) -> Iterator[DisassembledInstruction]:
    """
    Disassemble a program image word by word.

    CHIP-8 code and data share the program space, so words that do not
    decode are emitted as data rather than stopping the listing. A trailing
    odd byte is emitted as a data word padded with zero.

    Args:
        data: Program bytes
        start_address: Address of data[0] (0x200 for ROM images)
        count: Maximum number of words (None for all)

    Yields:
        DisassembledInstruction for each word
    """
    emitted = 0
    for offset in range(0, len(data), 2):
        if count is not None and emitted >= count:
            return
        hi = data[offset]
        lo = data[offset + 1] if offset + 1 < len(data) else 0
        word = (hi << 8) | lo
        address = start_address + offset
        try:
            instruction = decode(word, address)
        except UnsupportedInstructionError:
            yield DisassembledInstruction(address, word, f"DW 0x{word:04X}")
        else:
            yield DisassembledInstruction(address, word, instruction.mnemonic, instruction)
        emitted += 1
