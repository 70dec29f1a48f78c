"""
Decoder and Disassembler Unit Tests
===================================

Tests for opcode decoding, mnemonics and program listings.

Copyright (c) 2025 CHIP-8 VM Contributors
"""

import pytest
from chip8vm.emulator import decode, disassemble
from chip8vm.emulator.decoder import OPCODE_TABLE, Op
from chip8vm.errors import UnsupportedInstructionError


# =============================================================================
# Decoding Tests
# =============================================================================

class TestDecode:
    """Test word-to-instruction decoding."""

    @pytest.mark.parametrize("word,op", [
        (0x00E0, Op.CLS),
        (0x00EE, Op.RET),
        (0x1234, Op.JP),
        (0x2345, Op.CALL),
        (0x3A12, Op.SE_BYTE),
        (0x4A12, Op.SNE_BYTE),
        (0x5AB0, Op.SE_REG),
        (0x6A3C, Op.LD_BYTE),
        (0x7AFF, Op.ADD_BYTE),
        (0x8AB0, Op.LD_REG),
        (0x8AB1, Op.OR),
        (0x8AB2, Op.AND),
        (0x8AB3, Op.XOR),
        (0x8AB4, Op.ADD_REG),
        (0x8AB5, Op.SUB),
        (0x8AB6, Op.SHR),
        (0x8AB7, Op.SUBN),
        (0x8ABE, Op.SHL),
        (0x9AB0, Op.SNE_REG),
        (0xA123, Op.LD_I),
        (0xB123, Op.JP_V0),
        (0xCA0F, Op.RND),
        (0xD015, Op.DRW),
        (0xE19E, Op.SKP),
        (0xE1A1, Op.SKNP),
        (0xF207, Op.LD_VX_DT),
        (0xF20A, Op.LD_VX_K),
        (0xF215, Op.LD_DT_VX),
        (0xF218, Op.LD_ST_VX),
        (0xF21E, Op.ADD_I_VX),
        (0xF229, Op.LD_F_VX),
        (0xF233, Op.LD_B_VX),
        (0xF255, Op.LD_MEM_VX),
        (0xF265, Op.LD_VX_MEM),
    ])
    def test_every_form(self, word, op):
        assert decode(word).op is op

    def test_table_covers_every_op(self):
        assert {op for _, _, op in OPCODE_TABLE} == set(Op)

    def test_fields(self):
        instr = decode(0xD12F)
        assert (instr.x, instr.y, instr.n) == (0x1, 0x2, 0xF)
        assert instr.kk == 0x2F
        assert instr.nnn == 0x12F
        assert instr.word == 0xD12F

    @pytest.mark.parametrize("word", [
        0x0000,  # SYS call, not supported
        0x0123,
        0x00E1,
        0x5121,
        0x8008,
        0x800F,
        0x9001,
        0xE000,
        0xF000,
        0xF0FF,
        0xFFFF,
    ])
    def test_unsupported(self, word):
        with pytest.raises(UnsupportedInstructionError):
            decode(word)

    def test_unsupported_message(self):
        with pytest.raises(UnsupportedInstructionError) as exc_info:
            decode(0x5AB1, address=0x2A4)
        error = exc_info.value
        assert error.nibbles == (0x5, 0xA, 0xB, 0x1)
        assert "5AB1" in str(error)
        assert "$2A4" in str(error)


# =============================================================================
# Mnemonic Tests
# =============================================================================

class TestMnemonics:
    """Test assembly text."""

    @pytest.mark.parametrize("word,text", [
        (0x00E0, "CLS"),
        (0x00EE, "RET"),
        (0x12A4, "JP 0x2A4"),
        (0x2300, "CALL 0x300"),
        (0x3A12, "SE VA, 0x12"),
        (0x6A3C, "LD VA, 0x3C"),
        (0x8124, "ADD V1, V2"),
        (0x8126, "SHR V1 {, V2}"),
        (0xA123, "LD I, 0x123"),
        (0xB123, "JP V0, 0x123"),
        (0xD015, "DRW V0, V1, 5"),
        (0xE39E, "SKP V3"),
        (0xF30A, "LD V3, K"),
        (0xF333, "LD B, V3"),
        (0xF355, "LD [I], V3"),
        (0xF365, "LD V3, [I]"),
    ])
    def test_mnemonic(self, word, text):
        assert decode(word).mnemonic == text
        assert str(decode(word)) == text


# =============================================================================
# Disassembler Tests
# =============================================================================

class TestDisassemble:
    """Test program listings."""

    def test_listing(self):
        lines = [str(instr) for instr in disassemble(bytes([0x00, 0xE0, 0x6A, 0x3C]))]
        assert lines == [
            "$200: 00 E0  CLS",
            "$202: 6A 3C  LD VA, 0x3C",
        ]

    def test_no_bytes(self):
        instr = next(disassemble(bytes([0x00, 0xE0])))
        assert instr.format(show_bytes=False) == "$200: CLS"

    def test_data_words(self):
        """Words that do not decode are listed as data."""
        instr = next(disassemble(bytes([0xFF, 0xFF])))
        assert instr.is_data
        assert instr.text == "DW 0xFFFF"

    def test_odd_trailing_byte(self):
        listing = list(disassemble(bytes([0x00, 0xE0, 0x12])))
        assert len(listing) == 2
        assert listing[1].word == 0x1200
        assert listing[1].address == 0x202

    def test_start_address_and_count(self):
        listing = list(disassemble(bytes(8), start_address=0x300, count=2))
        assert [instr.address for instr in listing] == [0x300, 0x302]
