# =============================================================================
# test_opcodes.py - Instruction Encoder Tests
# =============================================================================
# Tests for the 8085 opcode table, instruction sizing and encoding.
#
# Test coverage includes:
#   - Opcode table consistency (size vs encoded length)
#   - Register, register-pair, immediate and address encodings
#   - INR/DCR explicit opcode tables
#   - Little-endian words and value masking
#   - Label resolution and undefined symbols
#   - Operand shape errors with addresses in messages
# =============================================================================

import pytest

from opgo8085.assembler.lexer import Instruction
from opgo8085.assembler.opcodes import (
    MNEMONICS,
    OPCODE_TABLE,
    OperandKind,
    REGISTER_CODES,
    encode_imm16,
    encode_instruction,
    instruction_size,
    resolve_value,
)
from opgo8085.errors import (
    NumericLiteralError,
    OperandError,
    UndefinedSymbolError,
    UnknownOpcodeError,
)


def encode(text: str, address: int = 0, labels: dict | None = None) -> bytes:
    """Helper: encode 'MNEMONIC op, op' text."""
    parts = text.split(None, 1)
    operands = tuple(op.strip() for op in parts[1].split(",")) if len(parts) > 1 else ()
    return encode_instruction(Instruction(parts[0].upper(), operands), address, labels or {})


# Sample operands for every operand kind, used to check size consistency
SAMPLE_OPERANDS = {
    OperandKind.NONE: (),
    OperandKind.REGISTER_PAIR_OF_REGISTERS: ("A", "B"),
    OperandKind.REGISTER: ("C",),
    OperandKind.REGISTER_PAIR: ("B",),
    OperandKind.REGISTER_IMMEDIATE: ("D", "12H"),
    OperandKind.IMMEDIATE: ("0x7F",),
    OperandKind.PAIR_IMMEDIATE: ("H", "1234H"),
    OperandKind.ADDRESS: ("TARGET",),
}


# =============================================================================
# Opcode Table Tests
# =============================================================================

class TestOpcodeTable:
    """Test the opcode table as a whole."""

    def test_supported_mnemonics(self):
        expected = {
            "NOP", "HLT", "MOV", "ADD", "ADC", "SUB", "SBB", "ANA", "XRA", "ORA",
            "CMP", "INR", "DCR", "INX", "DCX", "LDAX", "STAX", "LXI", "MVI",
            "ADI", "SUI", "ANI", "XRI", "ORI", "CPI", "LDA", "STA", "LHLD",
            "SHLD", "JMP", "JNZ", "JZ", "JNC", "JC", "JP", "JM",
        }
        assert MNEMONICS == expected

    @pytest.mark.parametrize("mnemonic", sorted(OPCODE_TABLE))
    def test_size_matches_encoded_length(self, mnemonic):
        """The pass 1 size equals the pass 2 byte count for every opcode."""
        spec = OPCODE_TABLE[mnemonic]
        instr = Instruction(mnemonic, SAMPLE_OPERANDS[spec.kind])
        code = encode_instruction(instr, 0x0000, {"TARGET": 0x1234})
        assert len(code) == instruction_size(instr) == spec.size

    def test_size_ignores_operands(self):
        """Sizing needs only the mnemonic, even with bad operands."""
        assert instruction_size(Instruction("JMP", ("nowhere",))) == 3
        assert instruction_size(Instruction("MVI")) == 2

    def test_size_is_case_insensitive(self):
        assert instruction_size(Instruction("nop")) == 1

    def test_unknown_opcode_size(self):
        with pytest.raises(UnknownOpcodeError) as exc_info:
            instruction_size(Instruction("CALL", ("1234H",)))
        assert "CALL" in str(exc_info.value)

    def test_unknown_opcode_encode_has_address(self):
        with pytest.raises(UnknownOpcodeError) as exc_info:
            encode("RET", address=0x0010)
        assert "at address 0010" in str(exc_info.value)


# =============================================================================
# No-Operand and Register Instructions
# =============================================================================

class TestRegisterInstructions:
    """Test one-byte register encodings."""

    def test_nop(self):
        assert encode("NOP") == bytes([0x00])

    def test_hlt(self):
        assert encode("HLT") == bytes([0x76])

    @pytest.mark.parametrize("dest,src,opcode", [
        ("A", "B", 0x78),
        ("B", "A", 0x47),
        ("M", "A", 0x77),
        ("H", "L", 0x65),
        ("B", "B", 0x40),
        ("A", "A", 0x7F),
    ])
    def test_mov(self, dest, src, opcode):
        assert encode(f"MOV {dest}, {src}") == bytes([opcode])

    def test_mov_lowercase_registers(self):
        assert encode("MOV a, b") == bytes([0x78])

    @pytest.mark.parametrize("mnemonic,base", [
        ("ADD", 0x80), ("ADC", 0x88), ("SUB", 0x90), ("SBB", 0x98),
        ("ANA", 0xA0), ("XRA", 0xA8), ("ORA", 0xB0), ("CMP", 0xB8),
    ])
    def test_alu_register_ops(self, mnemonic, base):
        for name, code in REGISTER_CODES.items():
            assert encode(f"{mnemonic} {name}") == bytes([base + code])

    @pytest.mark.parametrize("reg,inr,dcr", [
        ("B", 0x04, 0x05), ("C", 0x0C, 0x0D), ("D", 0x14, 0x15), ("E", 0x1C, 0x1D),
        ("H", 0x24, 0x25), ("L", 0x2C, 0x2D), ("M", 0x34, 0x35), ("A", 0x3C, 0x3D),
    ])
    def test_inr_dcr(self, reg, inr, dcr):
        assert encode(f"INR {reg}") == bytes([inr])
        assert encode(f"DCR {reg}") == bytes([dcr])

    def test_mov_bad_register(self):
        with pytest.raises(OperandError) as exc_info:
            encode("MOV X, A", address=0x0010)
        assert "MOV expects registers at address 0010" in str(exc_info.value)
        assert "hint: valid names are B, C, D, E, H, L, M, A" in str(exc_info.value)

    def test_add_bad_register(self):
        with pytest.raises(OperandError) as exc_info:
            encode("ADD SP", address=0x0004)
        assert "ADD expects register at address 0004" in str(exc_info.value)

    def test_inr_bad_register(self):
        with pytest.raises(OperandError):
            encode("INR Q")

    def test_wrong_operand_count(self):
        with pytest.raises(OperandError):
            encode("MOV A")
        with pytest.raises(OperandError):
            encode("ADD A, B")
        with pytest.raises(OperandError):
            encode("HLT A")


# =============================================================================
# Register Pair Instructions
# =============================================================================

class TestRegisterPairInstructions:
    """Test register-pair encodings."""

    @pytest.mark.parametrize("pair,inx,dcx", [
        ("B", 0x03, 0x0B), ("D", 0x13, 0x1B), ("H", 0x23, 0x2B), ("SP", 0x33, 0x3B),
        ("BC", 0x03, 0x0B), ("DE", 0x13, 0x1B), ("HL", 0x23, 0x2B),
    ])
    def test_inx_dcx(self, pair, inx, dcx):
        assert encode(f"INX {pair}") == bytes([inx])
        assert encode(f"DCX {pair}") == bytes([dcx])

    @pytest.mark.parametrize("pair,opcode", [("B", 0x01), ("D", 0x11), ("H", 0x21), ("SP", 0x31)])
    def test_lxi_immediate(self, pair, opcode):
        assert encode(f"LXI {pair}, 1234H") == bytes([opcode, 0x34, 0x12])

    def test_lxi_label(self):
        assert encode("LXI H, DATA", labels={"DATA": 0x2050}) == bytes([0x21, 0x50, 0x20])

    def test_ldax_stax(self):
        assert encode("LDAX B") == bytes([0x0A])
        assert encode("LDAX D") == bytes([0x1A])
        assert encode("STAX B") == bytes([0x02])
        assert encode("STAX D") == bytes([0x12])

    def test_ldax_rejects_hl(self):
        with pytest.raises(OperandError):
            encode("LDAX H")

    def test_inx_bad_pair(self):
        with pytest.raises(OperandError) as exc_info:
            encode("INX A", address=0x0100)
        message = str(exc_info.value)
        assert "INX expects register pair (B, D, H, SP)" in message
        assert "0100" in message


# =============================================================================
# Immediate Instructions
# =============================================================================

class TestImmediateInstructions:
    """Test 8-bit immediate encodings."""

    @pytest.mark.parametrize("reg,opcode", [
        ("B", 0x06), ("C", 0x0E), ("D", 0x16), ("E", 0x1E),
        ("H", 0x26), ("L", 0x2E), ("M", 0x36), ("A", 0x3E),
    ])
    def test_mvi(self, reg, opcode):
        assert encode(f"MVI {reg}, 05H") == bytes([opcode, 0x05])

    @pytest.mark.parametrize("mnemonic,opcode", [
        ("ADI", 0xC6), ("SUI", 0xD6), ("ANI", 0xE6),
        ("XRI", 0xEE), ("ORI", 0xF6), ("CPI", 0xFE),
    ])
    def test_alu_immediate(self, mnemonic, opcode):
        assert encode(f"{mnemonic} 10") == bytes([opcode, 10])

    def test_immediate_masked_to_8_bits(self):
        """Over-wide immediates are masked, not rejected."""
        assert encode("MVI A, 1FFH") == bytes([0x3E, 0xFF])
        assert encode("ADI 256") == bytes([0xC6, 0x00])

    def test_bad_immediate_literal(self):
        with pytest.raises(NumericLiteralError) as exc_info:
            encode("MVI A, ZZ", address=0x0020)
        assert "at address 0020" in str(exc_info.value)

    def test_mvi_bad_register(self):
        with pytest.raises(OperandError):
            encode("MVI SP, 05H")


# =============================================================================
# Address Instructions
# =============================================================================

class TestAddressInstructions:
    """Test 16-bit address encodings."""

    @pytest.mark.parametrize("mnemonic,opcode", [
        ("LDA", 0x3A), ("STA", 0x32), ("LHLD", 0x2A), ("SHLD", 0x22),
        ("JMP", 0xC3), ("JNZ", 0xC2), ("JZ", 0xCA), ("JNC", 0xD2),
        ("JC", 0xDA), ("JP", 0xF2), ("JM", 0xFA),
    ])
    def test_little_endian_address(self, mnemonic, opcode):
        assert encode(f"{mnemonic} 0x2050") == bytes([opcode, 0x50, 0x20])

    def test_label_address(self):
        assert encode("JNZ LOOP", labels={"LOOP": 0x0002}) == bytes([0xC2, 0x02, 0x00])

    def test_label_takes_precedence_over_number(self):
        """A label spelled like a hex literal resolves to the label."""
        assert encode("JMP ABH", labels={"ABH": 0x0300}) == bytes([0xC3, 0x00, 0x03])

    def test_labels_are_case_sensitive(self):
        with pytest.raises(UndefinedSymbolError):
            encode("JMP loop", labels={"LOOP": 0x0000})

    def test_address_masked_to_16_bits(self):
        assert encode("JMP 12345H") == bytes([0xC3, 0x45, 0x23])

    def test_undefined_symbol(self):
        with pytest.raises(UndefinedSymbolError) as exc_info:
            encode("JMP NOWHERE", address=0x0003)
        assert "NOWHERE" in str(exc_info.value)
        assert "at address 0003" in str(exc_info.value)

    def test_undefined_symbol_suggests_similar(self):
        with pytest.raises(UndefinedSymbolError) as exc_info:
            encode("JMP LOPP", labels={"LOOP": 0x0000, "DONE": 0x0010})
        assert exc_info.value.similar_symbols == ["LOOP"]
        assert "did you mean 'LOOP'?" in str(exc_info.value)


# =============================================================================
# Helper Tests
# =============================================================================

class TestHelpers:
    """Test operand helpers."""

    def test_encode_imm16(self):
        assert encode_imm16(0x1234) == bytes([0x34, 0x12])
        assert encode_imm16(0x1FFFF) == bytes([0xFF, 0xFF])

    def test_resolve_value(self):
        assert resolve_value("LOOP", {"LOOP": 7}) == 7
        assert resolve_value("0x10", {}) == 16
