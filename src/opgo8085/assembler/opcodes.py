"""
Intel 8085 Instruction Set Subset
=================================

This module defines the supported 8085 instructions and how each one is
encoded. Every mnemonic maps to an OpcodeSpec holding its fixed size, its
base opcode and the function that produces its bytes, so sizing (pass 1)
and encoding (pass 2) read from the same table.

Instruction sizes depend on the mnemonic only, never on operand values.
Multi-byte operands are little-endian (low byte first).

Operand Kinds
-------------
1. **NONE**: No operand (NOP, HLT) - 1 byte
2. **REGISTER_PAIR_OF_REGISTERS**: MOV d,s - 1 byte, 0x40 | d<<3 | s
3. **REGISTER**: ADD r, ADC r, ... - 1 byte, base + code(r)
   INR/DCR use an explicit per-register table instead of base + code
4. **REGISTER_PAIR**: INX, DCX, LDAX, STAX - 1 byte, base + 0x10 * pair
5. **REGISTER_IMMEDIATE**: MVI r,d8 - 2 bytes
6. **IMMEDIATE**: ADI d8, SUI d8, ... - 2 bytes
7. **PAIR_IMMEDIATE**: LXI rp,d16 - 3 bytes
8. **ADDRESS**: LDA, STA, LHLD, SHLD, JMP, Jcc - 3 bytes

Register Codes
--------------
    B=0  C=1  D=2  E=3  H=4  L=5  M=6  A=7

Register Pair Codes
-------------------
    B (BC)=0  D (DE)=1  H (HL)=2  SP=3

Reference
---------
- Intel 8080/8085 Assembly Language Programming Manual
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Callable, Mapping, Optional

from opgo8085.assembler.lexer import Instruction
from opgo8085.assembler.numbers import is_number, parse_number
from opgo8085.errors import (
    AssemblerError,
    OperandError,
    UndefinedSymbolError,
    UnknownOpcodeError,
)


REGISTER_CODES: dict[str, int] = {
    "B": 0, "C": 1, "D": 2, "E": 3, "H": 4, "L": 5, "M": 6, "A": 7,
}

REGISTER_PAIRS: dict[str, int] = {
    "B": 0, "BC": 0,
    "D": 1, "DE": 1,
    "H": 2, "HL": 2,
    "SP": 3,
}

# LDAX/STAX only address memory through BC or DE
INDIRECT_PAIRS: dict[str, int] = {"B": 0, "BC": 0, "D": 1, "DE": 1}

PAIR_NAMES = "register pair (B, D, H, SP)"


class OperandKind(Enum):
    """Operand shapes accepted by the supported instructions."""
    NONE = auto()
    REGISTER_PAIR_OF_REGISTERS = auto()
    REGISTER = auto()
    REGISTER_PAIR = auto()
    REGISTER_IMMEDIATE = auto()
    IMMEDIATE = auto()
    PAIR_IMMEDIATE = auto()
    ADDRESS = auto()

    def __str__(self) -> str:
        """Return the human-readable operand shape for error messages."""
        return {
            OperandKind.NONE: "no operands",
            OperandKind.REGISTER_PAIR_OF_REGISTERS: "registers",
            OperandKind.REGISTER: "register",
            OperandKind.REGISTER_PAIR: PAIR_NAMES,
            OperandKind.REGISTER_IMMEDIATE: "register and 8-bit value",
            OperandKind.IMMEDIATE: "8-bit value",
            OperandKind.PAIR_IMMEDIATE: f"{PAIR_NAMES} and 16-bit value",
            OperandKind.ADDRESS: "address or label",
        }[self]

    @property
    def arity(self) -> int:
        """Number of operands the shape takes."""
        return {
            OperandKind.NONE: 0,
            OperandKind.REGISTER_PAIR_OF_REGISTERS: 2,
            OperandKind.REGISTER_IMMEDIATE: 2,
            OperandKind.PAIR_IMMEDIATE: 2,
        }.get(self, 1)


Encoder = Callable[["OpcodeSpec", Instruction, int, Mapping[str, int]], bytes]


# =============================================================================
# Opcode Definitions
# =============================================================================

@dataclass(frozen=True)
class OpcodeSpec:
    """
    Encoding rule for one mnemonic.

    This dataclass is immutable (frozen) to prevent accidental modification
    of the opcode table at runtime.

    Attributes:
        mnemonic: Uppercase instruction name
        size: Total encoded size in bytes (1, 2 or 3)
        opcode: Base opcode byte
        kind: Operand shape
        encoder: Function producing the instruction bytes
        table: Explicit operand -> opcode map, for instructions whose
            opcodes do not follow the base + code pattern
        pairs: Register pairs accepted by register-pair instructions
    """
    mnemonic: str
    size: int
    opcode: int
    kind: OperandKind
    encoder: Encoder = field(repr=False, compare=False)
    table: Optional[Mapping[str, int]] = field(default=None, repr=False)
    pairs: Mapping[str, int] = field(default_factory=lambda: REGISTER_PAIRS, repr=False)

    def __repr__(self) -> str:
        return f"OpcodeSpec({self.mnemonic}, opcode=0x{self.opcode:02X}, size={self.size})"

    def encode(self, instr: Instruction, address: int, labels: Mapping[str, int]) -> bytes:
        """Encode the instruction, checking operand count first."""
        if len(instr.operands) != self.kind.arity:
            raise OperandError(self.mnemonic, str(self.kind), address=address)
        return self.encoder(self, instr, address, labels)


# =============================================================================
# Operand Helpers
# =============================================================================

def encode_imm8(value: int) -> bytes:
    """Encode a value as one byte, masking to 8 bits."""
    return bytes([value & 0xFF])


def encode_imm16(value: int) -> bytes:
    """Encode a value as a little-endian word, masking to 16 bits."""
    value &= 0xFFFF
    return bytes([value & 0xFF, (value >> 8) & 0xFF])


def resolve_value(token: str, labels: Mapping[str, int], address: Optional[int] = None) -> int:
    """
    Resolve an address or immediate operand.

    A token that names a label resolves to the label's address (labels are
    case-sensitive); otherwise it must be a numeric literal.

    Raises:
        UndefinedSymbolError: If the token is neither a label nor a number
    """
    token = token.strip()
    if token in labels:
        return labels[token]
    if is_number(token):
        return parse_number(token)
    raise UndefinedSymbolError(
        token,
        similar_symbols=_find_similar_labels(token, labels),
        address=address,
    )


def _register(spec: OpcodeSpec, token: str, address: int,
              codes: Mapping[str, int] = REGISTER_CODES) -> int:
    name = token.strip().upper()
    if name not in codes:
        raise OperandError(
            spec.mnemonic,
            str(spec.kind),
            address=address,
            hint=f"valid names are {', '.join(codes)}",
        )
    return codes[name]


def _find_similar_labels(name: str, labels: Mapping[str, int]) -> list[str]:
    """
    Find labels with similar names for error hints.

    Uses a simple edit distance heuristic.
    """
    name_lower = name.lower()
    similar = []

    for label in labels:
        label_lower = label.lower()
        if (
            label_lower == name_lower or
            abs(len(label) - len(name)) <= 1 and
            _edit_distance(name_lower, label_lower) <= 2
        ):
            similar.append(label)

    return similar[:3]


def _edit_distance(s1: str, s2: str) -> int:
    """Calculate Levenshtein edit distance between two strings."""
    if len(s1) < len(s2):
        s1, s2 = s2, s1

    distances = list(range(len(s2) + 1))
    for i, c1 in enumerate(s1):
        new_distances = [i + 1]
        for j, c2 in enumerate(s2):
            if c1 == c2:
                new_distances.append(distances[j])
            else:
                new_distances.append(1 + min(distances[j], distances[j + 1], new_distances[-1]))
        distances = new_distances

    return distances[-1]


# =============================================================================
# Encoders
# =============================================================================

def _encode_none(spec, instr, address, labels) -> bytes:
    return bytes([spec.opcode])


def _encode_mov(spec, instr, address, labels) -> bytes:
    dest = _register(spec, instr.operands[0], address)
    src = _register(spec, instr.operands[1], address)
    return bytes([spec.opcode | (dest << 3) | src])


def _encode_register(spec, instr, address, labels) -> bytes:
    if spec.table is not None:
        return bytes([_register(spec, instr.operands[0], address, spec.table)])
    return bytes([spec.opcode + _register(spec, instr.operands[0], address)])


def _encode_pair(spec, instr, address, labels) -> bytes:
    pair = _register(spec, instr.operands[0], address, spec.pairs)
    return bytes([spec.opcode + 0x10 * pair])


def _encode_register_immediate(spec, instr, address, labels) -> bytes:
    reg = _register(spec, instr.operands[0], address)
    return bytes([spec.opcode + (reg << 3)]) + encode_imm8(parse_number(instr.operands[1]))


def _encode_immediate(spec, instr, address, labels) -> bytes:
    return bytes([spec.opcode]) + encode_imm8(parse_number(instr.operands[0]))


def _encode_pair_immediate(spec, instr, address, labels) -> bytes:
    pair = _register(spec, instr.operands[0], address, spec.pairs)
    value = resolve_value(instr.operands[1], labels, address)
    return bytes([spec.opcode + 0x10 * pair]) + encode_imm16(value)


def _encode_address(spec, instr, address, labels) -> bytes:
    value = resolve_value(instr.operands[0], labels, address)
    return bytes([spec.opcode]) + encode_imm16(value)


_ENCODERS: dict[OperandKind, tuple[int, Encoder]] = {
    OperandKind.NONE: (1, _encode_none),
    OperandKind.REGISTER_PAIR_OF_REGISTERS: (1, _encode_mov),
    OperandKind.REGISTER: (1, _encode_register),
    OperandKind.REGISTER_PAIR: (1, _encode_pair),
    OperandKind.REGISTER_IMMEDIATE: (2, _encode_register_immediate),
    OperandKind.IMMEDIATE: (2, _encode_immediate),
    OperandKind.PAIR_IMMEDIATE: (3, _encode_pair_immediate),
    OperandKind.ADDRESS: (3, _encode_address),
}


def _spec(mnemonic: str, opcode: int, kind: OperandKind, **extra) -> OpcodeSpec:
    size, encoder = _ENCODERS[kind]
    return OpcodeSpec(mnemonic, size, opcode, kind, encoder, **extra)


# INR/DCR put the register code in bits 5-3, so base + code does not apply
_INR_TABLE = {name: 0x04 + (code << 3) for name, code in REGISTER_CODES.items()}
_DCR_TABLE = {name: 0x05 + (code << 3) for name, code in REGISTER_CODES.items()}


# =============================================================================
# Opcode Table
# =============================================================================
# Key: mnemonic
# Value: OpcodeSpec(mnemonic, size, base opcode, operand kind, encoder)
# =============================================================================

OPCODE_TABLE: dict[str, OpcodeSpec] = {spec.mnemonic: spec for spec in (
    # Control
    _spec("NOP", 0x00, OperandKind.NONE),
    _spec("HLT", 0x76, OperandKind.NONE),

    # Register transfer and arithmetic
    _spec("MOV", 0x40, OperandKind.REGISTER_PAIR_OF_REGISTERS),
    _spec("ADD", 0x80, OperandKind.REGISTER),
    _spec("ADC", 0x88, OperandKind.REGISTER),
    _spec("SUB", 0x90, OperandKind.REGISTER),
    _spec("SBB", 0x98, OperandKind.REGISTER),
    _spec("ANA", 0xA0, OperandKind.REGISTER),
    _spec("XRA", 0xA8, OperandKind.REGISTER),
    _spec("ORA", 0xB0, OperandKind.REGISTER),
    _spec("CMP", 0xB8, OperandKind.REGISTER),
    _spec("INR", 0x04, OperandKind.REGISTER, table=_INR_TABLE),
    _spec("DCR", 0x05, OperandKind.REGISTER, table=_DCR_TABLE),

    # Register pairs
    _spec("INX", 0x03, OperandKind.REGISTER_PAIR),
    _spec("DCX", 0x0B, OperandKind.REGISTER_PAIR),
    _spec("LDAX", 0x0A, OperandKind.REGISTER_PAIR, pairs=INDIRECT_PAIRS),
    _spec("STAX", 0x02, OperandKind.REGISTER_PAIR, pairs=INDIRECT_PAIRS),
    _spec("LXI", 0x01, OperandKind.PAIR_IMMEDIATE),

    # Immediate
    _spec("MVI", 0x06, OperandKind.REGISTER_IMMEDIATE),
    _spec("ADI", 0xC6, OperandKind.IMMEDIATE),
    _spec("SUI", 0xD6, OperandKind.IMMEDIATE),
    _spec("ANI", 0xE6, OperandKind.IMMEDIATE),
    _spec("XRI", 0xEE, OperandKind.IMMEDIATE),
    _spec("ORI", 0xF6, OperandKind.IMMEDIATE),
    _spec("CPI", 0xFE, OperandKind.IMMEDIATE),

    # Direct addressing
    _spec("LDA", 0x3A, OperandKind.ADDRESS),
    _spec("STA", 0x32, OperandKind.ADDRESS),
    _spec("LHLD", 0x2A, OperandKind.ADDRESS),
    _spec("SHLD", 0x22, OperandKind.ADDRESS),

    # Jumps
    _spec("JMP", 0xC3, OperandKind.ADDRESS),
    _spec("JNZ", 0xC2, OperandKind.ADDRESS),
    _spec("JZ", 0xCA, OperandKind.ADDRESS),
    _spec("JNC", 0xD2, OperandKind.ADDRESS),
    _spec("JC", 0xDA, OperandKind.ADDRESS),
    _spec("JP", 0xF2, OperandKind.ADDRESS),
    _spec("JM", 0xFA, OperandKind.ADDRESS),
)}

MNEMONICS: frozenset[str] = frozenset(OPCODE_TABLE)


# =============================================================================
# Public Interface
# =============================================================================

def get_opcode_spec(mnemonic: str, address: Optional[int] = None) -> OpcodeSpec:
    """
    Look up the encoding rule for a mnemonic.

    Raises:
        UnknownOpcodeError: If the mnemonic is not supported
    """
    spec = OPCODE_TABLE.get(mnemonic.upper())
    if spec is None:
        raise UnknownOpcodeError(mnemonic, address=address)
    return spec


def instruction_size(instr: Instruction) -> int:
    """
    Get the encoded size of an instruction from its mnemonic alone.

    Returns:
        1, 2 or 3

    Raises:
        UnknownOpcodeError: If the mnemonic is not supported
    """
    return get_opcode_spec(instr.mnemonic).size


def encode_instruction(instr: Instruction, address: int, labels: Mapping[str, int]) -> bytes:
    """
    Encode an instruction to machine code.

    Args:
        instr: The decoded instruction
        address: Address the instruction is placed at (for error messages)
        labels: Completed label table from pass 1

    Returns:
        The instruction bytes

    Raises:
        AssemblerError: Any encoding failure, annotated with the address
    """
    spec = get_opcode_spec(instr.mnemonic, address)
    try:
        return spec.encode(instr, address, labels)
    except AssemblerError as e:
        raise e.with_context(address=address)
