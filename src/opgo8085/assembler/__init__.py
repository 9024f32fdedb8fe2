"""
Intel 8085 Assembler
====================

This module provides a two-pass assembler for a subset of the Intel 8085
instruction set. It converts .opgo source lines into machine code, which
the ihex module then renders as Intel HEX.

Main Components
---------------
- **Assembler**: Main assembler class that orchestrates the assembly process
- **lexer**: Normalizes source lines into labels and instructions
- **numbers**: Parses numeric literals (0x1F, 1FH, 31)
- **opcodes**: Opcode table with per-mnemonic size and encoder

Assembly Process
----------------
1. **Pass 1 (resolve_addresses)**: label table and instruction addresses
2. **Pass 2 (encode_bytes)**: machine code with labels resolved

Example Usage
-------------
>>> from opgo8085.assembler import assemble
>>> result = assemble(["LOOP: NOP", "JMP LOOP"], origin=0x0100)
>>> result.code.hex().upper()
'00C30001'

Supported Instructions
----------------------
NOP HLT MOV ADD ADC SUB SBB ANA XRA ORA CMP INR DCR INX DCX LDAX STAX
LXI MVI ADI SUI ANI XRI ORI CPI LDA STA LHLD SHLD JMP JNZ JZ JNC JC JP JM
"""

from opgo8085.assembler.assembler import (
    Assembler,
    AssemblyResult,
    ParsedLine,
    assemble,
    encode_bytes,
    resolve_addresses,
)
from opgo8085.assembler.lexer import Instruction, clean_line, parse_line
from opgo8085.assembler.numbers import is_number, parse_number
from opgo8085.assembler.opcodes import (
    MNEMONICS,
    OPCODE_TABLE,
    OpcodeSpec,
    OperandKind,
    REGISTER_CODES,
    REGISTER_PAIRS,
    encode_instruction,
    instruction_size,
)

__all__ = [
    # Main class and functions
    "Assembler",
    "AssemblyResult",
    "ParsedLine",
    "assemble",
    "encode_bytes",
    "resolve_addresses",
    # Line normalizer
    "Instruction",
    "clean_line",
    "parse_line",
    # Numeric literals
    "is_number",
    "parse_number",
    # Opcodes
    "MNEMONICS",
    "OPCODE_TABLE",
    "OpcodeSpec",
    "OperandKind",
    "REGISTER_CODES",
    "REGISTER_PAIRS",
    "encode_instruction",
    "instruction_size",
]
