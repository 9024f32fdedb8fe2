"""
OpGo 8085 - Assembler and Intel HEX Encoder
===========================================

This package assembles programs written for the OpGo!! 8085 trainer into
binary images in Intel HEX format, ready for EPROM programmers, trainer-kit
monitors or simulators.

Main Components
---------------
- **assembler**: Two-pass assembler for a subset of the Intel 8085
    Converts source lines into machine code with label resolution

- **ihex**: Intel HEX encoding and decoding
    Chunks a byte stream into checksummed records, and reads them back

- **project**: .opgo project files
    JSON documents holding source lines and an optional load origin

Quick Start
-----------
Assemble a project:
    >>> from opgo8085 import Assembler
    >>> asm = Assembler()
    >>> code = asm.assemble_file("countdown.opgo")
    >>> asm.write_hex("countdown.hex")

Or use the command-line tool:
    $ opgo2hex countdown.opgo --org 0x0100
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from opgo8085.assembler import Assembler, AssemblyResult, assemble
from opgo8085.config import AssemblerConfig
from opgo8085.errors import (
    OpgoError,
    OriginRangeError,
    AssemblerError,
    AssemblySyntaxError,
    NumericLiteralError,
    DuplicateLabelError,
    UnknownOpcodeError,
    OperandError,
    UndefinedSymbolError,
    ProjectError,
    ProjectFormatError,
    HexError,
    HexFormatError,
    HexChecksumError,
)
from opgo8085.ihex import (
    HexRecord,
    RecordType,
    build_records,
    parse_intel_hex,
    records_to_bytes,
    to_intel_hex,
)
from opgo8085.project import Project, load_project, validate_origin

__all__ = [
    # Version info
    "__version__",
    # Assembler
    "Assembler",
    "AssemblyResult",
    "assemble",
    "AssemblerConfig",
    # Projects
    "Project",
    "load_project",
    "validate_origin",
    # Intel HEX
    "HexRecord",
    "RecordType",
    "build_records",
    "parse_intel_hex",
    "records_to_bytes",
    "to_intel_hex",
    # Exception hierarchy
    "OpgoError",
    "OriginRangeError",
    "AssemblerError",
    "AssemblySyntaxError",
    "NumericLiteralError",
    "DuplicateLabelError",
    "UnknownOpcodeError",
    "OperandError",
    "UndefinedSymbolError",
    "ProjectError",
    "ProjectFormatError",
    "HexError",
    "HexFormatError",
    "HexChecksumError",
]
