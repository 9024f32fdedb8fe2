"""
8085 Two-Pass Assembler
=======================

This module provides the assembly passes and the Assembler class, the
main interface for turning .opgo source lines into machine code and
Intel HEX output.

Assembly Process
----------------
1. **Pass 1 (resolve_addresses)**:
   - Normalize every line (comments, terminator, label, mnemonic, operands)
   - Record each label at the current program counter
   - Size each instruction from its mnemonic and advance the counter

2. **Pass 2 (encode_bytes)**:
   - Encode each instruction at the address frozen in pass 1
   - Resolve label operands against the completed label table

Both passes visit the lines in the same order. Any error aborts the run;
no partial output is produced.

Example Usage
-------------
>>> from opgo8085.assembler import Assembler
>>> asm = Assembler()
>>> code = asm.assemble_lines(["MVI A, 05H;", "LOOP: DCR A;", "JNZ LOOP;", "HLT;"])
>>> code.hex(" ").upper()
'3E 05 3D C2 02 00 76'
>>> print(asm.get_hex(), end="")
:070000003E053DC20200763F
:00000001FF
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Mapping, Optional

from opgo8085.assembler.lexer import Instruction, parse_line
from opgo8085.assembler.opcodes import encode_instruction, instruction_size
from opgo8085.errors import AssemblerError, DuplicateLabelError
from opgo8085.ihex.builder import DEFAULT_RECORD_SIZE, to_intel_hex


logger = logging.getLogger(__name__)


# =============================================================================
# Data Classes
# =============================================================================

@dataclass(frozen=True)
class ParsedLine:
    """
    One source line after pass 1.

    Blank and comment-only lines are kept (with no instruction and size 0)
    so that listings line up with the source.

    Attributes:
        text: Original source text
        line_number: 1-based position in the source
        address: Program counter before this line's instruction
        label: Label declared on this line, if any
        instruction: Decoded instruction, if any
        size: Encoded size in bytes (0 without an instruction)
    """
    text: str
    line_number: int
    address: int
    label: Optional[str] = None
    instruction: Optional[Instruction] = None
    size: int = 0


@dataclass(frozen=True)
class AssemblyResult:
    """
    Output of a complete assembly run.

    Attributes:
        code: Assembled byte stream in program order
        origin: Load address of the first byte
        labels: Label name -> absolute address
        lines: Pass 1 snapshot of every source line
    """
    code: bytes
    origin: int
    labels: Mapping[str, int] = field(default_factory=dict)
    lines: tuple[ParsedLine, ...] = field(default_factory=tuple)


# =============================================================================
# Assembly Passes
# =============================================================================

def resolve_addresses(
    source_lines: Iterable[str],
    origin: int = 0x0000,
) -> tuple[tuple[ParsedLine, ...], dict[str, int]]:
    """
    First pass: assign addresses and collect labels.

    Args:
        source_lines: Raw source lines in program order
        origin: Load address of the first instruction

    Returns:
        (parsed lines, label table)

    Raises:
        DuplicateLabelError: If a label is declared twice
        UnknownOpcodeError: If a mnemonic is not supported
    """
    labels: dict[str, int] = {}
    parsed: list[ParsedLine] = []
    pc = origin & 0xFFFF

    for line_number, raw in enumerate(source_lines, start=1):
        try:
            label, instr = parse_line(raw)

            if label is not None:
                if label in labels:
                    raise DuplicateLabelError(label, original_address=labels[label], address=pc)
                labels[label] = pc

            size = instruction_size(instr) if instr is not None else 0
        except AssemblerError as e:
            raise e.with_context(address=pc, line_number=line_number, source_line=raw)

        parsed.append(ParsedLine(raw, line_number, pc, label, instr, size))
        pc = (pc + size) & 0xFFFF

    logger.debug(f"Pass 1: {len(parsed)} lines, {len(labels)} labels, end address {pc:04X}")
    return tuple(parsed), labels


def encode_bytes(parsed_lines: Iterable[ParsedLine], labels: Mapping[str, int]) -> bytes:
    """
    Second pass: encode every instruction at its pass 1 address.

    Args:
        parsed_lines: Output of resolve_addresses
        labels: Completed label table

    Returns:
        The byte stream in program order

    Raises:
        AssemblerError: On any operand, opcode or resolution error
    """
    code = bytearray()

    for line in parsed_lines:
        if line.instruction is None:
            continue

        try:
            chunk = encode_instruction(line.instruction, line.address, labels)
        except AssemblerError as e:
            raise e.with_context(
                address=line.address,
                line_number=line.line_number,
                source_line=line.text,
            )

        # Pass 1 addresses are only valid if sizes agree
        if len(chunk) != line.size:
            raise AssemblerError(
                f"internal error: {line.instruction.mnemonic} encoded to {len(chunk)} "
                f"bytes, sized as {line.size}",
                address=line.address,
                line_number=line.line_number,
            )
        code.extend(chunk)

    logger.debug(f"Pass 2: generated {len(code)} bytes")
    return bytes(code)


def assemble(source_lines: Iterable[str], origin: int = 0x0000) -> AssemblyResult:
    """
    Assemble source lines in two passes.

    Args:
        source_lines: Raw source lines in program order
        origin: Load address of the first instruction

    Returns:
        AssemblyResult with the byte stream, labels and line snapshot

    Raises:
        AssemblerError: If assembly fails
    """
    origin &= 0xFFFF
    lines, labels = resolve_addresses(list(source_lines), origin)
    code = encode_bytes(lines, labels)
    return AssemblyResult(code=code, origin=origin, labels=dict(labels), lines=lines)


# =============================================================================
# Assembler Class
# =============================================================================

class Assembler:
    """
    Main 8085 assembler class.

    Wraps the two assembly passes and keeps the last result so that the
    code, symbols, listing and HEX output can be retrieved or written.

    Attributes:
        origin: Default load origin, used when a project does not set one
        record_size: Data bytes per Intel HEX record
    """

    def __init__(self, origin: int = 0x0000, record_size: int = DEFAULT_RECORD_SIZE,
                 verbose: bool = False):
        """
        Initialize the assembler.

        Args:
            origin: Default load origin
            record_size: Data bytes per Intel HEX record (1-255)
            verbose: Log progress at INFO level instead of DEBUG
        """
        self._origin = origin & 0xFFFF
        self._record_size = record_size
        self._verbose = verbose
        self._result: Optional[AssemblyResult] = None
        self._project_name: Optional[str] = None

    def _log(self, message: str) -> None:
        logger.log(logging.INFO if self._verbose else logging.DEBUG, message)

    # =========================================================================
    # Assembly Methods
    # =========================================================================

    def assemble_lines(self, source_lines: Iterable[str], origin: Optional[int] = None) -> bytes:
        """
        Assemble source lines.

        Args:
            source_lines: Raw source lines in program order
            origin: Load origin (defaults to the assembler's origin)

        Returns:
            The assembled byte stream

        Raises:
            AssemblerError: If assembly fails
        """
        origin = self._origin if origin is None else origin
        self._result = None
        self._project_name = None
        self._result = assemble(source_lines, origin)
        self._log(f"Assembled {len(self._result.code)} bytes at {self._result.origin:04X}")
        return self._result.code

    def assemble_string(self, source: str, origin: Optional[int] = None) -> bytes:
        """Assemble newline-separated source text."""
        return self.assemble_lines(source.splitlines(), origin)

    def assemble_project(self, project, origin: Optional[int] = None) -> bytes:
        """
        Assemble a loaded Project.

        The origin is taken from, in order: the origin argument, the
        project's own origin, the assembler's default origin.

        Args:
            project: The project to assemble
            origin: Overrides the project's own origin when given
        """
        if origin is None:
            origin = project.origin
        self._log(f"Assembling project '{project.project_name or '<unnamed>'}'")
        code = self.assemble_lines(project.source_code, origin)
        self._project_name = project.project_name
        return code

    def assemble_file(self, filepath: str | Path, origin: Optional[int] = None) -> bytes:
        """
        Assemble an .opgo project file.

        Raises:
            FileNotFoundError: If the file does not exist
            ProjectFormatError: If the file is not a valid project
            AssemblerError: If assembly fails
        """
        from opgo8085.project import load_project

        self._log(f"Assembling {filepath}...")
        return self.assemble_project(load_project(filepath), origin)

    # =========================================================================
    # Output Methods
    # =========================================================================

    def _require_result(self) -> AssemblyResult:
        if self._result is None:
            raise AssemblerError("nothing has been assembled")
        return self._result

    def get_result(self) -> AssemblyResult:
        """Get the full result of the last assembly."""
        return self._require_result()

    def get_code(self) -> bytes:
        """Get the assembled byte stream."""
        return self._require_result().code

    def get_origin(self) -> int:
        """Get the load origin of the last assembly."""
        return self._require_result().origin

    def get_symbols(self) -> dict[str, int]:
        """Get a copy of the label table."""
        return dict(self._require_result().labels)

    def get_hex(self) -> str:
        """Get the Intel HEX text for the assembled code."""
        result = self._require_result()
        return to_intel_hex(result.code, result.origin, self._record_size)

    def get_listing(self) -> str:
        """
        Get the assembly listing as a string.

        Returns:
            The listing showing addresses, generated bytes, and source lines,
            followed by the symbol table.
        """
        result = self._require_result()
        title = "OpGo 8085 Assembler Listing"
        if self._project_name:
            title = f"{title} - {self._project_name}"

        lines = [title, "=" * 60, "", "Addr  Code          Line  Source", "-" * 60]
        offset = 0
        for line in result.lines:
            chunk = result.code[offset:offset + line.size]
            offset += line.size
            hex_str = " ".join(f"{b:02X}" for b in chunk)
            addr = f"{line.address:04X}" if line.instruction or line.label else "    "
            lines.append(f"{addr}  {hex_str:12s}  {line.line_number:4d}  {line.text.rstrip()}")

        lines.append("")
        lines.append("Symbol Table")
        lines.append("-" * 30)
        for name, value in sorted(result.labels.items()):
            lines.append(f"{name:20s} = {value:04X}")
        return "\n".join(lines) + "\n"

    def write_hex(self, filepath: str | Path) -> None:
        """Write Intel HEX output."""
        Path(filepath).write_text(self.get_hex())
        self._log(f"Wrote {filepath}")

    def write_binary(self, filepath: str | Path) -> None:
        """
        Write raw binary output (machine code only, no records).

        Useful for ROM images or debugging.
        """
        code = self.get_code()
        Path(filepath).write_bytes(code)
        self._log(f"Wrote {len(code)} bytes to {filepath}")

    def write_listing(self, filepath: str | Path) -> None:
        """Write assembly listing file."""
        Path(filepath).write_text(self.get_listing())
        self._log(f"Wrote listing to {filepath}")

    def get_symbol_file(self) -> str:
        """
        Get the symbol file contents.

        Format: name address (one per line), after two comment lines
        """
        lines = ["# Symbol table", "# Generated by opgo2hex"]
        for name, value in sorted(self.get_symbols().items()):
            lines.append(f"{name} {value:04X}")
        return "\n".join(lines) + "\n"

    def write_symbols(self, filepath: str | Path) -> None:
        """Write symbol table file."""
        Path(filepath).write_text(self.get_symbol_file())
        self._log(f"Wrote symbols to {filepath}")
