"""
OpGo 8085 Error Hierarchy
=========================

This module defines the exception hierarchy for the whole toolchain.
All exceptions inherit from OpgoError, allowing callers to catch every
toolchain error with a single except clause if desired.

Exception Hierarchy
-------------------
OpgoError (base)
├── OriginRangeError - load origin outside 0..65535
├── AssemblerError (assembler-related)
│   ├── AssemblySyntaxError - malformed source text
│   │   └── NumericLiteralError - token is not a valid number
│   ├── DuplicateLabelError - label declared more than once
│   ├── UnknownOpcodeError - mnemonic not in the opcode table
│   ├── OperandError - wrong register name or operand count
│   └── UndefinedSymbolError - operand is neither a label nor a number
├── ProjectError (.opgo project handling)
│   └── ProjectFormatError - invalid project JSON
└── HexError (Intel HEX handling)
    ├── HexFormatError - malformed record line
    └── HexChecksumError - record checksum mismatch

Error messages follow this format:
    line 3: error: MOV expects registers at address 0010
        MOV X, A;
    hint: valid names are B, C, D, E, H, L, M, A
"""

from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class OpgoError(Exception):
    """
    Base exception for all toolchain errors.

        try:
            assembler.assemble_file("program.opgo")
        except OpgoError as e:
            print(f"Error: {e}")
    """
    pass


class OriginRangeError(OpgoError):
    """Load origin does not fit in the 16-bit address space."""

    def __init__(self, origin: int):
        self.origin = origin
        super().__init__(f"origin {origin} out of range (must be 0..65535)")


# =============================================================================
# Assembler Exceptions
# =============================================================================

class AssemblerError(OpgoError):
    """
    Base exception for all assembler-related errors.

    Attributes:
        message: The error description
        address: Program counter of the failing instruction (optional)
        line_number: 1-based source line (optional)
        source_line: The raw source text of that line (optional)
        hint: A suggestion for fixing the error (optional)
    """

    def __init__(
        self,
        message: str,
        address: Optional[int] = None,
        line_number: Optional[int] = None,
        source_line: Optional[str] = None,
        hint: Optional[str] = None,
    ):
        self.message = message
        self.address = address
        self.line_number = line_number
        self.source_line = source_line
        self.hint = hint
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """
        Format the error message with location, source context, and hint.

        Example output:
            line 3: error: undefined symbol 'LOPP' at address 0003
                JNZ LOPP;
            hint: did you mean 'LOOP'?
        """
        text = self.message
        if self.address is not None:
            text = f"{text} at address {self.address:04X}"

        parts = []
        if self.line_number is not None:
            parts.append(f"line {self.line_number}: error: {text}")
        else:
            parts.append(f"error: {text}")

        if self.source_line is not None:
            parts.append(f"    {self.source_line.strip()}")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)

    def with_context(
        self,
        address: Optional[int] = None,
        line_number: Optional[int] = None,
        source_line: Optional[str] = None,
    ) -> "AssemblerError":
        """
        Attach location information that was not known where the error
        was raised. Fields already set are kept.
        """
        if self.address is None:
            self.address = address
        if self.line_number is None:
            self.line_number = line_number
        if self.source_line is None:
            self.source_line = source_line
        self.args = (self._format_message(),)
        return self

    def __str__(self) -> str:
        return self._format_message()


class AssemblySyntaxError(AssemblerError):
    """
    Syntax error in assembly source code.

    Raised when a source line cannot be split into label, mnemonic,
    and operands.
    """
    pass


class NumericLiteralError(AssemblySyntaxError):
    """
    Token is not a valid numeric literal.

    Accepted forms are 0x1F, 1FH and 31. Signs, underscores and
    fractions are rejected.
    """

    def __init__(self, token: str, **kwargs):
        self.token = token
        super().__init__(f"invalid numeric literal: {token}", **kwargs)


class DuplicateLabelError(AssemblerError):
    """
    Label declared more than once.

    Includes the address of the first definition in the hint.
    """

    def __init__(
        self,
        label: str,
        original_address: Optional[int] = None,
        **kwargs,
    ):
        self.label = label
        self.original_address = original_address

        hint = None
        if original_address is not None:
            hint = f"'{label}' was first defined at address {original_address:04X}"

        super().__init__(f"duplicate label: {label}", hint=hint, **kwargs)


class UnknownOpcodeError(AssemblerError):
    """Mnemonic is not part of the supported 8085 subset."""

    def __init__(self, mnemonic: str, **kwargs):
        self.mnemonic = mnemonic
        super().__init__(f"unsupported opcode: {mnemonic}", **kwargs)


class OperandError(AssemblerError):
    """
    Operands do not fit the instruction.

    Raised for a wrong register or register-pair name, or for the wrong
    number of operands. The message names the mnemonic, for example
    "MOV expects registers".
    """

    def __init__(self, mnemonic: str, expected: str, **kwargs):
        self.mnemonic = mnemonic
        self.expected = expected
        super().__init__(f"{mnemonic} expects {expected}", **kwargs)


class UndefinedSymbolError(AssemblerError):
    """
    Operand is neither a known label nor a valid numeric literal.

    The assembler suggests similarly-named labels to help catch typos.
    """

    def __init__(
        self,
        symbol: str,
        similar_symbols: Optional[list[str]] = None,
        **kwargs,
    ):
        self.symbol = symbol
        self.similar_symbols = similar_symbols or []

        hint = kwargs.pop("hint", None)
        if not hint and self.similar_symbols:
            suggestions = ", ".join(f"'{s}'" for s in self.similar_symbols[:3])
            hint = f"did you mean {suggestions}?"

        super().__init__(f"undefined symbol '{symbol}'", hint=hint, **kwargs)


# =============================================================================
# Project Exceptions
# =============================================================================

class ProjectError(OpgoError):
    """Base exception for .opgo project handling."""
    pass


class ProjectFormatError(ProjectError):
    """
    Project file is not a valid .opgo document.

    A project must be a JSON object with a "sourceCode" array of strings.
    """
    pass


# =============================================================================
# Intel HEX Exceptions
# =============================================================================

class HexError(OpgoError):
    """Base exception for Intel HEX encoding and decoding."""
    pass


class HexFormatError(HexError):
    """
    Malformed Intel HEX record.

    Attributes:
        line_number: 1-based line in the HEX text (optional)
    """

    def __init__(self, message: str, line_number: Optional[int] = None):
        self.line_number = line_number
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)


class HexChecksumError(HexFormatError):
    """Record checksum does not match its contents."""

    def __init__(self, expected: int, actual: int, line_number: Optional[int] = None):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"checksum mismatch (expected {expected:02X}, found {actual:02X})",
            line_number=line_number,
        )
