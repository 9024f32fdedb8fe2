"""
Source Line Normalizer
======================

This module turns raw .opgo source lines into label and instruction parts.
Lines are independent, so there is no multi-line token stream: each line is
cleaned, an optional label is split off, and the remainder is divided into
a mnemonic and comma-separated operands.

Line Syntax
-----------
    [LABEL:] [MNEMONIC [OPERAND {, OPERAND}]] [;] [// comment]

- `//` starts a comment that runs to the end of the line
- one trailing `;` terminator is optional and ignored
- labels start with a letter or underscore, then letters, digits, underscores
- mnemonics are case-insensitive and stored uppercase
- operands keep their original spelling (labels are case-sensitive)

Examples:
    "MVI A, 05H;"          -> label None,   MVI ["A", "05H"]
    "LOOP: DCR A; // body" -> label "LOOP", DCR ["A"]
    "END:"                 -> label "END",  no instruction
    "// just a comment"    -> label None,   no instruction
"""

import re
from dataclasses import dataclass, field
from typing import Optional


COMMENT_MARKER = "//"

_TRAILING_TERMINATOR = re.compile(r"\s*;\s*$")
_LABEL_PREFIX = re.compile(r"^(?P<label>[A-Za-z_][A-Za-z0-9_]*):\s*(?P<rest>.*)$")


# =============================================================================
# Instruction Data Class
# =============================================================================

@dataclass(frozen=True)
class Instruction:
    """
    A decoded instruction.

    Attributes:
        mnemonic: Uppercase opcode name (e.g. "MOV")
        operands: Operand tokens in source order, whitespace-trimmed
    """
    mnemonic: str
    operands: tuple[str, ...] = field(default_factory=tuple)

    def __str__(self) -> str:
        if self.operands:
            return f"{self.mnemonic} {', '.join(self.operands)}"
        return self.mnemonic


# =============================================================================
# Normalization
# =============================================================================

def clean_line(raw: str) -> str:
    """
    Strip the comment and the statement terminator from a raw line.

    Args:
        raw: Source line as read from the project

    Returns:
        The remaining code text, trimmed (empty for blank/comment lines)
    """
    code = raw.split(COMMENT_MARKER, 1)[0]
    code = _TRAILING_TERMINATOR.sub("", code)
    return code.strip()


def split_label(text: str) -> tuple[Optional[str], str]:
    """
    Split a leading `LABEL:` off already-cleaned text.

    The label is taken whenever the text starts with an identifier and a
    colon, even if the identifier happens to be a mnemonic.

    Returns:
        (label or None, remaining text)
    """
    match = _LABEL_PREFIX.match(text)
    if match is None:
        return None, text
    return match.group("label"), match.group("rest").strip()


def tokenize(text: str) -> Optional[Instruction]:
    """
    Split label-free code text into mnemonic and operands.

    Returns:
        An Instruction, or None if the text is empty
    """
    if not text:
        return None

    parts = text.split(None, 1)
    mnemonic = parts[0].upper()
    operand_text = parts[1].strip() if len(parts) > 1 else ""
    if not operand_text:
        return Instruction(mnemonic)
    return Instruction(mnemonic, tuple(op.strip() for op in operand_text.split(",")))


def parse_line(raw: str) -> tuple[Optional[str], Optional[Instruction]]:
    """
    Normalize one raw source line.

    Args:
        raw: Source line as read from the project

    Returns:
        (label or None, Instruction or None)
    """
    text = clean_line(raw)
    if not text:
        return None, None

    label, rest = split_label(text)
    return label, tokenize(rest)
