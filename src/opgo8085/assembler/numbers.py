"""
Numeric Literal Parsing
=======================

Converts textual numeric tokens into integers.

Supported Formats
-----------------
| Format      | Form        | Example | Value |
|-------------|-------------|---------|-------|
| Hexadecimal | 0x prefix   | 0x1F    | 31    |
| Hexadecimal | H suffix    | 1FH     | 31    |
| Decimal     | digits only | 31      | 31    |

Hex digits, the 0x prefix and the H suffix are case-insensitive.
Signs, underscores and fractions are not accepted.
"""

import re

from opgo8085.errors import NumericLiteralError


_HEX_PREFIX = re.compile(r"^0X[0-9A-F]+$")
_HEX_SUFFIX = re.compile(r"^[0-9A-F]+H$")
_DECIMAL = re.compile(r"^[0-9]+$")


def parse_number(token: str | int) -> int:
    """
    Parse a numeric literal.

    Args:
        token: Literal text, or an int which is returned unchanged

    Returns:
        The integer value

    Raises:
        NumericLiteralError: If the token is not a valid literal

    Example:
        >>> parse_number("0x1A"), parse_number("1AH"), parse_number("26")
        (26, 26, 26)
    """
    if isinstance(token, int) and not isinstance(token, bool):
        return token

    text = str(token).strip().upper()
    if _HEX_PREFIX.match(text):
        return int(text[2:], 16)
    if _HEX_SUFFIX.match(text):
        return int(text[:-1], 16)
    if _DECIMAL.match(text):
        return int(text, 10)
    raise NumericLiteralError(str(token))


def is_number(token: str) -> bool:
    """Return True if the token parses as a numeric literal."""
    try:
        parse_number(token)
    except NumericLiteralError:
        return False
    return True
