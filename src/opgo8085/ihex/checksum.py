"""
Intel HEX Checksum
==================

Every Intel HEX record ends with a one-byte checksum:

- Sum all record bytes before it (length, address high, address low,
  record type, data bytes)
- Take the two's complement of the low 8 bits: `(-sum) & 0xFF`

A record is therefore intact exactly when all of its bytes, checksum
included, sum to zero modulo 256.

Reference
---------
- Intel Hexadecimal Object File Format Specification, Rev. A (1988)
"""

from typing import Iterable


def calculate_record_checksum(record_bytes: Iterable[int]) -> int:
    """
    Calculate the checksum for a record's bytes.

    Args:
        record_bytes: Length, address high, address low, type and data bytes

    Returns:
        Checksum byte (0x00 - 0xFF)

    Example:
        >>> f"{calculate_record_checksum([0x00, 0x00, 0x00, 0x01]):02X}"
        'FF'
    """
    return (-sum(record_bytes)) & 0xFF


def verify_record_checksum(record_bytes: Iterable[int]) -> bool:
    """
    Check that a full record (checksum included) sums to zero mod 256.
    """
    return sum(record_bytes) & 0xFF == 0
