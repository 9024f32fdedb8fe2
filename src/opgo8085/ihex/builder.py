"""
Intel HEX Builder
=================

Converts an assembled byte stream into Intel HEX text.

The stream is cut into fixed-size windows (16 bytes by default, the last
one possibly shorter). Each window becomes a type 00 data record at the
running load address, which starts at the origin and wraps at 64 KB.
The text always ends with the end-of-file record `:00000001FF`.

Example:
    >>> print(to_intel_hex(bytes([0x3E, 0x05, 0x76]), origin=0x0100), end="")
    :030100003E057643
    :00000001FF
"""

import logging
from pathlib import Path

from opgo8085.ihex.records import MAX_RECORD_DATA, HexRecord


logger = logging.getLogger(__name__)

DEFAULT_RECORD_SIZE = 16


def build_records(
    data: bytes,
    origin: int = 0x0000,
    record_size: int = DEFAULT_RECORD_SIZE,
) -> list[HexRecord]:
    """
    Split a byte stream into data records followed by the EOF record.

    Args:
        data: Byte stream to encode
        origin: Load address of the first byte
        record_size: Maximum data bytes per record (1-255)

    Returns:
        Data records in address order, then the end-of-file record

    Raises:
        ValueError: If record_size is out of range
    """
    if not 1 <= record_size <= MAX_RECORD_DATA:
        raise ValueError(f"record size must be 1..{MAX_RECORD_DATA}, got {record_size}")

    records = []
    address = origin & 0xFFFF
    for start in range(0, len(data), record_size):
        chunk = data[start:start + record_size]
        records.append(HexRecord.data_record(address, chunk))
        address = (address + len(chunk)) & 0xFFFF

    records.append(HexRecord.end_of_file())
    logger.debug(
        f"Built {len(records) - 1} data record(s) for {len(data)} bytes "
        f"at {origin & 0xFFFF:04X}"
    )
    return records


def to_intel_hex(
    data: bytes,
    origin: int = 0x0000,
    record_size: int = DEFAULT_RECORD_SIZE,
) -> str:
    """
    Encode a byte stream as Intel HEX text.

    Returns:
        One record per line, newline-terminated
    """
    records = build_records(data, origin, record_size)
    return "\n".join(record.to_line() for record in records) + "\n"


def write_intel_hex(
    filepath: str | Path,
    data: bytes,
    origin: int = 0x0000,
    record_size: int = DEFAULT_RECORD_SIZE,
) -> None:
    """Write a byte stream to an Intel HEX file."""
    text = to_intel_hex(data, origin, record_size)
    Path(filepath).write_text(text)
    logger.debug(f"Wrote {filepath}")
