"""
Intel HEX Parser
================

Reads Intel HEX text back into records and reconstructs the binary image.
This is used to verify emitted files and to inspect existing ones.

Validation
----------
Each non-blank line must be a well-formed record with a correct checksum.
Parsing stops at the end-of-file record; text after it is ignored with a
warning. A file without an end-of-file record is rejected.

Example:
    >>> records = parse_intel_hex(":030100003E057643\\n:00000001FF\\n")
    >>> records_to_bytes(records)
    (256, b'>\\x05v')
"""

import logging
from pathlib import Path

from opgo8085.errors import HexFormatError
from opgo8085.ihex.records import HexRecord, RecordType


logger = logging.getLogger(__name__)


def parse_intel_hex(text: str) -> list[HexRecord]:
    """
    Parse Intel HEX text into records.

    Args:
        text: Intel HEX file contents

    Returns:
        All records up to and including the end-of-file record

    Raises:
        HexFormatError: If a record is malformed or the EOF record is missing
        HexChecksumError: If a record checksum does not match
    """
    records = []
    lines = text.splitlines()
    for index, line in enumerate(lines, start=1):
        if not line.strip():
            continue

        record = HexRecord.from_line(line, line_number=index)
        records.append(record)

        if record.record_type == RecordType.END_OF_FILE:
            trailing = [rest for rest in lines[index:] if rest.strip()]
            if trailing:
                logger.warning(f"Ignoring {len(trailing)} line(s) after end-of-file record")
            logger.debug(f"Parsed {len(records)} record(s)")
            return records

    raise HexFormatError("missing end-of-file record")


def read_intel_hex(filepath: str | Path) -> list[HexRecord]:
    """Parse an Intel HEX file."""
    return parse_intel_hex(Path(filepath).read_text())


def records_to_bytes(records: list[HexRecord]) -> tuple[int, bytes]:
    """
    Reassemble data records into one contiguous image.

    Records are taken in file order; each must start where the previous
    one ended, modulo 64 KB, so an image that wraps from FFFF to 0000
    reads back as written.

    Args:
        records: Parsed records (non-data records are skipped)

    Returns:
        (origin, image bytes); origin is 0 for an image with no data

    Raises:
        HexFormatError: If a record does not follow on from the previous one
    """
    data_records = [r for r in records if r.record_type == RecordType.DATA and r.data]
    if not data_records:
        return 0, b""

    origin = data_records[0].address
    image = bytearray()
    expected = origin
    for record in data_records:
        if record.address != expected:
            raise HexFormatError(
                f"record at {record.address:04X} is not contiguous (expected {expected:04X})"
            )
        image.extend(record.data)
        expected = (expected + record.byte_count) & 0xFFFF

    return origin, bytes(image)
