"""
Intel HEX Encoding and Decoding
===============================

Intel HEX is the line-oriented, checksummed text format used by EPROM
programmers, trainer-kit monitors and simulators to load binary images at
specific addresses.

This module provides:
- **build_records / to_intel_hex**: Encode an assembled byte stream
- **parse_intel_hex / records_to_bytes**: Decode HEX text back into an image
- **HexRecord**: One record, with text rendering and parsing
- **Checksum utilities**: Calculate and verify record checksums

Quick Start
-----------
    >>> from opgo8085.ihex import to_intel_hex
    >>> print(to_intel_hex(bytes([0x76])), end="")
    :010000007689
    :00000001FF
"""

from opgo8085.ihex.builder import (
    DEFAULT_RECORD_SIZE,
    build_records,
    to_intel_hex,
    write_intel_hex,
)
from opgo8085.ihex.checksum import calculate_record_checksum, verify_record_checksum
from opgo8085.ihex.parser import parse_intel_hex, read_intel_hex, records_to_bytes
from opgo8085.ihex.records import HexRecord, RecordType

__all__ = [
    "DEFAULT_RECORD_SIZE",
    "build_records",
    "to_intel_hex",
    "write_intel_hex",
    "calculate_record_checksum",
    "verify_record_checksum",
    "parse_intel_hex",
    "read_intel_hex",
    "records_to_bytes",
    "HexRecord",
    "RecordType",
]
