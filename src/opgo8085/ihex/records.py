"""
Intel HEX Record Definitions
============================

This module defines the data structure for a single Intel HEX record and
its text representation.

Record Format
-------------
    :LLAAAATT[DD...]CC

    LL    Byte count (number of DD pairs)
    AAAA  16-bit load address, big-endian
    TT    Record type
    DD    Data bytes
    CC    Checksum, two's complement of the sum of all preceding bytes

All fields are written as uppercase hexadecimal pairs.

Record Types
------------
- $00: Data
- $01: End of file (always `:00000001FF`)

Extended address records (types 02-05) are not produced: images never
exceed the 64 KB space of the 8085.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Optional

from opgo8085.errors import HexChecksumError, HexFormatError
from opgo8085.ihex.checksum import calculate_record_checksum


START_CODE = ":"
MAX_RECORD_DATA = 0xFF


class RecordType(IntEnum):
    """Intel HEX record type byte."""
    DATA = 0x00
    END_OF_FILE = 0x01


@dataclass(frozen=True)
class HexRecord:
    """
    One Intel HEX record.

    Attributes:
        address: 16-bit load address of the first data byte
        record_type: Record type byte
        data: Payload bytes
    """
    address: int
    record_type: RecordType
    data: bytes = b""

    @property
    def byte_count(self) -> int:
        """Number of payload bytes."""
        return len(self.data)

    def header_bytes(self) -> bytes:
        """Return the length, address and type bytes."""
        return bytes([
            self.byte_count,
            (self.address >> 8) & 0xFF,
            self.address & 0xFF,
            int(self.record_type),
        ])

    @property
    def checksum(self) -> int:
        """Checksum byte for this record."""
        return calculate_record_checksum(self.header_bytes() + self.data)

    def to_bytes(self) -> bytes:
        """Return every record byte, checksum included."""
        return self.header_bytes() + self.data + bytes([self.checksum])

    def to_line(self) -> str:
        """Render the record as a line of Intel HEX text (no newline)."""
        return START_CODE + self.to_bytes().hex().upper()

    @classmethod
    def data_record(cls, address: int, data: bytes) -> "HexRecord":
        """Create a type 00 data record."""
        if len(data) > MAX_RECORD_DATA:
            raise ValueError(f"record data too long: {len(data)} bytes (max {MAX_RECORD_DATA})")
        return cls(address & 0xFFFF, RecordType.DATA, bytes(data))

    @classmethod
    def end_of_file(cls) -> "HexRecord":
        """Create the type 01 end-of-file record."""
        return cls(0x0000, RecordType.END_OF_FILE)

    @classmethod
    def from_line(cls, line: str, line_number: Optional[int] = None) -> "HexRecord":
        """
        Parse one line of Intel HEX text.

        Args:
            line: Record text, with or without surrounding whitespace
            line_number: Position in the file, for error messages

        Raises:
            HexFormatError: If the line is not a well-formed record
            HexChecksumError: If the checksum does not match
        """
        text = line.strip()
        if not text.startswith(START_CODE):
            raise HexFormatError("record does not start with ':'", line_number)

        body = text[1:]
        if len(body) % 2 != 0 or len(body) < 10:
            raise HexFormatError(f"record has invalid length {len(body)}", line_number)

        try:
            raw = bytes.fromhex(body)
        except ValueError:
            raise HexFormatError("record contains non-hex characters", line_number) from None

        count = raw[0]
        if len(raw) != count + 5:
            raise HexFormatError(
                f"byte count {count} does not match record length {len(raw) - 5}",
                line_number,
            )

        try:
            record_type = RecordType(raw[3])
        except ValueError:
            raise HexFormatError(f"unsupported record type {raw[3]:02X}", line_number) from None

        expected = calculate_record_checksum(raw[:-1])
        if raw[-1] != expected:
            raise HexChecksumError(expected, raw[-1], line_number)

        return cls((raw[1] << 8) | raw[2], record_type, raw[4:-1])
