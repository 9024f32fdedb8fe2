"""
Assembler Configuration
=======================

Default settings for assembly and Intel HEX output. Configuration can
come from:
- Default values (defined here)
- Environment variables
- Command-line options (applied by the CLI on top of the above)

Environment variables (all optional):
    OPGO_ORIGIN: Default load origin (e.g. "0100H", "0x100", "256")
    OPGO_RECORD_SIZE: Data bytes per HEX record (1-255)
"""

import logging
import os
from dataclasses import dataclass

from opgo8085.assembler.numbers import parse_number
from opgo8085.errors import NumericLiteralError
from opgo8085.ihex.builder import DEFAULT_RECORD_SIZE
from opgo8085.ihex.records import MAX_RECORD_DATA


logger = logging.getLogger(__name__)


@dataclass
class AssemblerConfig:
    """
    Settings for one assembly run.

    Attributes:
        origin: Load origin used when the project does not set one
        record_size: Data bytes per Intel HEX record
        output_suffix: Extension for the default output file name
    """
    origin: int = 0x0000
    record_size: int = DEFAULT_RECORD_SIZE
    output_suffix: str = ".hex"

    @classmethod
    def from_env(cls) -> "AssemblerConfig":
        """
        Create AssemblerConfig from environment variables.

        Invalid values are ignored with a warning.
        """
        config = cls()

        if origin := os.environ.get("OPGO_ORIGIN"):
            try:
                value = parse_number(origin)
            except NumericLiteralError:
                logger.warning(f"Ignoring invalid OPGO_ORIGIN={origin!r}")
            else:
                if 0 <= value <= 0xFFFF:
                    config.origin = value
                else:
                    logger.warning(f"Ignoring out-of-range OPGO_ORIGIN={origin!r}")

        if record_size := os.environ.get("OPGO_RECORD_SIZE"):
            try:
                value = int(record_size)
            except ValueError:
                logger.warning(f"Ignoring invalid OPGO_RECORD_SIZE={record_size!r}")
            else:
                if 1 <= value <= MAX_RECORD_DATA:
                    config.record_size = value
                else:
                    logger.warning(f"Ignoring out-of-range OPGO_RECORD_SIZE={record_size!r}")

        return config
