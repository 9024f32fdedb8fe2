"""
OpGo Project Files
==================

An .opgo project is a JSON document describing one program:

    {
        "projectName": "countdown",
        "sourceCode": ["MVI A, 05H;", "LOOP: DCR A;", "JNZ LOOP;", "HLT;"],
        "origin": "0100H"
    }

- **sourceCode** (required): ordered list of assembly source lines
- **origin** (optional): load address, a number or any accepted numeric
  literal string; when absent the assembler default (0) applies
- **projectName** (optional): carried through for display only
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from opgo8085.assembler.numbers import parse_number
from opgo8085.errors import NumericLiteralError, OriginRangeError, ProjectFormatError


logger = logging.getLogger(__name__)


def validate_origin(origin: int) -> int:
    """
    Check that a load origin fits the 16-bit address space.

    Raises:
        OriginRangeError: If origin is outside 0..65535
    """
    if not 0 <= origin <= 0xFFFF:
        raise OriginRangeError(origin)
    return origin


@dataclass(frozen=True)
class Project:
    """
    A loaded .opgo project.

    Attributes:
        source_code: Source lines in program order
        origin: Load address of the first emitted byte, or None if unset
        project_name: Display name (unused by the assembler)
    """
    source_code: tuple[str, ...] = field(default_factory=tuple)
    origin: Optional[int] = None
    project_name: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any) -> "Project":
        """
        Build a Project from decoded JSON.

        Raises:
            ProjectFormatError: If the document does not have the expected shape
            OriginRangeError: If the origin does not fit in 16 bits
        """
        if not isinstance(data, dict):
            raise ProjectFormatError("invalid .opgo JSON: expected an object")

        source = data.get("sourceCode")
        if not isinstance(source, list):
            raise ProjectFormatError("invalid .opgo JSON: expected { sourceCode: string[] }")
        for index, line in enumerate(source):
            if not isinstance(line, str):
                raise ProjectFormatError(
                    f"invalid .opgo JSON: sourceCode[{index}] is not a string"
                )

        origin = None
        if data.get("origin") is not None:
            try:
                origin = parse_number(data["origin"])
            except NumericLiteralError as e:
                raise ProjectFormatError(f"invalid .opgo JSON: bad origin: {e.message}") from e
            validate_origin(origin)

        name = data.get("projectName")
        return cls(
            source_code=tuple(source),
            origin=origin,
            project_name=str(name) if name is not None else None,
        )

    @classmethod
    def from_json(cls, text: str) -> "Project":
        """Parse a project from JSON text."""
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise ProjectFormatError(f"invalid .opgo JSON: {e}") from e
        return cls.from_dict(data)

    def to_dict(self) -> dict[str, Any]:
        """Return the project as a JSON-compatible dictionary."""
        data: dict[str, Any] = {"sourceCode": list(self.source_code)}
        if self.project_name is not None:
            data["projectName"] = self.project_name
        if self.origin is not None:
            data["origin"] = self.origin
        return data


def load_project(filepath: str | Path) -> Project:
    """
    Load an .opgo project file.

    Raises:
        FileNotFoundError: If the file does not exist
        ProjectFormatError: If the file is not a valid project
    """
    filepath = Path(filepath)
    project = Project.from_json(filepath.read_text(encoding="utf-8"))
    origin = "default" if project.origin is None else f"{project.origin:04X}"
    logger.debug(
        f"Loaded project '{project.project_name or filepath.stem}' "
        f"({len(project.source_code)} lines, origin {origin})"
    )
    return project
