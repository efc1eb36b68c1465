"""Issue and location model.

Issues compare by value: two issues with the same rule and the same
ordered locations are the same issue, which is what lets per-file issue
sets deduplicate them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class Location:
    """A reported source position.

    Attributes:
        file: File identity, or None for "the file the issue belongs to"
        line: Line number as a string
        message: Human-readable message for this position
    """

    file: Optional[str]
    line: str
    message: str

    def to_json(self) -> dict[str, Any]:
        return {"file": self.file, "line": self.line, "message": self.message}


@dataclass(frozen=True)
class Issue:
    """A finding: a rule and one primary plus zero or more secondary locations."""

    rule_id: str
    locations: tuple[Location, ...]

    def __post_init__(self) -> None:
        if not self.locations:
            raise ValueError("An issue needs at least one location")
        if not isinstance(self.locations, tuple):
            object.__setattr__(self, "locations", tuple(self.locations))

    @property
    def primary(self) -> Location:
        return self.locations[0]

    @property
    def secondary(self) -> tuple[Location, ...]:
        return self.locations[1:]

    @property
    def line(self) -> int:
        """Primary line as an int (1 when the line is not numeric)."""
        try:
            line = int(self.primary.line)
        except ValueError:
            return 1
        return line if line > 0 else 1

    def to_json(self) -> dict[str, Any]:
        return {
            "rule": self.rule_id,
            "locations": [loc.to_json() for loc in self.locations],
        }
