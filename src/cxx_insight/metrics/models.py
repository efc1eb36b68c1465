"""Per-function metric records.

A FunctionUnit is produced once per function body and is folded into
file-level counters straight away; only its increments survive, inside
the issues raised for it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class IncrementReason(str, Enum):
    """Why a cognitive complexity point was charged."""

    NESTING_STRUCTURE = "nesting-structure"
    NESTING_LEVEL_PENALTY = "nesting-level-penalty"
    LOGICAL_OPERATOR_SEQUENCE = "logical-operator-sequence"
    RECURSION = "recursion"
    JUMP = "jump"


@dataclass(frozen=True)
class ComplexityIncrement:
    """One contribution to a function's cognitive complexity.

    Attributes:
        line: Source line of the construct
        delta: Points charged (always positive)
        reason: Rule that charged the points
        construct: Short label of the construct (``if``, ``&&``, ``goto``, ...)
    """

    line: int
    delta: int
    reason: IncrementReason
    construct: str = ""

    def describe(self) -> str:
        """Short human-readable form, e.g. ``+2 (nesting-level-penalty: if)``."""
        if self.construct:
            return f"+{self.delta} ({self.reason.value}: {self.construct})"
        return f"+{self.delta} ({self.reason.value})"


@dataclass(frozen=True)
class CognitiveScore:
    """Result of the cognitive complexity calculator."""

    increments: tuple[ComplexityIncrement, ...] = ()

    @property
    def score(self) -> int:
        return sum(i.delta for i in self.increments)


@dataclass
class FunctionUnit:
    """One analysed function or method body.

    Attributes:
        name: Qualified function name as written at the definition
        line: Line of the function declaration
        body_lines: Lines of code inside the body
        cyclomatic: Cyclomatic complexity (>= 1)
        increments: Ordered cognitive complexity increments
    """

    name: str
    line: int
    body_lines: int
    cyclomatic: int
    increments: tuple[ComplexityIncrement, ...] = field(default_factory=tuple)

    @property
    def cognitive(self) -> int:
        """Cognitive complexity, always the sum of the increments."""
        return sum(i.delta for i in self.increments)
