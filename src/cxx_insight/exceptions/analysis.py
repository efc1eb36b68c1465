"""Analysis-related exceptions: file access, parsing, syntax tree shape."""

from pathlib import Path
from typing import Optional

from .base import CxxInsightError


class AnalysisError(CxxInsightError):
    """Base class for analysis-related errors."""
    pass


class FileAccessError(AnalysisError):
    """Raised when a file cannot be accessed or read."""

    def __init__(self, filepath: Path, reason: str):
        super().__init__(
            f"Cannot access file: {filepath}",
            details={"filepath": str(filepath), "reason": reason},
        )
        self.filepath = filepath
        self.reason = reason


class ParsingError(AnalysisError):
    """Raised when file content cannot be parsed."""

    def __init__(self, filepath: Path, reason: str):
        super().__init__(
            f"Failed to parse C++ file: {filepath}",
            details={"filepath": str(filepath), "reason": reason},
        )
        self.filepath = filepath
        self.reason = reason


class MalformedSubtreeError(AnalysisError):
    """Raised when a syntax node lacks a child the calculators rely on.

    Miscounting silently would corrupt every file and module aggregate,
    so calculators refuse to score the function instead.
    """

    def __init__(self, kind: str, line: int, expected: str, function: Optional[str] = None):
        details = {"kind": kind, "line": str(line), "expected": expected}
        if function is not None:
            details["function"] = function
        super().__init__(f"Malformed {kind} node at line {line}: missing {expected}", details=details)
        self.kind = kind
        self.line = line
        self.expected = expected
        self.function = function
