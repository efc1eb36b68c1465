"""Aggregation exceptions: lifecycle misuse and snapshot lookups."""

from .base import CxxInsightError


class AggregationError(CxxInsightError):
    """Base class for aggregation-related errors."""

    pass


class MissingSnapshotError(AggregationError):
    """Raised when a file snapshot is requested before the file finished.

    A file that legitimately has no functions still gets a snapshot, so this
    always signals a usage error rather than an empty result.
    """

    def __init__(self, file: str):
        super().__init__(f"No snapshot recorded for file: {file}", details={"file": file})
        self.file = file


class AggregatorStateError(AggregationError):
    """Raised when a lifecycle transition is invoked from the wrong state."""

    def __init__(self, operation: str, state: str, file: str = ""):
        details = {"operation": operation, "state": state}
        if file:
            details["file"] = file
        super().__init__(f"Cannot {operation} while aggregator is {state}", details=details)
        self.operation = operation
        self.state = state
        self.file = file
