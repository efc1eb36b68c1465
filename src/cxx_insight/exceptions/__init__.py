"""Exception hierarchy for CXX Insight."""

from .aggregation import AggregationError, AggregatorStateError, MissingSnapshotError
from .analysis import (
    AnalysisError,
    FileAccessError,
    MalformedSubtreeError,
    ParsingError,
)
from .base import CxxInsightError
from .config import ConfigurationError, InvalidConfigError

__all__ = [
    "CxxInsightError",
    "AnalysisError",
    "FileAccessError",
    "ParsingError",
    "MalformedSubtreeError",
    "AggregationError",
    "AggregatorStateError",
    "MissingSnapshotError",
    "ConfigurationError",
    "InvalidConfigError",
]
