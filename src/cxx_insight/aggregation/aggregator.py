"""Function → file → module aggregation of threshold metrics.

Each analysed function is classified twice:
    - by cyclomatic complexity (complex functions / LOC in complex functions)
    - by body size (big functions / LOC in big functions)

Per-file buckets are reset on ``enter_file`` and frozen into a
FileMetricSnapshot on ``finish``, which is also folded into the
ModuleAccumulator.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Mapping

from ..logging_config import get_logger
from ..metrics.counts import CountBucket
from ..metrics.models import FunctionUnit
from .classifier import ThresholdClassifier
from .lifecycle import FileScopedAggregator

logger = get_logger(__name__)


class MetricFamily(str, Enum):
    """Threshold-classified metrics tracked per file and per module."""

    COMPLEX_FUNCTIONS = "complex_functions"
    COMPLEX_FUNCTIONS_LOC = "complex_functions_loc"
    BIG_FUNCTIONS = "big_functions"
    BIG_FUNCTIONS_LOC = "big_functions_loc"


@dataclass(frozen=True)
class FunctionTotals:
    """Plain sums over the functions of a file or module."""

    functions: int = 0
    complexity: int = 0
    cognitive_complexity: int = 0

    def __add__(self, other: FunctionTotals) -> FunctionTotals:
        return FunctionTotals(
            self.functions + other.functions,
            self.complexity + other.complexity,
            self.cognitive_complexity + other.cognitive_complexity,
        )

    def with_function(self, unit: FunctionUnit) -> FunctionTotals:
        return FunctionTotals(
            self.functions + 1,
            self.complexity + unit.cyclomatic,
            self.cognitive_complexity + unit.cognitive,
        )


@dataclass(frozen=True)
class FileMetricSnapshot:
    """Frozen per-file buckets, taken when the file finished.

    ``bucket`` hands out copies, so callers can never alter a stored
    snapshot.
    """

    file: str
    buckets: Mapping[MetricFamily, CountBucket]
    totals: FunctionTotals = FunctionTotals()

    def bucket(self, family: MetricFamily) -> CountBucket:
        return self.buckets[family].copy()


@dataclass
class ModuleAccumulator:
    """Module-wide buckets, the additive fold of every file snapshot."""

    buckets: dict[MetricFamily, CountBucket] = field(
        default_factory=lambda: {family: CountBucket() for family in MetricFamily}
    )
    totals: FunctionTotals = FunctionTotals()
    files: int = 0

    def fold(self, snapshot: FileMetricSnapshot) -> None:
        for family in MetricFamily:
            self.buckets[family].add(snapshot.buckets[family])
        self.totals = self.totals + snapshot.totals
        self.files += 1

    def bucket(self, family: MetricFamily) -> CountBucket:
        return self.buckets[family].copy()


class HierarchicalAggregator(FileScopedAggregator[FileMetricSnapshot]):
    """Classifies functions and accumulates them per file and per module.

    Usage:
        aggregator = HierarchicalAggregator(cyclomatic_threshold=10, size_threshold=20)
        aggregator.enter_file("a.cc")
        for unit in units:
            aggregator.record_function(unit)
        snapshot = aggregator.finish("a.cc")
    """

    def __init__(self, cyclomatic_threshold: int = 10, size_threshold: int = 20) -> None:
        super().__init__()
        self._complexity = ThresholdClassifier(cyclomatic_threshold, "cyclomatic_threshold")
        self._size = ThresholdClassifier(size_threshold, "size_threshold")
        self._live = {family: CountBucket() for family in MetricFamily}
        self._live_totals = FunctionTotals()
        self.module = ModuleAccumulator()
        logger.debug(
            f"Cyclomatic complexity threshold: {cyclomatic_threshold}, "
            f"function size threshold: {size_threshold}"
        )

    def record_function(self, unit: FunctionUnit) -> None:
        """Classify one function into the current file's buckets."""
        self._require_accumulating("record function")
        self._complexity.record(
            unit.cyclomatic,
            unit.body_lines,
            self._live[MetricFamily.COMPLEX_FUNCTIONS],
            self._live[MetricFamily.COMPLEX_FUNCTIONS_LOC],
        )
        self._size.record(
            unit.body_lines,
            unit.body_lines,
            self._live[MetricFamily.BIG_FUNCTIONS],
            self._live[MetricFamily.BIG_FUNCTIONS_LOC],
        )
        self._live_totals = self._live_totals.with_function(unit)

    def live_bucket(self, family: MetricFamily) -> CountBucket:
        """Copy of the current file's running bucket."""
        return self._live[family].copy()

    def _reset_live(self) -> None:
        for bucket in self._live.values():
            bucket.reset()
        self._live_totals = FunctionTotals()

    def _snapshot_live(self, file: str) -> FileMetricSnapshot:
        return FileMetricSnapshot(
            file=file,
            buckets=MappingProxyType({family: b.copy() for family, b in self._live.items()}),
            totals=self._live_totals,
        )

    def _fold(self, snapshot: FileMetricSnapshot) -> None:
        self.module.fold(snapshot)
