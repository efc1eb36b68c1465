"""Measurements and issues published at the end of a run.

Per-file families are read from stored snapshots; module families from
the module accumulators. A measurement is a plain (metric, component,
value) triple so formatters never need to know how it was computed.

Module-level threshold families are only published when at least one
file finished; documentation and issue counts are always published.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

from .aggregation import ApiCount, FunctionTotals, MetricFamily
from .context import AnalysisRunContext
from .issues import Issue
from .logging_config import get_logger
from .metrics.counts import CountBucket

logger = get_logger(__name__)

MODULE_COMPONENT = "<module>"

Number = Union[int, float]


class Metric(str, Enum):
    """Published metric keys."""

    COMPLEX_FUNCTIONS = "complex_functions"
    COMPLEX_FUNCTIONS_PERC = "complex_functions_perc"
    COMPLEX_FUNCTIONS_LOC = "complex_functions_loc"
    COMPLEX_FUNCTIONS_LOC_PERC = "complex_functions_loc_perc"

    BIG_FUNCTIONS = "big_functions"
    BIG_FUNCTIONS_PERC = "big_functions_perc"
    LOC_IN_FUNCTIONS = "loc_in_functions"
    BIG_FUNCTIONS_LOC = "big_functions_loc"
    BIG_FUNCTIONS_LOC_PERC = "big_functions_loc_perc"

    PUBLIC_API = "public_api"
    PUBLIC_UNDOCUMENTED_API = "public_undocumented_api"
    PUBLIC_DOCUMENTED_API_DENSITY = "public_documented_api_density"

    FUNCTIONS = "functions"
    COMPLEXITY = "complexity"
    COGNITIVE_COMPLEXITY = "cognitive_complexity"

    ISSUES = "issues"


@dataclass(frozen=True)
class Measurement:
    """One published value."""

    metric: Metric
    component: str
    value: Number

    def to_json(self) -> dict[str, Any]:
        return {"metric": self.metric.value, "component": self.component, "value": self.value}


@dataclass
class AnalysisReport:
    """Everything a formatter renders for one run."""

    module: list[Measurement] = field(default_factory=list)
    files: dict[str, list[Measurement]] = field(default_factory=dict)
    issues: dict[str, list[Issue]] = field(default_factory=dict)
    failed_files: list[str] = field(default_factory=list)

    @property
    def issue_count(self) -> int:
        return sum(len(issues) for issues in self.issues.values())

    def module_value(self, metric: Metric) -> Number:
        """Value of a module metric, 0 if it was not published."""
        for m in self.module:
            if m.metric is metric:
                return m.value
        return 0

    def file_value(self, file: str, metric: Metric) -> Number:
        for m in self.files.get(file, ()):
            if m.metric is metric:
                return m.value
        return 0


class ReportingFacade:
    """Read-only view over a finished run context."""

    def __init__(self, context: AnalysisRunContext) -> None:
        self.context = context

    # ── Per file ──────────────────────────────────────────────────────

    def file_measurements(self, file: str) -> list[Measurement]:
        """Measurements of one finished file.

        Raises:
            MissingSnapshotError: If the file never finished
        """
        snapshot = self.context.aggregator.snapshot(file)
        if self.context.api_counter.has_snapshot(file):
            api = self.context.api_counter.snapshot(file)
        else:
            api = ApiCount()

        measurements = self._threshold_families(file, snapshot.bucket)
        measurements.extend(self._api_family(file, api))
        measurements.extend(self._totals(file, snapshot.totals))
        return measurements

    def file_issues(self, file: str) -> list[Issue]:
        """Hand off a file's issues, ordered by line; they are gone afterwards."""
        issues = self.context.issues.drain(file)
        return sorted(issues, key=lambda i: (i.line, i.primary.message))

    # ── Module ────────────────────────────────────────────────────────

    def module_measurements(self, component: str = MODULE_COMPONENT) -> list[Measurement]:
        measurements: list[Measurement] = []
        aggregator = self.context.aggregator

        if aggregator.snapshots:
            measurements.extend(self._threshold_families(component, aggregator.module.bucket))
            measurements.extend(self._totals(component, aggregator.module.totals))
        else:
            logger.debug("No finished files; module complexity and size measures skipped")

        measurements.extend(self._api_family(component, self.context.api_counter.module))
        measurements.append(Measurement(Metric.ISSUES, component, len(self.context.issues)))
        return measurements

    # ── Whole run ─────────────────────────────────────────────────────

    def build_report(self) -> AnalysisReport:
        """Publish every measurement and drain every issue."""
        report = AnalysisReport(module=self.module_measurements())
        for file in self.context.files:
            report.files[file] = self.file_measurements(file)
        for file in self.context.issues.files:
            report.issues[file] = self.file_issues(file)
        report.failed_files = sorted(self.context.failed_files)
        return report

    # ── Families ──────────────────────────────────────────────────────

    @staticmethod
    def _threshold_families(component: str, bucket_of) -> list[Measurement]:
        complex_count: CountBucket = bucket_of(MetricFamily.COMPLEX_FUNCTIONS)
        complex_loc: CountBucket = bucket_of(MetricFamily.COMPLEX_FUNCTIONS_LOC)
        big_count: CountBucket = bucket_of(MetricFamily.BIG_FUNCTIONS)
        big_loc: CountBucket = bucket_of(MetricFamily.BIG_FUNCTIONS_LOC)

        return [
            Measurement(Metric.COMPLEX_FUNCTIONS, component, complex_count.over),
            Measurement(Metric.COMPLEX_FUNCTIONS_PERC, component, complex_count.density),
            Measurement(Metric.COMPLEX_FUNCTIONS_LOC, component, complex_loc.over),
            Measurement(Metric.COMPLEX_FUNCTIONS_LOC_PERC, component, complex_loc.density),
            Measurement(Metric.BIG_FUNCTIONS, component, big_count.over),
            Measurement(Metric.BIG_FUNCTIONS_PERC, component, big_count.density),
            Measurement(Metric.LOC_IN_FUNCTIONS, component, big_loc.total),
            Measurement(Metric.BIG_FUNCTIONS_LOC, component, big_loc.over),
            Measurement(Metric.BIG_FUNCTIONS_LOC_PERC, component, big_loc.density),
        ]

    @staticmethod
    def _api_family(component: str, api: ApiCount) -> list[Measurement]:
        return [
            Measurement(Metric.PUBLIC_API, component, api.total),
            Measurement(Metric.PUBLIC_UNDOCUMENTED_API, component, api.undocumented),
            Measurement(Metric.PUBLIC_DOCUMENTED_API_DENSITY, component, api.documented_density),
        ]

    @staticmethod
    def _totals(component: str, totals: FunctionTotals) -> list[Measurement]:
        return [
            Measurement(Metric.FUNCTIONS, component, totals.functions),
            Measurement(Metric.COMPLEXITY, component, totals.complexity),
            Measurement(Metric.COGNITIVE_COMPLEXITY, component, totals.cognitive_complexity),
        ]
