"""Per-run analysis state.

Everything that accumulates during a run lives on an AnalysisRunContext
that is passed explicitly to the engine and the reporting facade; there is
no process-wide state. Parallel workers each analyse into a context from
``spawn()`` and the results are combined with ``merge()``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from .aggregation import HierarchicalAggregator, PublicApiCounter
from .config import DEFAULT_CONFIG, AnalysisConfig
from .issues import CognitiveComplexityCheck, IssueCollector


@dataclass
class AnalysisRunContext:
    """Configuration plus every accumulator of one analysis run."""

    config: AnalysisConfig
    aggregator: HierarchicalAggregator
    api_counter: PublicApiCounter
    issues: IssueCollector
    cognitive_check: CognitiveComplexityCheck
    failed_files: list[str] = field(default_factory=list)

    @classmethod
    def create(cls, config: Optional[AnalysisConfig] = None) -> AnalysisRunContext:
        config = config or DEFAULT_CONFIG
        return cls(
            config=config,
            aggregator=HierarchicalAggregator(
                cyclomatic_threshold=config.cyclomatic_threshold,
                size_threshold=config.size_threshold,
            ),
            api_counter=PublicApiCounter(),
            issues=IssueCollector(),
            cognitive_check=CognitiveComplexityCheck(
                max_complexity=config.cognitive_threshold,
                secondary_locations=config.secondary_locations,
            ),
        )

    def spawn(self) -> AnalysisRunContext:
        """Fresh, empty context with the same configuration."""
        return AnalysisRunContext.create(self.config)

    def merge(self, other: AnalysisRunContext) -> None:
        """Fold a worker's finished files into this context."""
        self.aggregator.merge(other.aggregator)
        self.api_counter.merge(other.api_counter)
        self.issues.merge(other.issues)
        self.failed_files.extend(other.failed_files)

    @property
    def files(self) -> list[str]:
        """Identities of all successfully analysed files, sorted."""
        return sorted(self.aggregator.snapshots)
