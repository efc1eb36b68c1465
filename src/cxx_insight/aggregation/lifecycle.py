"""File-scoped accumulation lifecycle shared by the aggregators.

State machine per run:

    IDLE --enter_file--> ACCUMULATING --finish--> IDLE
                                     --abandon--> IDLE

``finish`` turns the live per-file counters into an immutable snapshot,
stores it under the file's identity and folds it into the module total.
``abandon`` drops the live counters so a file whose analysis failed never
reaches the module total.

Instances are not thread-safe. Parallel analysis gives every worker its
own instance and combines them with ``merge``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from types import MappingProxyType
from typing import Generic, Mapping, Optional, TypeVar

from ..exceptions import AggregationError, AggregatorStateError, MissingSnapshotError
from ..logging_config import get_logger

logger = get_logger(__name__)

S = TypeVar("S")


class AggregatorState(str, Enum):
    IDLE = "idle"
    ACCUMULATING = "accumulating"


class FileScopedAggregator(ABC, Generic[S]):
    """Base class: per-file live state, per-file snapshots, module total."""

    def __init__(self) -> None:
        self.state = AggregatorState.IDLE
        self._current: Optional[str] = None
        self._snapshots: dict[str, S] = {}

    # ── Lifecycle ─────────────────────────────────────────────────────

    def enter_file(self, file: str) -> None:
        """Start accumulating a file with zeroed counters."""
        if self.state is not AggregatorState.IDLE:
            raise AggregatorStateError("enter file", self.state.value, file)
        if file in self._snapshots:
            raise AggregationError(f"File already aggregated: {file}", details={"file": file})
        self._reset_live()
        self._current = file
        self.state = AggregatorState.ACCUMULATING

    def finish(self, file: Optional[str] = None) -> S:
        """Snapshot the current file, fold it into the module total and return it."""
        current = self._require_accumulating("finish file")
        if file is not None and file != current:
            raise AggregatorStateError("finish " + file, f"accumulating {current}", file)
        snapshot = self._snapshot_live(current)
        self._snapshots[current] = snapshot
        self._fold(snapshot)
        self._current = None
        self.state = AggregatorState.IDLE
        return snapshot

    def abandon(self, file: Optional[str] = None) -> None:
        """Discard the current file's partial counters."""
        current = self._require_accumulating("abandon file")
        if file is not None and file != current:
            raise AggregatorStateError("abandon " + file, f"accumulating {current}", file)
        logger.debug(f"Discarding partial counters for {current}")
        self._reset_live()
        self._current = None
        self.state = AggregatorState.IDLE

    # ── Lookups ───────────────────────────────────────────────────────

    def snapshot(self, file: str) -> S:
        """Stored snapshot of a finished file.

        Raises:
            MissingSnapshotError: If the file has not finished
        """
        try:
            return self._snapshots[file]
        except KeyError:
            raise MissingSnapshotError(file) from None

    def has_snapshot(self, file: str) -> bool:
        return file in self._snapshots

    @property
    def snapshots(self) -> Mapping[str, S]:
        return MappingProxyType(self._snapshots)

    @property
    def current_file(self) -> Optional[str]:
        return self._current

    # ── Reduction ─────────────────────────────────────────────────────

    def merge(self, other: FileScopedAggregator[S]) -> None:
        """Fold every finished file of ``other`` into this aggregator.

        Module totals are rebuilt from the snapshots, so merging is
        order-independent.
        """
        if other.state is not AggregatorState.IDLE:
            raise AggregatorStateError("merge", f"{other.state.value} (source)", other._current or "")
        duplicates = set(other._snapshots) & set(self._snapshots)
        if duplicates:
            first = sorted(duplicates)[0]
            raise AggregationError(f"File already aggregated: {first}", details={"file": first})
        for file, snapshot in other._snapshots.items():
            self._snapshots[file] = snapshot
            self._fold(snapshot)

    def _require_accumulating(self, operation: str) -> str:
        if self.state is not AggregatorState.ACCUMULATING or self._current is None:
            raise AggregatorStateError(operation, self.state.value)
        return self._current

    # ── Hooks ─────────────────────────────────────────────────────────

    @abstractmethod
    def _reset_live(self) -> None:
        """Zero the live per-file counters."""

    @abstractmethod
    def _snapshot_live(self, file: str) -> S:
        """Immutable copy of the live counters."""

    @abstractmethod
    def _fold(self, snapshot: S) -> None:
        """Add a snapshot into the module total."""
