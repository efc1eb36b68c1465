"""Tests for HierarchicalAggregator: function → file → module aggregation.

Tests cover:
    - classification into the complexity and size families
    - the enter_file / finish / abandon lifecycle
    - immutable snapshots and missing-snapshot lookups
    - order-independent merging of worker aggregators
"""

from __future__ import annotations

import pytest

from cxx_insight.aggregation import AggregatorState, HierarchicalAggregator, MetricFamily
from cxx_insight.exceptions import AggregationError, AggregatorStateError, MissingSnapshotError
from cxx_insight.metrics.models import ComplexityIncrement, FunctionUnit, IncrementReason


def _unit(cyclomatic: int = 1, lines: int = 5, cognitive: int = 0, name: str = "f") -> FunctionUnit:
    increments = tuple(
        ComplexityIncrement(1, 1, IncrementReason.NESTING_STRUCTURE, "if") for _ in range(cognitive)
    )
    return FunctionUnit(name=name, line=1, body_lines=lines, cyclomatic=cyclomatic, increments=increments)


def _aggregate(aggregator: HierarchicalAggregator, file: str, units) -> None:
    aggregator.enter_file(file)
    for unit in units:
        aggregator.record_function(unit)
    aggregator.finish(file)


# ── Classification ────────────────────────────────────────────────────


class TestClassification:
    """Per-file buckets for both families."""

    def test_two_of_five_complex(self):
        aggregator = HierarchicalAggregator(cyclomatic_threshold=10)
        _aggregate(aggregator, "a.cc", [_unit(12), _unit(12), _unit(1), _unit(3), _unit(10)])

        snapshot = aggregator.snapshot("a.cc")
        complex_functions = snapshot.bucket(MetricFamily.COMPLEX_FUNCTIONS)
        assert complex_functions.over == 2
        assert complex_functions.density == pytest.approx(40.0)

    def test_loc_follows_the_function(self):
        aggregator = HierarchicalAggregator(cyclomatic_threshold=10, size_threshold=20)
        _aggregate(aggregator, "a.cc", [_unit(12, lines=8), _unit(2, lines=32)])

        snapshot = aggregator.snapshot("a.cc")
        complex_loc = snapshot.bucket(MetricFamily.COMPLEX_FUNCTIONS_LOC)
        big = snapshot.bucket(MetricFamily.BIG_FUNCTIONS)
        big_loc = snapshot.bucket(MetricFamily.BIG_FUNCTIONS_LOC)

        assert (complex_loc.over, complex_loc.below) == (8, 32)
        assert (big.over, big.below) == (1, 1)
        assert (big_loc.over, big_loc.below) == (32, 8)
        assert big_loc.total == 40

    def test_totals(self):
        aggregator = HierarchicalAggregator()
        _aggregate(aggregator, "a.cc", [_unit(3, cognitive=2), _unit(1, cognitive=0)])

        totals = aggregator.snapshot("a.cc").totals
        assert (totals.functions, totals.complexity, totals.cognitive_complexity) == (2, 4, 2)

    def test_empty_file_has_zero_snapshot(self):
        aggregator = HierarchicalAggregator()
        _aggregate(aggregator, "empty.cc", [])

        snapshot = aggregator.snapshot("empty.cc")
        for family in MetricFamily:
            assert snapshot.bucket(family).total == 0
            assert snapshot.bucket(family).density == 0.0
        assert snapshot.totals.functions == 0

    def test_module_is_sum_of_files(self):
        aggregator = HierarchicalAggregator(cyclomatic_threshold=10)
        _aggregate(aggregator, "a.cc", [_unit(12), _unit(1)])
        _aggregate(aggregator, "b.cc", [_unit(15), _unit(2), _unit(4)])

        module = aggregator.module.bucket(MetricFamily.COMPLEX_FUNCTIONS)
        assert (module.over, module.below) == (2, 3)
        assert aggregator.module.files == 2
        assert aggregator.module.totals.functions == 5


# ── Lifecycle ─────────────────────────────────────────────────────────


class TestLifecycle:
    """IDLE --enter_file--> ACCUMULATING --finish/abandon--> IDLE."""

    def test_states(self):
        aggregator = HierarchicalAggregator()
        assert aggregator.state is AggregatorState.IDLE
        aggregator.enter_file("a.cc")
        assert aggregator.state is AggregatorState.ACCUMULATING
        assert aggregator.current_file == "a.cc"
        aggregator.finish("a.cc")
        assert aggregator.state is AggregatorState.IDLE
        assert aggregator.current_file is None

    def test_record_requires_open_file(self):
        with pytest.raises(AggregatorStateError):
            HierarchicalAggregator().record_function(_unit())

    def test_enter_twice_without_finish(self):
        aggregator = HierarchicalAggregator()
        aggregator.enter_file("a.cc")
        with pytest.raises(AggregatorStateError):
            aggregator.enter_file("b.cc")

    def test_finish_other_file(self):
        aggregator = HierarchicalAggregator()
        aggregator.enter_file("a.cc")
        with pytest.raises(AggregatorStateError):
            aggregator.finish("b.cc")

    def test_finish_when_idle(self):
        with pytest.raises(AggregatorStateError):
            HierarchicalAggregator().finish("a.cc")

    def test_file_cannot_be_aggregated_twice(self):
        aggregator = HierarchicalAggregator()
        _aggregate(aggregator, "a.cc", [_unit()])
        with pytest.raises(AggregationError):
            aggregator.enter_file("a.cc")

    def test_counters_reset_between_files(self):
        aggregator = HierarchicalAggregator(cyclomatic_threshold=10)
        _aggregate(aggregator, "a.cc", [_unit(12)])
        aggregator.enter_file("b.cc")
        assert aggregator.live_bucket(MetricFamily.COMPLEX_FUNCTIONS).total == 0

    def test_abandon_discards_partial_counts(self):
        aggregator = HierarchicalAggregator(cyclomatic_threshold=10)
        _aggregate(aggregator, "a.cc", [_unit(12)])
        aggregator.enter_file("broken.cc")
        aggregator.record_function(_unit(30))
        aggregator.abandon("broken.cc")

        assert aggregator.state is AggregatorState.IDLE
        assert not aggregator.has_snapshot("broken.cc")
        module = aggregator.module.bucket(MetricFamily.COMPLEX_FUNCTIONS)
        assert (module.over, module.below) == (1, 0)

    def test_abandoned_file_can_be_retried(self):
        aggregator = HierarchicalAggregator()
        aggregator.enter_file("a.cc")
        aggregator.abandon()
        _aggregate(aggregator, "a.cc", [_unit()])
        assert aggregator.has_snapshot("a.cc")


# ── Snapshots ─────────────────────────────────────────────────────────


class TestSnapshots:
    """Stored copies and lookups."""

    def test_missing_snapshot(self):
        aggregator = HierarchicalAggregator()
        with pytest.raises(MissingSnapshotError) as exc_info:
            aggregator.snapshot("never.cc")
        assert exc_info.value.file == "never.cc"

    def test_snapshot_not_available_while_accumulating(self):
        aggregator = HierarchicalAggregator()
        aggregator.enter_file("a.cc")
        with pytest.raises(MissingSnapshotError):
            aggregator.snapshot("a.cc")

    def test_bucket_copies_cannot_alter_snapshot(self):
        aggregator = HierarchicalAggregator(cyclomatic_threshold=10)
        _aggregate(aggregator, "a.cc", [_unit(12)])

        bucket = aggregator.snapshot("a.cc").bucket(MetricFamily.COMPLEX_FUNCTIONS)
        bucket.reset()
        assert aggregator.snapshot("a.cc").bucket(MetricFamily.COMPLEX_FUNCTIONS).over == 1

    def test_snapshot_independent_of_later_files(self):
        aggregator = HierarchicalAggregator(cyclomatic_threshold=10)
        _aggregate(aggregator, "a.cc", [_unit(12)])
        _aggregate(aggregator, "b.cc", [_unit(12), _unit(12)])
        assert aggregator.snapshot("a.cc").bucket(MetricFamily.COMPLEX_FUNCTIONS).over == 1

    def test_snapshots_mapping_is_read_only(self):
        aggregator = HierarchicalAggregator()
        _aggregate(aggregator, "a.cc", [])
        with pytest.raises(TypeError):
            aggregator.snapshots["b.cc"] = aggregator.snapshot("a.cc")  # type: ignore[index]


# ── Merging ───────────────────────────────────────────────────────────


class TestMerge:
    """Worker aggregators fold into a run aggregator in any order."""

    FILES = {
        "a.cc": [_unit(12, lines=30), _unit(2, lines=3)],
        "b.cc": [_unit(1, lines=1)],
        "c.cc": [_unit(11, lines=25, cognitive=4), _unit(9, lines=19), _unit(40, lines=90)],
    }

    def _worker(self, file: str) -> HierarchicalAggregator:
        worker = HierarchicalAggregator(cyclomatic_threshold=10, size_threshold=20)
        _aggregate(worker, file, self.FILES[file])
        return worker

    def test_merge_matches_sequential_aggregation(self):
        sequential = HierarchicalAggregator(cyclomatic_threshold=10, size_threshold=20)
        for file, units in self.FILES.items():
            _aggregate(sequential, file, units)

        merged = HierarchicalAggregator(cyclomatic_threshold=10, size_threshold=20)
        for file in self.FILES:
            merged.merge(self._worker(file))

        assert merged.module == sequential.module
        assert set(merged.snapshots) == set(sequential.snapshots)

    def test_merge_order_does_not_matter(self):
        forward = HierarchicalAggregator()
        backward = HierarchicalAggregator()
        for file in self.FILES:
            forward.merge(self._worker(file))
        for file in reversed(list(self.FILES)):
            backward.merge(self._worker(file))

        assert forward.module == backward.module

    def test_merge_rejects_duplicate_files(self):
        target = self._worker("a.cc")
        with pytest.raises(AggregationError):
            target.merge(self._worker("a.cc"))

    def test_merge_rejects_accumulating_source(self):
        source = HierarchicalAggregator()
        source.enter_file("a.cc")
        with pytest.raises(AggregatorStateError):
            HierarchicalAggregator().merge(source)
