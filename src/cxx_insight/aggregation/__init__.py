"""Threshold classification and function → file → module aggregation."""

from .aggregator import (
    FileMetricSnapshot,
    FunctionTotals,
    HierarchicalAggregator,
    MetricFamily,
    ModuleAccumulator,
)
from .classifier import ThresholdClassifier, classify
from .lifecycle import AggregatorState, FileScopedAggregator
from .public_api import ApiCount, PublicApiCounter, PublicApiItem, PublicApiVisitor

__all__ = [
    "AggregatorState",
    "ApiCount",
    "FileMetricSnapshot",
    "FileScopedAggregator",
    "FunctionTotals",
    "HierarchicalAggregator",
    "MetricFamily",
    "ModuleAccumulator",
    "PublicApiCounter",
    "PublicApiItem",
    "PublicApiVisitor",
    "ThresholdClassifier",
    "classify",
]
