"""Two-sided counters for threshold-based metrics."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Bucket(str, Enum):
    """Side of a threshold an observation falls on."""

    OVER = "over"
    UNDER = "under"


@dataclass
class CountBucket:
    """Counts observations above and at-or-below a threshold.

    ``add`` is commutative and associative, so per-file buckets can be
    folded into module totals in any order.

    Attributes:
        over: Observations strictly above the threshold
        below: Observations at or below the threshold
    """

    over: int = 0
    below: int = 0

    def __post_init__(self) -> None:
        if self.over < 0 or self.below < 0:
            raise ValueError("CountBucket fields must be non-negative")

    @property
    def total(self) -> int:
        return self.over + self.below

    @property
    def density(self) -> float:
        """Percentage of observations over the threshold.

        Range [0, 100]; exactly 0.0 when nothing has been counted.
        """
        total = self.total
        if total > 0:
            return self.over / total * 100.0
        return 0.0

    def record(self, bucket: Bucket, amount: int = 1) -> None:
        """Add ``amount`` to one side."""
        if amount < 0:
            raise ValueError("amount must be non-negative")
        if bucket is Bucket.OVER:
            self.over += amount
        else:
            self.below += amount

    def add(self, other: CountBucket) -> None:
        """Fold ``other`` into this bucket in place."""
        self.over += other.over
        self.below += other.below

    def reset(self) -> None:
        self.over = 0
        self.below = 0

    def copy(self) -> CountBucket:
        return CountBucket(self.over, self.below)

    def __add__(self, other: CountBucket) -> CountBucket:
        if not isinstance(other, CountBucket):
            return NotImplemented
        return CountBucket(self.over + other.over, self.below + other.below)
