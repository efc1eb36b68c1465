"""Threshold classification of per-function values."""

from __future__ import annotations

from ..exceptions import InvalidConfigError
from ..metrics.counts import Bucket, CountBucket


def classify(value: int, threshold: int) -> Bucket:
    """OVER iff ``value`` is strictly greater than ``threshold``."""
    return Bucket.OVER if value > threshold else Bucket.UNDER


class ThresholdClassifier:
    """Routes a function into the count and LOC buckets of one metric family.

    Both buckets are updated on the same side, so a function's lines always
    land where the function itself was counted.
    """

    def __init__(self, threshold: int, name: str = "threshold") -> None:
        if threshold < 0:
            raise InvalidConfigError(name, threshold, "must be non-negative")
        self.threshold = threshold
        self.name = name

    def classify(self, value: int) -> Bucket:
        return classify(value, self.threshold)

    def record(self, value: int, lines: int, count: CountBucket, loc: CountBucket) -> Bucket:
        """Classify one function and update both buckets.

        Args:
            value: The function's metric value (complexity, body lines, ...)
            lines: The function's body line count
            count: Function-count bucket of the family
            loc: Lines-of-code bucket of the family

        Returns:
            The side the function was counted on.
        """
        if lines < 0:
            raise ValueError("lines must be non-negative")
        bucket = self.classify(value)
        count.record(bucket)
        loc.record(bucket, lines)
        return bucket
