"""Per-file issue sets."""

from __future__ import annotations

from typing import Iterable

from .models import Issue


class IssueCollector:
    """Collects issues per file as value-deduplicated sets.

    Like the aggregators, a collector is single-threaded; parallel workers
    keep their own and ``merge`` them.
    """

    def __init__(self) -> None:
        self._issues: dict[str, set[Issue]] = {}

    def add(self, file: str, issue: Issue) -> bool:
        """Add an issue; returns False if an equal issue was already present."""
        issues = self._issues.setdefault(file, set())
        if issue in issues:
            return False
        issues.add(issue)
        return True

    def add_all(self, file: str, issues: Iterable[Issue]) -> int:
        return sum(1 for issue in issues if self.add(file, issue))

    def issues_for(self, file: str) -> frozenset[Issue]:
        """Issues of a file (empty when it has none)."""
        return frozenset(self._issues.get(file, ()))

    def has_issues(self, file: str) -> bool:
        return bool(self._issues.get(file))

    def drain(self, file: str) -> frozenset[Issue]:
        """Return and forget a file's issues."""
        return frozenset(self._issues.pop(file, ()))

    def discard_file(self, file: str) -> None:
        self._issues.pop(file, None)

    @property
    def files(self) -> list[str]:
        return sorted(f for f, issues in self._issues.items() if issues)

    def __len__(self) -> int:
        return sum(len(issues) for issues in self._issues.values())

    def merge(self, other: IssueCollector) -> None:
        for file, issues in other._issues.items():
            self._issues.setdefault(file, set()).update(issues)
