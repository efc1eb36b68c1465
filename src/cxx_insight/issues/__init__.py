"""Issues raised by the engine and their per-file collection."""

from .cognitive_check import RULE_ID, CognitiveComplexityCheck
from .collector import IssueCollector
from .models import Issue, Location

__all__ = [
    "RULE_ID",
    "CognitiveComplexityCheck",
    "Issue",
    "IssueCollector",
    "Location",
]
