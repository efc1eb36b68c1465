"""FunctionCognitiveComplexity: flags functions above a cognitive limit."""

from __future__ import annotations

from typing import Optional

from ..exceptions import InvalidConfigError
from ..logging_config import get_logger
from ..metrics.models import FunctionUnit
from .models import Issue, Location

logger = get_logger(__name__)

RULE_ID = "FunctionCognitiveComplexity"
DEFAULT_MAX = 15


class CognitiveComplexityCheck:
    """Raises one issue per function whose cognitive complexity exceeds ``max_complexity``.

    The primary location is the function's declaration line. With
    ``secondary_locations`` enabled, every increment is attached as an
    extra location so a reader can see which constructs drove the score.
    """

    rule_id = RULE_ID

    def __init__(self, max_complexity: int = DEFAULT_MAX, secondary_locations: bool = False) -> None:
        if max_complexity < 0:
            raise InvalidConfigError("cognitive_threshold", max_complexity, "must be non-negative")
        self.max_complexity = max_complexity
        self.secondary_locations = secondary_locations

    def check(self, unit: FunctionUnit) -> Optional[Issue]:
        score = unit.cognitive
        if score <= self.max_complexity:
            return None

        locations = [
            Location(
                None,
                str(unit.line),
                f"The Cognitive Complexity of this function is {score} "
                f"which is greater than {self.max_complexity} authorized.",
            )
        ]
        if self.secondary_locations:
            locations.extend(
                Location(None, str(inc.line), inc.describe()) for inc in unit.increments
            )
        logger.debug(f"{unit.name}:{unit.line} cognitive complexity {score} > {self.max_complexity}")
        return Issue(self.rule_id, tuple(locations))
