"""Per-function calculator pass.

Finds every function definition in a file tree and runs the cyclomatic,
cognitive and size calculators on it. Member functions of local classes
are reported as separate units; lambdas are part of their enclosing
function.
"""

from __future__ import annotations

from typing import Iterator

from ..logging_config import get_logger
from ..scanning.syntax import NodeKind, SyntaxNode
from .cognitive import cognitive_complexity
from .cyclomatic import cyclomatic_complexity
from .models import FunctionUnit
from .size import function_body_lines

logger = get_logger(__name__)


def iter_functions(root: SyntaxNode) -> Iterator[SyntaxNode]:
    """Yield every FUNCTION node under ``root`` in source order."""
    for node in root.walk():
        if node.kind is NodeKind.FUNCTION:
            yield node


def analyze_function(function: SyntaxNode) -> FunctionUnit:
    """Run all calculators on one FUNCTION node.

    Raises:
        MalformedSubtreeError: Propagated from the calculators
    """
    cognitive = cognitive_complexity(function)
    unit = FunctionUnit(
        name=function.name or "<anonymous>",
        line=function.line,
        body_lines=function_body_lines(function),
        cyclomatic=cyclomatic_complexity(function),
        increments=cognitive.increments,
    )
    logger.debug(
        f"{unit.name}:{unit.line} cyclomatic={unit.cyclomatic} "
        f"cognitive={unit.cognitive} lines={unit.body_lines}"
    )
    return unit


def analyze_functions(root: SyntaxNode) -> list[FunctionUnit]:
    """Analyse every function definition in a file tree."""
    return [analyze_function(fn) for fn in iter_functions(root)]
