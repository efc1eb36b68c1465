"""Cyclomatic complexity: 1 + number of decision points."""

from __future__ import annotations

from ..exceptions import MalformedSubtreeError
from ..scanning.syntax import LOGICAL_OPERATORS, LOOPS, NodeKind, SyntaxNode

# Each occurrence adds one path. DEFAULT labels and ELSE branches do not:
# an else-if is counted through the IF node nested under the ELSE.
DECISION_POINTS = frozenset(
    {NodeKind.IF, NodeKind.CONDITIONAL, NodeKind.CASE} | LOOPS | LOGICAL_OPERATORS
)


def cyclomatic_complexity(function: SyntaxNode) -> int:
    """Compute the cyclomatic complexity of a function definition.

    Lambda bodies count toward the enclosing function. Nested FUNCTION
    nodes (member functions of local classes) are separate units and are
    skipped.

    Raises:
        MalformedSubtreeError: If ``function`` is not a FUNCTION node with a body
    """
    body = function_body(function)

    complexity = 1
    stack = [body]
    while stack:
        node = stack.pop()
        if node.kind is NodeKind.FUNCTION:
            continue
        if node.kind in DECISION_POINTS:
            complexity += 1
        stack.extend(node.children)
    return complexity


def function_body(function: SyntaxNode) -> SyntaxNode:
    """Return the body of a FUNCTION node, failing fast on a malformed one."""
    if function.kind is not NodeKind.FUNCTION:
        raise MalformedSubtreeError(function.kind.value, function.line, "function definition")
    body = function.child("body")
    if body is None:
        raise MalformedSubtreeError("function", function.line, "body", function.name)
    return body
