"""Lines of code inside a function body."""

from __future__ import annotations

from ..scanning.syntax import NodeKind, SyntaxNode
from .cyclomatic import function_body


def function_body_lines(function: SyntaxNode) -> int:
    """Count distinct lines that carry code inside the function body.

    The body's own braces (its direct TOKEN children) are not counted, so
    the signature line only counts when a statement shares it and an empty
    body counts 0.
    """
    body = function_body(function)
    lines: set[int] = set()
    for child in body.children:
        if child.kind is NodeKind.TOKEN:
            continue
        lines.update(node.line for node in child.walk())
    return len(lines)
