"""Cognitive complexity of a function body.

Scoring rules, applied in a single depth-first pass:

    Structural increment (+1): if, else if, else, loops, switch, catch,
        ternary operator.
    Nesting penalty (+level): added to every structural increment, where
        level is the nesting depth at the point the structure is entered.
        ``else`` and ``else if`` are charged at the level of their ``if``.
    Nesting structures: the bodies of if/else, loops, switch, catch and
        lambdas are visited one level deeper. Conditions and loop headers
        stay at the level of their structure. ``try`` and the ternary
        operator do not nest.
    Logical operators (+1 per run): a boolean expression is flattened in
        source order through parentheses (not through ``!``); the first
        operator scores 1 and every change between ``&&`` and ``||``
        scores 1 more. ``a && b && c || d`` scores 2.
    Recursion (+1): each call to a function with the same name.
    Jumps (+1): ``goto`` and labelled break/continue.

Lambdas are scored as part of the enclosing function. Nested FUNCTION
nodes (member functions of local classes) are scored on their own and
skipped here.

Every charged point is kept as a ComplexityIncrement in traversal order,
so the score is always the sum of the increments.
"""

from __future__ import annotations

from typing import Optional

from ..exceptions import MalformedSubtreeError
from ..scanning.syntax import LOGICAL_OPERATORS, LOOPS, NodeKind, SyntaxNode
from .cyclomatic import function_body
from .models import CognitiveScore, ComplexityIncrement, IncrementReason

_OPERATOR_LABELS = {NodeKind.LOGICAL_AND: "&&", NodeKind.LOGICAL_OR: "||"}

# Children visited one level deeper than their structure
_NESTED_ROLES = {
    NodeKind.FOR: "body",
    NodeKind.WHILE: "body",
    NodeKind.DO: "body",
    NodeKind.SWITCH: "body",
    NodeKind.CATCH: "body",
    NodeKind.LAMBDA: "body",
}


def cognitive_complexity(function: SyntaxNode) -> CognitiveScore:
    """Score a FUNCTION node.

    Raises:
        MalformedSubtreeError: If the function, or a structure inside it,
            is missing a child the rules depend on
    """
    body = function_body(function)
    visitor = _CognitiveVisitor(function)
    visitor.visit(body, 0)
    return CognitiveScore(tuple(visitor.increments))


class _CognitiveVisitor:
    """Traversal state for one function. Never shared between functions."""

    def __init__(self, function: SyntaxNode) -> None:
        self._function = function
        self._name = function.simple_name
        self.increments: list[ComplexityIncrement] = []

    def visit(self, node: SyntaxNode, level: int) -> None:
        kind = node.kind

        if kind is NodeKind.IF:
            self._visit_if(node, level, "if")
        elif kind is NodeKind.ELSE:
            self._visit_else(node, level)
        elif kind in LOOPS or kind in (NodeKind.SWITCH, NodeKind.CATCH):
            self._require(node, "body")
            self._structural(node.line, level, kind.value)
            self._visit_children(node, level, nested_role=_NESTED_ROLES[kind])
        elif kind is NodeKind.CONDITIONAL:
            self._require(node, "condition")
            self._structural(node.line, level, "?:")
            self._visit_children(node, level)
        elif kind is NodeKind.LAMBDA:
            self._require(node, "body")
            self._visit_children(node, level, nested_role="body")
        elif kind is NodeKind.FUNCTION:
            # scored as its own unit
            return
        elif kind in LOGICAL_OPERATORS:
            self._visit_logical(node, level)
        elif kind is NodeKind.CALL:
            if self._calls_itself(node):
                self._charge(node.line, 1, IncrementReason.RECURSION, "recursion")
            self._visit_children(node, level)
        elif kind is NodeKind.GOTO:
            self._charge(node.line, 1, IncrementReason.JUMP, "goto")
            self._visit_children(node, level)
        elif kind in (NodeKind.BREAK, NodeKind.CONTINUE):
            if node.name:
                self._charge(node.line, 1, IncrementReason.JUMP, f"{kind.value} {node.name}")
            self._visit_children(node, level)
        else:
            self._visit_children(node, level)

    def _visit_children(self, node: SyntaxNode, level: int, nested_role: Optional[str] = None) -> None:
        for child in node.children:
            nested = nested_role is not None and child.role == nested_role
            self.visit(child, level + 1 if nested else level)

    def _visit_if(self, node: SyntaxNode, level: int, construct: str) -> None:
        self._require(node, "condition")
        self._require(node, "consequence")
        self._structural(node.line, level, construct)
        for child in node.children:
            if child.role == "consequence":
                self.visit(child, level + 1)
            elif child.role == "alternative":
                self._visit_alternative(child, level)
            else:
                self.visit(child, level)

    def _visit_alternative(self, node: SyntaxNode, level: int) -> None:
        if node.kind is NodeKind.IF:
            self._visit_if(node, level, "else if")
        else:
            self._visit_else(node, level)

    def _visit_else(self, node: SyntaxNode, level: int) -> None:
        body = self._require(node, "body")
        if body.kind is NodeKind.IF:
            # else-if: one structural increment, at the level of the first if
            for child in node.children:
                if child is body:
                    self._visit_if(body, level, "else if")
                else:
                    self.visit(child, level)
            return
        self._structural(node.line, level, "else")
        self._visit_children(node, level, nested_role="body")

    def _visit_logical(self, node: SyntaxNode, level: int) -> None:
        operators: list[SyntaxNode] = []
        operands: list[SyntaxNode] = []
        self._flatten(node, operators, operands)

        previous: Optional[NodeKind] = None
        for operator in operators:
            if operator.kind is not previous:
                self._charge(
                    operator.line,
                    1,
                    IncrementReason.LOGICAL_OPERATOR_SEQUENCE,
                    _OPERATOR_LABELS[operator.kind],
                )
                previous = operator.kind

        for operand in operands:
            self.visit(operand, level)

    def _flatten(
        self, node: SyntaxNode, operators: list[SyntaxNode], operands: list[SyntaxNode]
    ) -> None:
        """In-order operator sequence of a boolean expression."""
        if node.kind in LOGICAL_OPERATORS:
            left = self._require(node, "left")
            right = self._require(node, "right")
            self._flatten(left, operators, operands)
            operators.append(node)
            self._flatten(right, operators, operands)
        elif node.kind is NodeKind.PARENTHESIZED:
            for child in node.children:
                self._flatten(child, operators, operands)
        else:
            operands.append(node)

    def _calls_itself(self, call: SyntaxNode) -> bool:
        """True if ``call`` names this function.

        An unqualified callee matches on the simple name. A qualified one
        must also name this function's scope, or a trailing part of it
        (``Foo::sort`` inside ``ns::Foo::sort``).
        """
        if self._name is None or call.name is None or call.simple_name != self._name:
            return False
        qualifier = call.name.lstrip(":").rpartition("::")[0]
        if not qualifier:
            return True
        scope = (self._function.name or "").lstrip(":").rpartition("::")[0]
        return scope == qualifier or scope.endswith("::" + qualifier)

    def _structural(self, line: int, level: int, construct: str) -> None:
        self._charge(line, 1, IncrementReason.NESTING_STRUCTURE, construct)
        if level > 0:
            self._charge(line, level, IncrementReason.NESTING_LEVEL_PENALTY, construct)

    def _charge(self, line: int, delta: int, reason: IncrementReason, construct: str) -> None:
        self.increments.append(ComplexityIncrement(line, delta, reason, construct))

    def _require(self, node: SyntaxNode, role: str) -> SyntaxNode:
        child = node.child(role)
        if child is None:
            raise MalformedSubtreeError(node.kind.value, node.line, role, self._function.name)
        return child
