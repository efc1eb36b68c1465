"""Syntax models consumed by the metric calculators.

SyntaxNode is the engine's only view of a parsed file:
    - kind: a NodeKind tag (closed set, dispatched on by every calculator)
    - line / end_line: 1-indexed source span
    - children: ordered child nodes, each optionally tagged with the
      ``role`` it occupies in its parent (``condition``, ``body``, ...)

The tree-sitter normalizer produces these trees, but tests and other
front ends may build them directly. Calculators never mutate a node.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Optional


class NodeKind(str, Enum):
    """Closed set of node kinds the calculators understand."""

    TRANSLATION_UNIT = "translation_unit"
    NAMESPACE = "namespace"
    FUNCTION = "function"
    LAMBDA = "lambda"
    COMPOUND = "compound"

    # Control flow
    IF = "if"
    ELSE = "else"
    FOR = "for"
    WHILE = "while"
    DO = "do"
    SWITCH = "switch"
    CASE = "case"
    DEFAULT = "default"
    TRY = "try"
    CATCH = "catch"
    CONDITIONAL = "conditional"
    GOTO = "goto"
    BREAK = "break"
    CONTINUE = "continue"
    RETURN = "return"
    LABEL = "label"

    # Expressions
    LOGICAL_AND = "logical_and"
    LOGICAL_OR = "logical_or"
    LOGICAL_NOT = "logical_not"
    PARENTHESIZED = "parenthesized"
    CALL = "call"

    # Declarations
    CLASS = "class"
    ACCESS_SPECIFIER = "access_specifier"
    FIELD = "field"
    ENUM = "enum"
    ENUMERATOR = "enumerator"
    ALIAS = "alias"
    DECLARATION = "declaration"
    PARAMETER = "parameter"
    TEMPLATE = "template"
    FRIEND = "friend"

    # Everything else
    STATEMENT = "statement"
    EXPRESSION = "expression"
    TOKEN = "token"
    OTHER = "other"


LOGICAL_OPERATORS = frozenset({NodeKind.LOGICAL_AND, NodeKind.LOGICAL_OR})
LOOPS = frozenset({NodeKind.FOR, NodeKind.WHILE, NodeKind.DO})


@dataclass
class SyntaxNode:
    """A node of a parsed C++ file.

    Attributes:
        kind: Node kind tag
        line: Starting line (1-indexed)
        children: Ordered child nodes
        end_line: Ending line (defaults to ``line``)
        role: Role of this node in its parent (e.g. "condition", "body")
        name: Function/declaration name, callee name, or jump label
        access: Access level carried by ACCESS_SPECIFIER nodes
            ("public", "protected", "private")
        keyword: Declaring keyword of CLASS nodes ("class", "struct", "union")
        documented: True if a documentation comment is attached
    """

    kind: NodeKind
    line: int
    children: list[SyntaxNode] = field(default_factory=list)
    end_line: int = 0
    role: Optional[str] = None
    name: Optional[str] = None
    access: Optional[str] = None
    keyword: Optional[str] = None
    documented: bool = False

    def __post_init__(self) -> None:
        if self.end_line < self.line:
            self.end_line = self.line

    def child(self, role: str) -> Optional[SyntaxNode]:
        """First child occupying ``role``, or None."""
        for c in self.children:
            if c.role == role:
                return c
        return None

    def children_of(self, role: str) -> list[SyntaxNode]:
        """All children occupying ``role``."""
        return [c for c in self.children if c.role == role]

    def walk(self) -> Iterator[SyntaxNode]:
        """Pre-order traversal of this node and all descendants."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    @property
    def simple_name(self) -> Optional[str]:
        """Last ``::`` segment of ``name`` (``ns::Foo::bar`` -> ``bar``)."""
        if self.name is None:
            return None
        return self.name.rsplit("::", 1)[-1]


@dataclass
class ParsedFile:
    """A file handed to the engine: identity plus its syntax tree."""

    path: str
    root: SyntaxNode
    lines: int = 0
