"""Shared test fixtures for CXX Insight tests.

``tree`` hands out a TreeBuilder so calculator tests can describe
function bodies directly, without going through tree-sitter.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Optional

import pytest

from cxx_insight.scanning.syntax import NodeKind as K
from cxx_insight.scanning.syntax import ParsedFile, SyntaxNode


class TreeBuilder:
    """Terse constructors for SyntaxNode trees.

    Nodes passed in as children get their ``role`` set by the builder, so
    every call site stays one line per construct.
    """

    def node(self, kind: K, line: int, *children: SyntaxNode, role: Optional[str] = None, **attrs):
        return SyntaxNode(kind, line, list(children), role=role, **attrs)

    @staticmethod
    def _as(role: str, node: SyntaxNode) -> SyntaxNode:
        node.role = role
        return node

    # ── Leaves ────────────────────────────────────────────────────────

    def tok(self, line: int) -> SyntaxNode:
        return self.node(K.TOKEN, line)

    def expr(self, line: int, name: Optional[str] = None) -> SyntaxNode:
        return self.node(K.EXPRESSION, line, name=name)

    def stmt(self, line: int, *children: SyntaxNode) -> SyntaxNode:
        """Expression statement; a bare identifier plus ``;`` by default."""
        if not children:
            children = (self.expr(line), self.tok(line))
        return self.node(K.STATEMENT, line, *children)

    def ret(self, line: int, value: Optional[SyntaxNode] = None) -> SyntaxNode:
        return self.node(K.RETURN, line, self.tok(line), value or self.expr(line), self.tok(line))

    # ── Blocks and functions ──────────────────────────────────────────

    def block(self, line: int, *statements: SyntaxNode, end: Optional[int] = None) -> SyntaxNode:
        if end is None:
            end = max(s.end_line for s in statements) + 1 if statements else line
        return self.node(K.COMPOUND, line, self.tok(line), *statements, self.tok(end), end_line=end)

    def function(
        self, name: str, line: int, *statements: SyntaxNode, end: Optional[int] = None
    ) -> SyntaxNode:
        body = self._as("body", self.block(line, *statements, end=end))
        return self.node(
            K.FUNCTION,
            line,
            self._as("declarator", self.expr(line, name=name)),
            body,
            name=name,
            end_line=body.end_line,
        )

    def lambda_(self, line: int, *statements: SyntaxNode) -> SyntaxNode:
        body = self._as("body", self.block(line, *statements))
        return self.node(K.LAMBDA, line, self.tok(line), body, end_line=body.end_line)

    def unit(self, *declarations: SyntaxNode) -> SyntaxNode:
        return self.node(K.TRANSLATION_UNIT, 1, *declarations)

    # ── Control flow ──────────────────────────────────────────────────

    def if_(
        self,
        line: int,
        consequence: SyntaxNode,
        alternative: Optional[SyntaxNode] = None,
        condition: Optional[SyntaxNode] = None,
    ) -> SyntaxNode:
        children = [
            self.tok(line),
            self._as("condition", condition or self.expr(line)),
            self._as("consequence", consequence),
        ]
        if alternative is not None:
            children.append(self._as("alternative", alternative))
        return self.node(K.IF, line, *children)

    def else_(self, line: int, body: SyntaxNode) -> SyntaxNode:
        return self.node(K.ELSE, line, self.tok(line), self._as("body", body))

    def loop(
        self, kind: K, line: int, body: SyntaxNode, condition: Optional[SyntaxNode] = None
    ) -> SyntaxNode:
        return self.node(
            kind,
            line,
            self.tok(line),
            self._as("condition", condition or self.expr(line)),
            self._as("body", body),
        )

    def switch(self, line: int, *cases: SyntaxNode) -> SyntaxNode:
        return self.node(
            K.SWITCH,
            line,
            self.tok(line),
            self._as("condition", self.expr(line)),
            self._as("body", self.block(line, *cases)),
        )

    def case(self, line: int, *statements: SyntaxNode, default: bool = False) -> SyntaxNode:
        kind = K.DEFAULT if default else K.CASE
        return self.node(kind, line, self.tok(line), *statements)

    def try_(self, line: int, body: SyntaxNode, *handlers: SyntaxNode) -> SyntaxNode:
        return self.node(K.TRY, line, self.tok(line), self._as("body", body), *handlers)

    def catch(self, line: int, body: SyntaxNode) -> SyntaxNode:
        return self.node(K.CATCH, line, self.tok(line), self._as("body", body))

    def ternary(self, line: int, condition: Optional[SyntaxNode] = None) -> SyntaxNode:
        return self.node(
            K.CONDITIONAL,
            line,
            self._as("condition", condition or self.expr(line)),
            self._as("consequence", self.expr(line)),
            self._as("alternative", self.expr(line)),
        )

    def goto(self, line: int, label: str) -> SyntaxNode:
        return self.node(K.GOTO, line, self.tok(line), name=label)

    def jump(self, kind: K, line: int, label: Optional[str] = None) -> SyntaxNode:
        return self.node(kind, line, self.tok(line), name=label)

    # ── Expressions ───────────────────────────────────────────────────

    def and_(self, line: int, left: SyntaxNode, right: SyntaxNode) -> SyntaxNode:
        return self._logical(K.LOGICAL_AND, line, left, right)

    def or_(self, line: int, left: SyntaxNode, right: SyntaxNode) -> SyntaxNode:
        return self._logical(K.LOGICAL_OR, line, left, right)

    def _logical(self, kind: K, line: int, left: SyntaxNode, right: SyntaxNode) -> SyntaxNode:
        return self.node(
            kind, line, self._as("left", left), self._as("operator", self.tok(line)), self._as("right", right)
        )

    def not_(self, line: int, operand: SyntaxNode) -> SyntaxNode:
        return self.node(K.LOGICAL_NOT, line, self.tok(line), self._as("argument", operand))

    def paren(self, line: int, inner: SyntaxNode) -> SyntaxNode:
        return self.node(K.PARENTHESIZED, line, self.tok(line), inner, self.tok(line))

    def call(self, line: int, name: Optional[str]) -> SyntaxNode:
        return self.node(K.CALL, line, self._as("function", self.expr(line, name=name)), name=name)

    # ── Declarations ──────────────────────────────────────────────────

    def cls(self, line: int, name: Optional[str], *members: SyntaxNode, keyword: str = "class", **attrs):
        return self.node(K.CLASS, line, *members, name=name, keyword=keyword, **attrs)

    def access(self, line: int, level: str) -> SyntaxNode:
        return self.node(K.ACCESS_SPECIFIER, line, access=level)

    def decl(self, kind: K, line: int, name: Optional[str], documented: bool = False, *children):
        return self.node(kind, line, *children, name=name, documented=documented)


@pytest.fixture
def tree() -> TreeBuilder:
    """Builder for hand-made syntax trees."""
    return TreeBuilder()


@pytest.fixture
def parsed(tree) -> Callable[..., ParsedFile]:
    """Wrap declarations into a ParsedFile with the given identity."""

    def _parsed(path: str, *declarations: SyntaxNode) -> ParsedFile:
        return ParsedFile(path=path, root=tree.unit(*declarations))

    return _parsed


@pytest.fixture
def write_cpp(tmp_path) -> Callable[[str, str], Path]:
    """Write a C++ source file under tmp_path and return its path."""

    def _write(name: str, code: str) -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(code, encoding="utf-8")
        return path

    return _write
