"""Documentation coverage of public API declarations in header files.

Counted as public API:
    - named classes, structs and unions
    - public and protected members (fields, methods, nested types, aliases)
    - enums and their enumerators
    - typedefs and alias declarations
    - free functions and free variables

Not counted: parameters (documented with their function), private
members, friend declarations, members of unnamed namespaces and out-of-line
definitions of already declared members (``void Foo::bar() {}``).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..logging_config import get_logger
from ..scanning.syntax import NodeKind, SyntaxNode
from .lifecycle import FileScopedAggregator

logger = get_logger(__name__)

_TRANSPARENT = frozenset({NodeKind.OTHER, NodeKind.STATEMENT, NodeKind.COMPOUND})
_MEMBER_ACCESS = frozenset({"public", "protected"})


@dataclass(frozen=True)
class ApiCount:
    """Total and undocumented public API declarations."""

    total: int = 0
    undocumented: int = 0

    @property
    def documented(self) -> int:
        return self.total - self.undocumented

    @property
    def documented_density(self) -> float:
        """Percentage of documented declarations, 0.0 when there are none."""
        if self.total > 0 and self.total >= self.undocumented:
            return (self.total - self.undocumented) / self.total * 100.0
        return 0.0

    def __add__(self, other: ApiCount) -> ApiCount:
        return ApiCount(self.total + other.total, self.undocumented + other.undocumented)


@dataclass(frozen=True)
class PublicApiItem:
    """One public declaration found in a header."""

    kind: NodeKind
    name: str
    line: int
    documented: bool


class PublicApiVisitor:
    """Collects the public API declarations of one file tree."""

    def collect(self, root: SyntaxNode) -> list[PublicApiItem]:
        items: list[PublicApiItem] = []
        for child in root.children:
            self._visit_scope_member(child, items, documented=False)
        return items

    def _visit_scope_member(self, node: SyntaxNode, items: list[PublicApiItem], documented: bool) -> None:
        """Declaration at namespace scope."""
        kind = node.kind
        documented = documented or node.documented

        if kind is NodeKind.NAMESPACE:
            if node.name:
                for child in node.children:
                    self._visit_scope_member(child, items, documented=False)
        elif kind is NodeKind.TEMPLATE:
            for child in node.children:
                self._visit_scope_member(child, items, documented)
        elif kind is NodeKind.CLASS:
            self._visit_class(node, items, documented)
        elif kind is NodeKind.ENUM:
            self._visit_enum(node, items, documented)
        elif kind in (NodeKind.ALIAS, NodeKind.DECLARATION):
            self._add(node, items, documented)
        elif kind is NodeKind.FUNCTION:
            if node.name and "::" not in node.name:
                self._add(node, items, documented)
        elif kind in _TRANSPARENT:
            # preprocessor blocks, extern "C" { ... }
            for child in node.children:
                self._visit_scope_member(child, items, documented=False)

    def _visit_class(self, node: SyntaxNode, items: list[PublicApiItem], documented: bool) -> None:
        if node.name:
            self._add(node, items, documented)
        access = "private" if node.keyword == "class" else "public"
        for member in node.children:
            if member.kind is NodeKind.ACCESS_SPECIFIER:
                access = member.access or access
            elif access in _MEMBER_ACCESS:
                self._visit_member(member, items, documented=False)

    def _visit_member(self, node: SyntaxNode, items: list[PublicApiItem], documented: bool) -> None:
        """Public or protected class member."""
        kind = node.kind
        documented = documented or node.documented

        if kind is NodeKind.TEMPLATE:
            for child in node.children:
                self._visit_member(child, items, documented)
        elif kind is NodeKind.CLASS:
            self._visit_class(node, items, documented)
        elif kind is NodeKind.ENUM:
            self._visit_enum(node, items, documented)
        elif kind in (NodeKind.FIELD, NodeKind.FUNCTION, NodeKind.DECLARATION, NodeKind.ALIAS):
            self._add(node, items, documented)

    def _visit_enum(self, node: SyntaxNode, items: list[PublicApiItem], documented: bool) -> None:
        if node.name:
            self._add(node, items, documented)
        for enumerator in node.children:
            if enumerator.kind is NodeKind.ENUMERATOR:
                self._add(enumerator, items, enumerator.documented)

    def _add(self, node: SyntaxNode, items: list[PublicApiItem], documented: bool) -> None:
        name = node.name or "<unnamed>"
        logger.debug(f"node: {node.kind.value} line: {node.line} id: '{name}' documented: {documented}")
        items.append(PublicApiItem(node.kind, name, node.line, documented))


class PublicApiCounter(FileScopedAggregator[ApiCount]):
    """Per-file and module documentation counters.

    Follows the same enter/finish lifecycle as HierarchicalAggregator but
    keeps its own state. The engine feeds it header files only.
    """

    def __init__(self, visitor: Optional[PublicApiVisitor] = None) -> None:
        super().__init__()
        self._visitor = visitor or PublicApiVisitor()
        self._total = 0
        self._undocumented = 0
        self.module = ApiCount()

    def record(self, documented: bool) -> None:
        """Count one public declaration of the current file."""
        self._require_accumulating("record public api")
        self._total += 1
        if not documented:
            self._undocumented += 1

    def count_tree(self, root: SyntaxNode) -> list[PublicApiItem]:
        """Collect and record every public declaration of ``root``."""
        self._require_accumulating("count public api")
        items = self._visitor.collect(root)
        for item in items:
            self.record(item.documented)
        return items

    def live_count(self) -> ApiCount:
        return ApiCount(self._total, self._undocumented)

    def _reset_live(self) -> None:
        self._total = 0
        self._undocumented = 0

    def _snapshot_live(self, file: str) -> ApiCount:
        return ApiCount(self._total, self._undocumented)

    def _fold(self, snapshot: ApiCount) -> None:
        self.module = self.module + snapshot
