"""Tree-sitter parser wrapper for C++.

Usage:
    parser = TreeSitterParser()
    tree = parser.parse(code_bytes)
    root = tree.root_node
"""

from __future__ import annotations

from typing import Iterator

import tree_sitter
import tree_sitter_cpp

from ..exceptions import ParsingError
from ..logging_config import get_logger

logger = get_logger(__name__)


class TreeSitterParser:
    """Wrapper around tree-sitter with the C++ grammar loaded.

    A tree-sitter Parser is not safe to share between threads; create one
    wrapper per worker.
    """

    def __init__(self) -> None:
        # tree-sitter >= 0.23 returns PyCapsule; wrap in Language()
        self._language = tree_sitter.Language(tree_sitter_cpp.language())
        self._parser = tree_sitter.Parser(self._language)

    @property
    def language(self) -> tree_sitter.Language:
        return self._language

    def parse(self, code: bytes, path: str = "<memory>") -> tree_sitter.Tree:
        """Parse C++ source and return its syntax tree.

        Tree-sitter recovers from syntax errors by inserting ERROR nodes,
        so a tree is returned for any input; those nodes are logged.

        Raises:
            ParsingError: If tree-sitter itself fails
        """
        try:
            tree = self._parser.parse(code)
        except Exception as e:
            raise ParsingError(path, str(e)) from e

        if tree.root_node.has_error:
            errors = sum(1 for _ in iter_error_nodes(tree.root_node))
            logger.debug(f"{path}: {errors} syntax error region(s), analysing recovered tree")
        return tree


def iter_error_nodes(node: tree_sitter.Node) -> Iterator[tree_sitter.Node]:
    """Yield ERROR and MISSING nodes below ``node``."""
    stack = [node]
    while stack:
        current = stack.pop()
        if current.type == "ERROR" or current.is_missing:
            yield current
            continue
        if current.has_error:
            stack.extend(current.children)
