"""C++ parsing: tree-sitter front end and the syntax model it produces."""

from .files import expand_paths
from .normalizer import TreeSitterNormalizer
from .syntax import LOGICAL_OPERATORS, LOOPS, NodeKind, ParsedFile, SyntaxNode
from .treesitter_parser import TreeSitterParser

__all__ = [
    "LOGICAL_OPERATORS",
    "LOOPS",
    "NodeKind",
    "ParsedFile",
    "SyntaxNode",
    "TreeSitterNormalizer",
    "TreeSitterParser",
    "expand_paths",
]
