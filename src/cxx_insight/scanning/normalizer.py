"""Normalizer: converts tree-sitter C++ parse trees to SyntaxNode trees.

Every tree-sitter node becomes one SyntaxNode (comments excepted), tagged
with a NodeKind and with its tree-sitter field name as ``role``. On top of
that one-to-one mapping:
    - class, enum and namespace bodies are flattened into their owner
    - ``else`` branches are always ELSE nodes with a ``body`` child
    - ``&&`` / ``||`` binary expressions become LOGICAL nodes located at
      their operator
    - a class or enum defined inside a declaration is lifted next to it
    - documentation comments set ``documented`` on their declaration
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional, Union

from ..exceptions import FileAccessError
from ..logging_config import get_logger
from .syntax import NodeKind, ParsedFile, SyntaxNode
from .treesitter_parser import TreeSitterParser

logger = get_logger(__name__)

_KIND_BY_TYPE = {
    "translation_unit": NodeKind.TRANSLATION_UNIT,
    "namespace_definition": NodeKind.NAMESPACE,
    "function_definition": NodeKind.FUNCTION,
    "lambda_expression": NodeKind.LAMBDA,
    "compound_statement": NodeKind.COMPOUND,
    "if_statement": NodeKind.IF,
    "else_clause": NodeKind.ELSE,
    "for_statement": NodeKind.FOR,
    "for_range_loop": NodeKind.FOR,
    "while_statement": NodeKind.WHILE,
    "do_statement": NodeKind.DO,
    "switch_statement": NodeKind.SWITCH,
    "case_statement": NodeKind.CASE,
    "try_statement": NodeKind.TRY,
    "catch_clause": NodeKind.CATCH,
    "conditional_expression": NodeKind.CONDITIONAL,
    "goto_statement": NodeKind.GOTO,
    "break_statement": NodeKind.BREAK,
    "continue_statement": NodeKind.CONTINUE,
    "return_statement": NodeKind.RETURN,
    "labeled_statement": NodeKind.LABEL,
    "parenthesized_expression": NodeKind.PARENTHESIZED,
    "call_expression": NodeKind.CALL,
    "class_specifier": NodeKind.CLASS,
    "struct_specifier": NodeKind.CLASS,
    "union_specifier": NodeKind.CLASS,
    "access_specifier": NodeKind.ACCESS_SPECIFIER,
    "field_declaration": NodeKind.FIELD,
    "enum_specifier": NodeKind.ENUM,
    "enumerator": NodeKind.ENUMERATOR,
    "alias_declaration": NodeKind.ALIAS,
    "type_definition": NodeKind.ALIAS,
    "declaration": NodeKind.DECLARATION,
    "parameter_declaration": NodeKind.PARAMETER,
    "optional_parameter_declaration": NodeKind.PARAMETER,
    "variadic_parameter_declaration": NodeKind.PARAMETER,
    "template_declaration": NodeKind.TEMPLATE,
    "friend_declaration": NodeKind.FRIEND,
}

_LOGICAL_OPERATORS = {
    "&&": NodeKind.LOGICAL_AND,
    "and": NodeKind.LOGICAL_AND,
    "||": NodeKind.LOGICAL_OR,
    "or": NodeKind.LOGICAL_OR,
}
_NOT_OPERATORS = frozenset({"!", "not"})

_TYPE_SPECIFIERS = frozenset({"class_specifier", "struct_specifier", "union_specifier", "enum_specifier"})

_NAME_TYPES = frozenset(
    {
        "identifier",
        "field_identifier",
        "type_identifier",
        "qualified_identifier",
        "destructor_name",
        "operator_name",
        "operator_cast",
        "template_function",
        "namespace_identifier",
    }
)

_EXPRESSION_SUFFIXES = ("_expression", "_literal", "identifier")
_EXPRESSION_LEAVES = frozenset({"this", "true", "false", "nullptr", "string_content"})

# Doxygen comment markers
_LEADING_DOC = ("/**", "///", "//!", "/*!")
_TRAILING_DOC = ("///<", "//!<", "/**<", "/*!<")


def is_leading_doc_comment(text: str) -> bool:
    """True for a documentation comment that precedes its declaration."""
    if text.startswith(_TRAILING_DOC) or text.startswith("////") or text == "/**/":
        return False
    return text.startswith(_LEADING_DOC)


def is_trailing_doc_comment(text: str) -> bool:
    """True for a documentation comment that follows its declaration (``///<``)."""
    return text.startswith(_TRAILING_DOC)


class TreeSitterNormalizer:
    """Converts tree-sitter parse trees to ParsedFile objects.

    Usage:
        normalizer = TreeSitterNormalizer()
        parsed = normalizer.parse_file(Path("widget.hh"))
        units = analyze_functions(parsed.root)
    """

    def __init__(self, parser: Optional[TreeSitterParser] = None) -> None:
        self._parser = parser or TreeSitterParser()

    def parse_source(self, code: Union[str, bytes], path: str = "<memory>") -> ParsedFile:
        """Parse C++ source held in memory.

        Raises:
            ParsingError: If tree-sitter fails
        """
        if isinstance(code, str):
            code = code.encode("utf-8")
        tree = self._parser.parse(code, path)
        root = _TreeConverter(code).convert(tree.root_node)
        lines = code.count(b"\n") + (1 if code and not code.endswith(b"\n") else 0)
        return ParsedFile(path=path, root=root, lines=lines)

    def parse_file(self, path: Path, identity: Optional[str] = None) -> ParsedFile:
        """Read and parse a file. ``identity`` defaults to ``str(path)``.

        Raises:
            FileAccessError: If the file cannot be read
            ParsingError: If tree-sitter fails
        """
        try:
            code = path.read_bytes()
        except OSError as e:
            raise FileAccessError(path, str(e)) from e
        return self.parse_source(code, identity or str(path))


class _TreeConverter:
    """Conversion state for one source buffer."""

    def __init__(self, source: bytes) -> None:
        self._source = source
        self._handlers = {
            "function_definition": self._function,
            "if_statement": self._if,
            "else_clause": self._else,
            "case_statement": self._case,
            "binary_expression": self._binary,
            "unary_expression": self._unary,
            "call_expression": self._call,
            "goto_statement": self._label_reference,
            "labeled_statement": self._label_reference,
            "namespace_definition": self._namespace,
            "class_specifier": self._class,
            "struct_specifier": self._class,
            "union_specifier": self._class,
            "enum_specifier": self._enum,
            "declaration": self._declaration,
            "field_declaration": self._declaration,
            "type_definition": self._declaration,
            "alias_declaration": self._named,
            "enumerator": self._named,
            "access_specifier": self._access,
            "parameter_declaration": self._parameter,
            "optional_parameter_declaration": self._parameter,
            "variadic_parameter_declaration": self._parameter,
        }

    def convert(self, root: Any) -> SyntaxNode:
        return self._convert(root, None)[0]

    # ── Traversal ─────────────────────────────────────────────────────

    def _convert(self, node: Any, role: Optional[str]) -> list[SyntaxNode]:
        handler = self._handlers.get(node.type)
        if handler is None:
            return [self._node(node, _kind_of(node), role, self._children(node))]
        return handler(node, role)

    def _children(self, node: Any) -> list[SyntaxNode]:
        """Convert the children of ``node``, attaching documentation comments.

        A leading doc comment documents the next named sibling; a trailing
        one (``///<``) documents the previous named sibling if it ends on
        the comment's line.
        """
        result: list[SyntaxNode] = []
        cursor = node.walk()
        if not cursor.goto_first_child():
            return result

        leading_doc = False
        previous: Optional[SyntaxNode] = None
        while True:
            child = cursor.node
            if child.type == "comment":
                text = self._text(child)
                if is_trailing_doc_comment(text):
                    if previous is not None and previous.end_line == _line(child):
                        previous.documented = True
                elif is_leading_doc_comment(text):
                    leading_doc = True
            else:
                converted = self._convert(child, cursor.field_name)
                if child.is_named:
                    if leading_doc:
                        for c in converted:
                            c.documented = True
                        leading_doc = False
                    if converted:
                        previous = converted[-1]
                result.extend(converted)
            if not cursor.goto_next_sibling():
                break
        return result

    # ── Handlers ──────────────────────────────────────────────────────

    def _function(self, node: Any, role: Optional[str]) -> list[SyntaxNode]:
        children = self._children(node)
        name = self._declarator_name(node.child_by_field_name("declarator"))

        if node.child_by_field_name("body") is None:
            # function-try-block: the try statement is the body
            try_block = next((c for c in children if c.kind is NodeKind.TRY), None)
            if try_block is None:
                # = default / = delete
                return [self._node(node, NodeKind.DECLARATION, role, children, name=name)]
            try_block.role = "body"
        return [self._node(node, NodeKind.FUNCTION, role, children, name=name)]

    def _if(self, node: Any, role: Optional[str]) -> list[SyntaxNode]:
        children = self._children(node)
        for index, child in enumerate(children):
            if child.role == "alternative" and child.kind is not NodeKind.ELSE:
                # older grammars put the else statement straight in the field
                else_token = next((c for c in node.children if c.type == "else"), None)
                child.role = "body"
                line = _line(else_token) if else_token is not None else child.line
                children[index] = SyntaxNode(
                    NodeKind.ELSE, line, [child], end_line=child.end_line, role="alternative"
                )
        return [self._node(node, NodeKind.IF, role, children)]

    def _else(self, node: Any, role: Optional[str]) -> list[SyntaxNode]:
        children = self._children(node)
        for child in children:
            if child.kind is not NodeKind.TOKEN:
                child.role = "body"
                break
        return [self._node(node, NodeKind.ELSE, role, children)]

    def _case(self, node: Any, role: Optional[str]) -> list[SyntaxNode]:
        kind = NodeKind.CASE if node.child_by_field_name("value") is not None else NodeKind.DEFAULT
        return [self._node(node, kind, role, self._children(node))]

    def _binary(self, node: Any, role: Optional[str]) -> list[SyntaxNode]:
        operator = node.child_by_field_name("operator")
        kind = _LOGICAL_OPERATORS.get(operator.type) if operator is not None else None
        children = self._children(node)
        if kind is None:
            return [self._node(node, NodeKind.EXPRESSION, role, children)]
        return [self._node(node, kind, role, children, line=_line(operator))]

    def _unary(self, node: Any, role: Optional[str]) -> list[SyntaxNode]:
        operator = node.child_by_field_name("operator")
        if operator is not None and operator.type in _NOT_OPERATORS:
            kind = NodeKind.LOGICAL_NOT
        else:
            kind = NodeKind.EXPRESSION
        return [self._node(node, kind, role, self._children(node))]

    def _call(self, node: Any, role: Optional[str]) -> list[SyntaxNode]:
        name = self._callee(node.child_by_field_name("function"))
        return [self._node(node, NodeKind.CALL, role, self._children(node), name=name)]

    def _label_reference(self, node: Any, role: Optional[str]) -> list[SyntaxNode]:
        label = node.child_by_field_name("label")
        name = self._text(label) if label is not None else None
        return [self._node(node, _KIND_BY_TYPE[node.type], role, self._children(node), name=name)]

    def _namespace(self, node: Any, role: Optional[str]) -> list[SyntaxNode]:
        body = node.child_by_field_name("body")
        children = self._children(body) if body is not None else []
        return [self._node(node, NodeKind.NAMESPACE, role, children, name=self._field_text(node, "name"))]

    def _class(self, node: Any, role: Optional[str]) -> list[SyntaxNode]:
        body = node.child_by_field_name("body")
        if body is None:
            # forward declaration or elaborated type specifier
            return [self._node(node, NodeKind.OTHER, role)]
        keyword = next(
            (c.type for c in node.children if c.type in ("class", "struct", "union")),
            node.type.split("_")[0],
        )
        return [
            self._node(
                node,
                NodeKind.CLASS,
                role,
                self._children(body),
                name=self._field_text(node, "name"),
                keyword=keyword,
            )
        ]

    def _enum(self, node: Any, role: Optional[str]) -> list[SyntaxNode]:
        body = node.child_by_field_name("body")
        if body is None:
            return [self._node(node, NodeKind.OTHER, role)]
        return [
            self._node(node, NodeKind.ENUM, role, self._children(body), name=self._field_text(node, "name"))
        ]

    def _declaration(self, node: Any, role: Optional[str]) -> list[SyntaxNode]:
        children = self._children(node)
        declarators = node.children_by_field_name("declarator")
        result: list[SyntaxNode] = []

        type_node = node.child_by_field_name("type")
        if (
            type_node is not None
            and type_node.type in _TYPE_SPECIFIERS
            and type_node.child_by_field_name("body") is not None
        ):
            # struct S { ... } s;  declares S as well as s
            specifier = next(c for c in children if c.role == "type")
            children.remove(specifier)
            specifier.role = role
            result.append(specifier)
            if not declarators:
                return result

        name = self._declarator_name(declarators[0]) if declarators else None
        result.append(self._node(node, _KIND_BY_TYPE[node.type], role, children, name=name))
        return result

    def _named(self, node: Any, role: Optional[str]) -> list[SyntaxNode]:
        return [
            self._node(
                node, _KIND_BY_TYPE[node.type], role, self._children(node), name=self._field_text(node, "name")
            )
        ]

    def _access(self, node: Any, role: Optional[str]) -> list[SyntaxNode]:
        access = self._text(node).rstrip(":").strip()
        return [self._node(node, NodeKind.ACCESS_SPECIFIER, role, access=access)]

    def _parameter(self, node: Any, role: Optional[str]) -> list[SyntaxNode]:
        name = self._declarator_name(node.child_by_field_name("declarator"))
        return [self._node(node, NodeKind.PARAMETER, "parameter", self._children(node), name=name)]

    # ── Names ─────────────────────────────────────────────────────────

    def _declarator_name(self, node: Any) -> Optional[str]:
        """Declared name, found by descending through nested declarators."""
        while node is not None:
            if node.type in _NAME_TYPES:
                return self._name_text(node)
            inner = node.child_by_field_name("declarator")
            if inner is None:
                inner = next(
                    (
                        c
                        for c in node.named_children
                        if c.type in _NAME_TYPES or c.type.endswith("declarator")
                    ),
                    None,
                )
            node = inner
        return None

    def _callee(self, node: Any) -> Optional[str]:
        """Name of a called function; None for calls through other objects."""
        if node is None:
            return None
        if node.type in ("identifier", "qualified_identifier", "field_identifier"):
            return self._text(node)
        if node.type == "template_function":
            return self._callee(node.child_by_field_name("name"))
        if node.type == "field_expression":
            argument = node.child_by_field_name("argument")
            if argument is not None and argument.type == "this":
                return self._callee(node.child_by_field_name("field"))
        return None

    def _name_text(self, node: Any) -> str:
        if node.type == "template_function":
            name = node.child_by_field_name("name")
            if name is not None:
                return self._text(name)
        text = self._text(node)
        if node.type == "operator_cast":
            text = text.split("(", 1)[0]
        return " ".join(text.split())

    def _field_text(self, node: Any, field_name: str) -> Optional[str]:
        child = node.child_by_field_name(field_name)
        return self._text(child) if child is not None else None

    def _text(self, node: Any) -> str:
        return self._source[node.start_byte : node.end_byte].decode("utf-8", errors="replace")

    # ── Construction ──────────────────────────────────────────────────

    @staticmethod
    def _node(
        node: Any,
        kind: NodeKind,
        role: Optional[str],
        children: Optional[list[SyntaxNode]] = None,
        line: Optional[int] = None,
        **attrs: Any,
    ) -> SyntaxNode:
        return SyntaxNode(
            kind=kind,
            line=line if line is not None else _line(node),
            children=children if children is not None else [],
            end_line=node.end_point[0] + 1,
            role=role,
            **attrs,
        )


def _line(node: Any) -> int:
    return node.start_point[0] + 1


def _kind_of(node: Any) -> NodeKind:
    kind = _KIND_BY_TYPE.get(node.type)
    if kind is not None:
        return kind
    if not node.is_named:
        return NodeKind.TOKEN
    if node.type.endswith("_statement"):
        return NodeKind.STATEMENT
    if node.type.endswith(_EXPRESSION_SUFFIXES) or node.type in _EXPRESSION_LEAVES:
        return NodeKind.EXPRESSION
    return NodeKind.OTHER
