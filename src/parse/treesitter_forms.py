"""Tree-sitter based discovery of ``# @autodef`` tagged top-level forms."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal

from tree_sitter import Language, Node, Parser
from tree_sitter_python import language as get_python_language

from contract.artifacts import EXPORT_MARKER

if TYPE_CHECKING:
    from pathlib import Path

FormShape = Literal["function", "alias", "other"]

_PARSER: Parser | None = None


def _get_parser() -> Parser:
    """Initialize and return the Tree-sitter parser with Python language."""
    global _PARSER
    if _PARSER is None:
        lang = Language(get_python_language())
        _PARSER = Parser(lang)

    return _PARSER


@dataclass(frozen=True)
class TaggedForm:
    """A top-level form preceded by an export marker."""

    shape: FormShape
    symbol: str | None
    text: str
    override: str | None
    line: int
    has_error: bool


def _node_text(node: Node | None) -> str | None:
    if node is None or node.text is None:
        return None
    return node.text.decode("utf8")


def _classify_node(node: Node) -> tuple[FormShape, str | None]:
    """Return the shape of a top-level node and the symbol it binds."""
    definition = node
    if node.type == "decorated_definition":
        definition = node.child_by_field_name("definition") or node

    if definition.type == "function_definition":
        return "function", _node_text(definition.child_by_field_name("name"))

    if definition.type == "class_definition":
        return "other", _node_text(definition.child_by_field_name("name"))

    if node.type == "expression_statement" and node.named_child_count == 1:
        assignment = node.named_children[0]
        if assignment.type == "assignment":
            left = assignment.child_by_field_name("left")
            right = assignment.child_by_field_name("right")
            symbol = _node_text(left) if left and left.type == "identifier" else None
            if (
                symbol
                and right is not None
                and right.type in ("identifier", "attribute")
                and assignment.child_by_field_name("type") is None
            ):
                return "alias", symbol
            return "other", symbol

    return "other", None


def _marker_rows(lines: list[str]) -> list[tuple[int, str | None]]:
    rows: list[tuple[int, str | None]] = []
    for row, line in enumerate(lines):
        match = EXPORT_MARKER.match(line)
        if match:
            rows.append((row, match.group("override") or None))
    return rows


def extract_tagged_forms(source: bytes) -> list[TaggedForm]:
    """Find every top-level form tagged with ``# @autodef``.

    A marker tags the first top-level statement starting after it. Markers
    with nothing after them are ignored. Forms are returned in file order.
    """
    parser = _get_parser()
    tree = parser.parse(source)

    statements = [
        child
        for child in tree.root_node.children
        if child.is_named and child.type != "comment"
    ]

    text = source.decode("utf8", errors="replace")

    # Several markers in a row tag the same statement; the last override wins.
    tagged: dict[int, str | None] = {}
    index = 0
    for row, override in _marker_rows(text.splitlines()):
        while index < len(statements) and statements[index].start_point[0] <= row:
            index += 1
        if index >= len(statements):
            break
        if override is not None or index not in tagged:
            tagged[index] = override

    forms: list[TaggedForm] = []
    for index, override in tagged.items():
        node = statements[index]
        shape, symbol = _classify_node(node)
        forms.append(
            TaggedForm(
                shape=shape,
                symbol=symbol,
                text=source[node.start_byte : node.end_byte].decode("utf8"),
                override=override,
                line=node.start_point[0] + 1,
                has_error=node.has_error or node.type == "ERROR",
            )
        )

    return forms


def extract_tagged_forms_from_file(file_path: Path) -> list[TaggedForm]:
    """Read a file and return its tagged forms; unreadable files have none."""
    try:
        source_bytes = file_path.read_bytes()
    except OSError:
        return []
    return extract_tagged_forms(source_bytes)


__all__ = ["FormShape", "TaggedForm", "extract_tagged_forms"]
