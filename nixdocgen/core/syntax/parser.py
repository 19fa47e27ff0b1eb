"""Tree-sitter adapter producing the immutable documentation syntax tree.

The concrete tree from tree-sitter-nix is walked once. Node types are mapped
onto the closed variant set of ``nixdocgen.core.syntax.nodes`` and comments
are collected into a ``CommentTable``: a side table that maps the start
offset of a node to the doc comment written immediately before it.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from functools import cache
from pathlib import Path
from types import MappingProxyType
from typing import TYPE_CHECKING

import tree_sitter
import tree_sitter_nix

from nixdocgen.core.exceptions import NixParseError, SourceReadError, SyntaxTreeError
from nixdocgen.core.logging import get_logger
from nixdocgen.core.syntax.nodes import (
    AttrSet,
    Binding,
    Entry,
    Expr,
    Ident,
    IdentParam,
    Inherit,
    Lambda,
    LetIn,
    Other,
    Pattern,
    PatternEntry,
    Span,
)

if TYPE_CHECKING:
    from nixdocgen.core.syntax.nodes import Node

logger = get_logger(__name__)

DOC_COMMENT_OPEN = b"/**"
COMMENT_CLOSE = b"*/"

_ATTRSET_TYPES = frozenset({"attrset_expression", "rec_attrset_expression"})


@dataclass(frozen=True, slots=True)
class CommentTable:
    """Doc comments keyed by the start offset of the node they document.

    A doc comment (``/** ... */``) documents the first token following it
    when only whitespace separates them. Any other comment in between breaks
    the attachment.
    """

    by_offset: Mapping[int, str] = field(default_factory=dict)

    def raw_doc(self, node: Node) -> str | None:
        """Return the raw body of the doc comment attached to ``node``."""
        return self.by_offset.get(node.span.start)

    def __len__(self) -> int:
        return len(self.by_offset)


@dataclass(frozen=True, slots=True)
class SourceTree:
    """A parsed Nix file.

    Attributes
    ----------
    expression : Expr | None
        Top-level expression, None for an empty file
    comments : CommentTable
        Doc comment side table
    path : str | None
        Path the source was read from, if any
    """

    expression: Expr | None
    comments: CommentTable
    path: str | None = None


@cache
def _nix_language() -> tree_sitter.Language:
    return tree_sitter.Language(tree_sitter_nix.language())


def parse_source(source: str | bytes, path: str | Path | None = None) -> SourceTree:
    """Parse Nix source text into a ``SourceTree``.

    Parameters
    ----------
    source : str | bytes
        Nix source text (bytes must be UTF-8)
    path : str | Path | None
        Path used in error messages

    Returns
    -------
    SourceTree
        Converted tree and doc comment table

    Raises
    ------
    NixParseError
        If the source contains syntax errors
    """
    data = source.encode("utf-8") if isinstance(source, str) else source
    parser = tree_sitter.Parser(_nix_language())
    tree = parser.parse(data)
    root = tree.root_node

    if root.has_error and (error := _first_error(root, data)) is not None:
        line, column = error.start_point[0] + 1, error.start_point[1] + 1
        raise NixParseError(path, "failed to parse Nix source", line=line, column=column)

    converter = _Converter(data)
    expression_node = next(_named(root), None)
    expression = converter.expr(expression_node) if expression_node is not None else None
    comments = CommentTable(MappingProxyType(_collect_doc_comments(root, data)))

    logger.debug(
        "Parsed {path}: {count} doc comment(s)",
        path=path or "<string>",
        count=len(comments),
    )
    return SourceTree(expression=expression, comments=comments, path=str(path) if path else None)


def parse_file(path: str | Path) -> SourceTree:
    """Read and parse a Nix file.

    Raises
    ------
    SourceReadError
        If the file cannot be read or is not valid UTF-8
    NixParseError
        If the file contains syntax errors
    """
    try:
        text = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise SourceReadError(path, f"cannot be read: {e}") from e
    return parse_source(text, path)


# ============================================================================
# Doc comment side table
# ============================================================================


def _iter_comments(node: tree_sitter.Node) -> Iterator[tree_sitter.Node]:
    stack = [node]
    while stack:
        current = stack.pop()
        if current.type == "comment":
            yield current
            continue
        stack.extend(reversed(current.children))


def _collect_doc_comments(root: tree_sitter.Node, data: bytes) -> dict[int, str]:
    comments = sorted(_iter_comments(root), key=lambda c: c.start_byte)
    comment_starts = {c.start_byte for c in comments}

    table: dict[int, str] = {}
    for comment in comments:
        raw = data[comment.start_byte : comment.end_byte]
        if not raw.startswith(DOC_COMMENT_OPEN) or raw == b"/**/":
            continue

        target = comment.end_byte
        while target < len(data) and data[target : target + 1].isspace():
            target += 1
        if target >= len(data) or target in comment_starts:
            continue

        table[target] = raw[len(DOC_COMMENT_OPEN) : -len(COMMENT_CLOSE)].decode("utf-8")
    return table


def _first_error(node: tree_sitter.Node, data: bytes) -> tree_sitter.Node | None:
    """First error or missing node, ignoring trailing commas in parameter patterns."""
    if node.is_missing:
        return node
    if node.type == "ERROR":
        return None if _is_trailing_formals_comma(node, data) else node
    for child in node.children:
        if child.has_error and (error := _first_error(child, data)) is not None:
            return error
    return None


def _is_trailing_formals_comma(node: tree_sitter.Node, data: bytes) -> bool:
    # tree-sitter-nix rejects `{ a, b, }:` although Nix accepts it
    parent = node.parent
    return (
        parent is not None
        and parent.type == "formals"
        and data[node.start_byte : node.end_byte].strip() == b","
    )


# ============================================================================
# Concrete tree conversion
# ============================================================================


def _named(node: tree_sitter.Node) -> Iterator[tree_sitter.Node]:
    """Named children that are not comments."""
    return (c for c in node.named_children if c.type != "comment")


def _first_of(node: tree_sitter.Node, *types: str) -> tree_sitter.Node | None:
    return next((c for c in _named(node) if c.type in types), None)


def _span(node: tree_sitter.Node) -> Span:
    return Span(node.start_byte, node.end_byte)


class _Converter:
    """Maps tree-sitter-nix nodes onto the documentation node variants."""

    def __init__(self, data: bytes) -> None:
        self._data = data

    def text(self, node: tree_sitter.Node) -> str:
        return self._data[node.start_byte : node.end_byte].decode("utf-8")

    def expr(self, node: tree_sitter.Node) -> Expr:
        match node.type:
            case "attrset_expression" | "rec_attrset_expression":
                return AttrSet(
                    span=_span(node),
                    entries=self.entries(node),
                    recursive=node.type == "rec_attrset_expression",
                )
            case "let_expression":
                return LetIn(span=_span(node), entries=self.entries(node), body=self.body(node))
            case "function_expression":
                return Lambda(span=_span(node), param=self.param(node), body=self.body(node))
            case "variable_expression":
                name = node.child_by_field_name("name") or _first_of(node, "identifier")
                if name is None:
                    raise SyntaxTreeError(node.type, "variable without identifier")
                return Ident(span=_span(node), name=self.text(name))
            case _:
                return Other(
                    span=_span(node),
                    kind=node.type,
                    children=tuple(self.expr(c) for c in _named(node) if _is_expression(c)),
                )

    def body(self, node: tree_sitter.Node) -> Expr:
        body = node.child_by_field_name("body")
        if body is None:
            candidates = [c for c in _named(node) if _is_expression(c)]
            if not candidates:
                raise SyntaxTreeError(node.type, "missing body expression")
            body = candidates[-1]
        return self.expr(body)

    def entries(self, node: tree_sitter.Node) -> tuple[Entry, ...]:
        binding_set = _first_of(node, "binding_set")
        if binding_set is None:
            return ()
        return tuple(self.entry(c) for c in _named(binding_set))

    def entry(self, node: tree_sitter.Node) -> Entry:
        match node.type:
            case "binding":
                attrpath = node.child_by_field_name("attrpath") or _first_of(node, "attrpath")
                value = node.child_by_field_name("expression")
                if value is None:
                    value = next((c for c in _named(node) if c.type != "attrpath"), None)
                if attrpath is None or value is None:
                    raise SyntaxTreeError(node.type, "binding without attrpath or value")
                return Binding(
                    span=_span(node), attrpath=self.text(attrpath), value=self.expr(value)
                )
            case "inherit" | "inherit_from":
                attrs_node = node.child_by_field_name("attrs") or _first_of(node, "inherited_attrs")
                attrs = (
                    tuple(self.text(a) for a in _named(attrs_node) if a.type == "identifier")
                    if attrs_node is not None
                    else ()
                )
                source = None
                if node.type == "inherit_from":
                    source_node = node.child_by_field_name("expression") or next(
                        (c for c in _named(node) if c.type != "inherited_attrs"), None
                    )
                    if source_node is None:
                        raise SyntaxTreeError(node.type, "inherit without source expression")
                    source = self.expr(source_node)
                return Inherit(span=_span(node), attrs=attrs, source=source)
            case _:
                raise SyntaxTreeError(node.type, "not a binding or inherit clause")

    def param(self, node: tree_sitter.Node) -> IdentParam | Pattern:
        formals = None
        identifier = None
        for child in node.children:
            if child.type == ":":
                break
            if child.type == "formals":
                formals = child
            elif child.type == "identifier":
                identifier = child

        if formals is not None:
            return Pattern(
                span=_span(formals),
                entries=tuple(self.pattern_entry(f) for f in _named(formals) if f.type == "formal"),
                bind=self.text(identifier) if identifier is not None else None,
                ellipsis=_first_of(formals, "ellipses") is not None,
            )
        if identifier is not None:
            return IdentParam(span=_span(identifier), name=self.text(identifier))
        raise SyntaxTreeError(node.type, "parameter is neither identifier nor pattern")

    def pattern_entry(self, node: tree_sitter.Node) -> PatternEntry:
        name = node.child_by_field_name("name") or _first_of(node, "identifier")
        if name is None:
            raise SyntaxTreeError(node.type, "pattern field without name")
        default = node.child_by_field_name("default")
        return PatternEntry(
            span=_span(node),
            name=self.text(name),
            default=self.expr(default) if default is not None else None,
        )


def _is_expression(node: tree_sitter.Node) -> bool:
    """Whether a named child can be converted as an expression.

    Attribute paths, identifiers, string fragments and the like are not
    expressions and are left out of ``Other.children``.
    """
    return node.type not in _STRUCTURAL_TYPES


_STRUCTURAL_TYPES = frozenset(
    {
        "attrpath",
        "binding_set",
        "comment",
        "ellipses",
        "escape_sequence",
        "formal",
        "formals",
        "identifier",
        "inherited_attrs",
        "string_fragment",
        "dollar_escape",
        "path_fragment",
        "keyword",
    }
)


__all__ = ["CommentTable", "SourceTree", "parse_file", "parse_source"]
