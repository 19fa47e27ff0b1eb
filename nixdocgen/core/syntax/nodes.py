"""Immutable syntax tree for the parts of Nix that documentation cares about.

The tree-sitter concrete tree is converted once into these frozen
dataclasses. Expressions form a closed set of variants: ``AttrSet``,
``LetIn``, ``Lambda``, ``Ident`` and the catch-all ``Other``. Entries of
attribute sets and let blocks are ``Binding`` or ``Inherit``; lambda
parameters are ``IdentParam`` or ``Pattern``.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import TypeAlias


@dataclass(frozen=True, slots=True)
class Span:
    """Byte range of a node in the source text."""

    start: int
    end: int


@dataclass(frozen=True, slots=True)
class Ident:
    """A variable reference such as ``x``."""

    span: Span
    name: str


@dataclass(frozen=True, slots=True)
class IdentParam:
    """Simple lambda parameter: the ``x`` in ``x: body``."""

    span: Span
    name: str


@dataclass(frozen=True, slots=True)
class PatternEntry:
    """One field of a destructuring pattern, with its optional default."""

    span: Span
    name: str
    default: Expr | None = None


@dataclass(frozen=True, slots=True)
class Pattern:
    """Destructuring lambda parameter: ``{ a, b ? 1, ... }@args``."""

    span: Span
    entries: tuple[PatternEntry, ...]
    bind: str | None = None
    ellipsis: bool = False


@dataclass(frozen=True, slots=True)
class Lambda:
    """Single-parameter function ``param: body``."""

    span: Span
    param: IdentParam | Pattern
    body: Expr


@dataclass(frozen=True, slots=True)
class Binding:
    """Attribute path assignment ``a.b = value;``."""

    span: Span
    attrpath: str
    value: Expr


@dataclass(frozen=True, slots=True)
class Inherit:
    """``inherit a b;`` or, when ``source`` is set, ``inherit (source) a b;``."""

    span: Span
    attrs: tuple[str, ...]
    source: Expr | None = None


Entry: TypeAlias = Binding | Inherit


@dataclass(frozen=True, slots=True)
class AttrSet:
    """Attribute set literal, recursive or not."""

    span: Span
    entries: tuple[Entry, ...]
    recursive: bool = False


@dataclass(frozen=True, slots=True)
class LetIn:
    """``let <entries> in <body>``."""

    span: Span
    entries: tuple[Entry, ...]
    body: Expr

    def find_binding(self, name: str) -> Binding | None:
        """Return the first binding whose attribute path is exactly ``name``."""
        for entry in self.entries:
            if isinstance(entry, Binding) and entry.attrpath == name:
                return entry
        return None


@dataclass(frozen=True, slots=True)
class Other:
    """Any other expression; ``kind`` is the grammar node type."""

    span: Span
    kind: str
    children: tuple[Expr, ...] = ()


Expr: TypeAlias = AttrSet | LetIn | Lambda | Ident | Other
Node: TypeAlias = Expr | Entry | IdentParam | Pattern | PatternEntry


def child_nodes(node: Node) -> tuple[Node, ...]:
    """Direct children of ``node`` in source order."""
    match node:
        case AttrSet(entries=entries):
            return entries
        case LetIn(entries=entries, body=body):
            return (*entries, body)
        case Lambda(param=param, body=body):
            return (param, body)
        case Binding(value=value):
            return (value,)
        case Inherit(source=source):
            return (source,) if source is not None else ()
        case Pattern(entries=entries):
            return entries
        case PatternEntry(default=default):
            return (default,) if default is not None else ()
        case Other(children=children):
            return children
        case _:
            return ()


def preorder(node: Node, *, skip_patterns: bool = False) -> Iterator[Node]:
    """Walk ``node`` and its descendants in preorder.

    With ``skip_patterns`` the subtree of every ``Pattern`` is not entered,
    so identifiers and defaults inside parameter lists are never visited.
    """
    stack: list[Node] = [node]
    while stack:
        current = stack.pop()
        yield current
        if skip_patterns and isinstance(current, Pattern):
            continue
        stack.extend(reversed(child_nodes(current)))


__all__ = [
    "AttrSet",
    "Binding",
    "Entry",
    "Expr",
    "Ident",
    "IdentParam",
    "Inherit",
    "Lambda",
    "LetIn",
    "Node",
    "Other",
    "Pattern",
    "PatternEntry",
    "Span",
    "child_nodes",
    "preorder",
]
