"""Syntax tree adapter: tree-sitter-nix parsing into immutable nodes."""

from nixdocgen.core.syntax.nodes import (
    AttrSet,
    Binding,
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
    preorder,
)
from nixdocgen.core.syntax.parser import CommentTable, SourceTree, parse_file, parse_source

__all__ = [
    "AttrSet",
    "Binding",
    "CommentTable",
    "Expr",
    "Ident",
    "IdentParam",
    "Inherit",
    "Lambda",
    "LetIn",
    "Other",
    "Pattern",
    "PatternEntry",
    "SourceTree",
    "Span",
    "parse_file",
    "parse_source",
    "preorder",
]
