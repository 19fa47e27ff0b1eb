"""Tests for the tree-sitter adapter and the doc comment side table."""

import pytest

from nixdocgen.core.exceptions import NixParseError, SourceReadError
from nixdocgen.core.syntax import parse_file, parse_source
from nixdocgen.core.syntax.nodes import (
    AttrSet,
    Binding,
    Ident,
    IdentParam,
    Inherit,
    Lambda,
    LetIn,
    Other,
    Pattern,
    preorder,
)


def _only_binding(source: str) -> tuple[Binding, object]:
    tree = parse_source(source)
    assert isinstance(tree.expression, AttrSet)
    (binding,) = tree.expression.entries
    assert isinstance(binding, Binding)
    return binding, tree.comments


class TestConversion:
    """Tests for mapping tree-sitter nodes to documentation nodes."""

    def test_attrset_bindings(self) -> None:
        """Test that bindings keep their attribute path and value."""
        tree = parse_source("{ a = 1; b.c = x; }")
        assert isinstance(tree.expression, AttrSet)
        assert not tree.expression.recursive
        names = [entry.attrpath for entry in tree.expression.entries]
        assert names == ["a", "b.c"]
        assert isinstance(tree.expression.entries[1].value, Ident)
        assert tree.expression.entries[1].value.name == "x"

    def test_rec_attrset(self) -> None:
        """Test that recursive attribute sets are flagged."""
        tree = parse_source("rec { a = 1; b = a; }")
        assert isinstance(tree.expression, AttrSet)
        assert tree.expression.recursive

    def test_let_in(self) -> None:
        """Test that let blocks expose their bindings and body."""
        tree = parse_source("let a = 1; b = a; in b")
        assert isinstance(tree.expression, LetIn)
        assert [e.attrpath for e in tree.expression.entries] == ["a", "b"]
        assert isinstance(tree.expression.body, Ident)
        assert tree.expression.find_binding("b") is tree.expression.entries[1]
        assert tree.expression.find_binding("missing") is None

    def test_inherit_clauses(self) -> None:
        """Test that bare and sourced inherits are told apart."""
        tree = parse_source("{ inherit a b; inherit (lib) c; }")
        bare, sourced = tree.expression.entries
        assert isinstance(bare, Inherit)
        assert bare.attrs == ("a", "b")
        assert bare.source is None
        assert isinstance(sourced, Inherit)
        assert sourced.attrs == ("c",)
        assert isinstance(sourced.source, Ident)
        assert sourced.source.name == "lib"

    def test_curried_lambda(self) -> None:
        """Test that curried functions nest lambdas."""
        binding, _ = _only_binding("{ f = a: { b, c ? 1, ... }@args: d: a; }")
        outer = binding.value
        assert isinstance(outer, Lambda)
        assert isinstance(outer.param, IdentParam)
        assert outer.param.name == "a"

        middle = outer.body
        assert isinstance(middle, Lambda)
        assert isinstance(middle.param, Pattern)
        assert [e.name for e in middle.param.entries] == ["b", "c"]
        assert middle.param.entries[0].default is None
        assert middle.param.entries[1].default is not None
        assert middle.param.bind == "args"
        assert middle.param.ellipsis

        inner = middle.body
        assert isinstance(inner, Lambda)
        assert inner.param.name == "d"

    def test_other_expressions_keep_children(self) -> None:
        """Test that unclassified expressions still expose nested sets."""
        tree = parse_source("f { a = 1; }")
        assert isinstance(tree.expression, Other)
        assert any(isinstance(node, AttrSet) for node in preorder(tree.expression))

    def test_empty_source(self) -> None:
        """Test that a file without an expression has no root."""
        tree = parse_source("# only a comment\n")
        assert tree.expression is None

    def test_trailing_comma_in_pattern(self) -> None:
        """Test that a trailing comma after the last pattern field is accepted."""
        tree = parse_source("{ a ? null, }: a")
        assert isinstance(tree.expression, Lambda)
        assert [e.name for e in tree.expression.param.entries] == ["a"]

    def test_multiline_header_with_trailing_comma(self) -> None:
        """Test the one-field-per-line function header written by nixfmt."""
        tree = parse_source("{\n  lib,\n  stdenv,\n}:\n{ a = 1; }\n")
        pattern = tree.expression.param
        assert isinstance(pattern, Pattern)
        assert [e.name for e in pattern.entries] == ["lib", "stdenv"]
        assert not pattern.ellipsis
        assert isinstance(tree.expression.body, AttrSet)


class TestPreorder:
    """Tests for the pre-order traversal."""

    def test_source_order(self) -> None:
        """Test that nodes are visited parent first, left to right."""
        tree = parse_source("let a = { x = 1; }; in { y = 2; }")
        sets = [n for n in preorder(tree.expression) if isinstance(n, AttrSet)]
        assert [s.entries[0].attrpath for s in sets] == ["x", "y"]

    def test_skip_patterns(self) -> None:
        """Test that pattern defaults are not entered when skipping patterns."""
        tree = parse_source("{ cfg ? { a = 1; } }: { b = 2; }")
        all_sets = [n for n in preorder(tree.expression) if isinstance(n, AttrSet)]
        skipped = [
            n for n in preorder(tree.expression, skip_patterns=True) if isinstance(n, AttrSet)
        ]
        assert len(all_sets) == 2
        assert [s.entries[0].attrpath for s in skipped] == ["b"]


class TestCommentTable:
    """Tests for doc comment attachment."""

    def test_doc_comment_attached(self) -> None:
        """Test that a doc comment documents the following binding."""
        binding, comments = _only_binding("{\n  /** Adds. */\n  add = a: a;\n}")
        assert comments.raw_doc(binding) == " Adds. "

    def test_plain_block_comment_ignored(self) -> None:
        """Test that single-star block comments are not documentation."""
        binding, comments = _only_binding("{\n  /* Adds. */\n  add = a: a;\n}")
        assert comments.raw_doc(binding) is None

    def test_line_comment_ignored(self) -> None:
        """Test that hash comments are not documentation."""
        binding, comments = _only_binding("{\n  # Adds.\n  add = a: a;\n}")
        assert comments.raw_doc(binding) is None

    def test_intervening_comment_breaks_attachment(self) -> None:
        """Test that any comment between doc and binding detaches the doc."""
        binding, comments = _only_binding("{\n  /** Adds. */\n  # note\n  add = a: a;\n}")
        assert comments.raw_doc(binding) is None

    def test_empty_doc_marker_ignored(self) -> None:
        """Test that the empty block comment is not a doc comment."""
        binding, comments = _only_binding("{\n  /**/\n  add = a: a;\n}")
        assert comments.raw_doc(binding) is None

    def test_doc_comment_on_parameter(self) -> None:
        """Test that parameters can carry their own doc comments."""
        binding, comments = _only_binding("{ f = /** The value */ x: x; }")
        assert comments.raw_doc(binding) is None
        assert comments.raw_doc(binding.value.param) == " The value "

    def test_doc_comment_on_pattern_field(self) -> None:
        """Test that pattern fields can carry their own doc comments."""
        binding, comments = _only_binding("{ f = { /** First */ x, y }: x; }")
        first, second = binding.value.param.entries
        assert comments.raw_doc(first) == " First "
        assert comments.raw_doc(second) is None

    def test_file_doc_comment(self) -> None:
        """Test that a leading doc comment documents the top-level expression."""
        tree = parse_source("/** File doc. */\n{ lib }: { }")
        assert tree.comments.raw_doc(tree.expression) == " File doc. "
        assert len(tree.comments) == 1


class TestParseErrors:
    """Tests for parse and read failures."""

    def test_syntax_error_raises(self) -> None:
        """Test that a syntax error aborts with a positioned error."""
        with pytest.raises(NixParseError) as exc_info:
            parse_source("{ a = ; }", path="broken.nix")
        assert exc_info.value.path == "broken.nix"
        assert exc_info.value.line == 1
        assert "failed to parse" in str(exc_info.value)

    def test_error_after_trailing_comma_header_raises(self) -> None:
        """Test that real errors still abort in files with a trailing comma header."""
        with pytest.raises(NixParseError):
            parse_source("{\n  lib,\n}:\n{ a = ; }\n")

    def test_unreadable_file_raises(self, tmp_path) -> None:
        """Test that a missing file raises a read error naming the path."""
        missing = tmp_path / "missing.nix"
        with pytest.raises(SourceReadError) as exc_info:
            parse_file(missing)
        assert exc_info.value.path == str(missing)

    def test_invalid_utf8_raises(self, tmp_path) -> None:
        """Test that non UTF-8 input is a read error."""
        path = tmp_path / "latin1.nix"
        path.write_bytes(b"{ a = \"\xe9\"; }")
        with pytest.raises(SourceReadError):
            parse_file(path)

    def test_parse_file_records_path(self, write_nix) -> None:
        """Test that the parsed tree remembers its source path."""
        path = write_nix("{ a = 1; }")
        assert parse_file(path).path == str(path)
