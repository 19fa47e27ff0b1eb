"""Tests for nixdocgen.core.docs.models."""

import pytest
from pydantic import ValidationError

from nixdocgen.core.docs.models import FlatArgument, ManualEntry, SingleArg, get_identifier


class TestGetIdentifier:
    """Tests for identifier construction."""

    @pytest.mark.parametrize(
        ("prefix", "category", "name", "expected"),
        [
            ("lib", "strings", "concatStrings", "lib.strings.concatStrings"),
            ("lib", "", "id", "lib.id"),
            ("", "strings", "concat", "strings.concat"),
            ("", "", "f", "f"),
        ],
    )
    def test_segments(self, prefix: str, category: str, name: str, expected: str) -> None:
        """Test that empty segments are left out."""
        assert get_identifier(prefix, category, name) == expected


class TestManualEntry:
    """Tests for ManualEntry."""

    def test_identifier_and_anchor(self) -> None:
        """Test the qualified identifier and its anchor."""
        entry = ManualEntry(prefix="lib", category="strings", name="concat", description=[])
        assert entry.identifier == "lib.strings.concat"
        assert entry.anchor("function-library-") == "function-library-lib.strings.concat"

    def test_anchor_replaces_unsafe_characters(self) -> None:
        """Test that quotes and primes become anchor-safe."""
        entry = ManualEntry(prefix="lib", category="", name='"with space"', description=[])
        assert entry.anchor("a-") == "a-lib.-with-space-"

        primed = ManualEntry(prefix="lib", category="lists", name="foldl'", description=[])
        assert primed.anchor("") == "lib.lists.foldl-prime"

    def test_entries_are_immutable(self) -> None:
        """Test that entries cannot be modified after resolution."""
        entry = ManualEntry(prefix="lib", category="", name="f", description=[])
        with pytest.raises(ValidationError):
            entry.name = "g"

    def test_unknown_fields_rejected(self) -> None:
        """Test that records with unknown fields are invalid."""
        with pytest.raises(ValidationError):
            ManualEntry(prefix="lib", category="", name="f", description=[], extra=1)


class TestArguments:
    """Tests for argument models."""

    def test_flat_alias(self) -> None:
        """Test that flat arguments validate from their record form."""
        arg = FlatArgument.model_validate({"Flat": {"name": "x", "doc": "d"}})
        assert arg == FlatArgument.of("x", "d")
        assert arg.arg == SingleArg(name="x", doc="d")

    def test_doc_defaults_to_empty(self) -> None:
        """Test that undocumented arguments have an empty doc."""
        assert SingleArg(name="x").doc == ""
