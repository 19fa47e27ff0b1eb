"""Documentation extraction and rendering for Nix function libraries.

This package turns documented bindings of a parsed Nix file into
``ManualEntry`` values and renders them as CommonMark or JSON records.
"""

from nixdocgen.core.docs.arguments import collect_lambda_args
from nixdocgen.core.docs.comments import retrieve_doc_comment
from nixdocgen.core.docs.extractors import DocExtractor
from nixdocgen.core.docs.format import handle_indentation, shift_headings
from nixdocgen.core.docs.generators import SectionGenerator, format_argument
from nixdocgen.core.docs.locations import LocationIndex
from nixdocgen.core.docs.models import (
    Argument,
    DocItem,
    FlatArgument,
    ManualDocument,
    ManualEntry,
    PatternArgument,
    SingleArg,
    get_identifier,
)

__all__ = [
    "Argument",
    "DocExtractor",
    "DocItem",
    "FlatArgument",
    "LocationIndex",
    "ManualDocument",
    "ManualEntry",
    "PatternArgument",
    "SectionGenerator",
    "SingleArg",
    "collect_lambda_args",
    "format_argument",
    "get_identifier",
    "handle_indentation",
    "retrieve_doc_comment",
    "shift_headings",
]
