"""Renderers for extracted entries: CommonMark sections and JSON records.

Documents are built directly from ``ManualEntry`` values, no templates
involved.
"""

import textwrap

from pydantic import ValidationError
from pydantic_core import PydanticSerializationError

from nixdocgen.core.docs.models import (
    Argument,
    FlatArgument,
    ManualDocument,
    ManualEntry,
    PatternArgument,
    SingleArg,
)
from nixdocgen.core.exceptions import SerializationError
from nixdocgen.core.logging import get_logger

logger = get_logger(__name__)

DEFAULT_ANCHOR_PREFIX = "function-library-"
UNDOCUMENTED_ARGUMENT = "Function argument"


class SectionGenerator:
    """Render documentation entries.

    Parameters
    ----------
    anchor_prefix : str
        Prefix of every section anchor
    """

    def __init__(self, anchor_prefix: str = DEFAULT_ANCHOR_PREFIX) -> None:
        self.anchor_prefix = anchor_prefix

    def generate_document(
        self,
        entries: list[ManualEntry],
        category: str = "",
        description: str = "",
        file_doc: str | None = None,
    ) -> str:
        """Render a complete CommonMark document.

        The header is only written when a category or description is given.

        Parameters
        ----------
        entries : list[ManualEntry]
            Entries in output order
        category : str
            Category used in the header anchor
        description : str
            Header title
        file_doc : str | None
            File-level doc comment placed under the header

        Returns
        -------
        str
            Markdown document
        """
        output = self.generate_header(category, description, file_doc) + "\n"
        for entry in entries:
            output += self.write_section(entry)
        logger.debug("Rendered {count} section(s)", count=len(entries))
        return output

    @staticmethod
    def generate_header(category: str, description: str, file_doc: str | None = None) -> str:
        if not description and not category:
            return ""
        return f"# {description} {{#sec-functions-library-{category}}}\n{file_doc or ''}\n"

    def write_section(self, entry: ManualEntry) -> str:
        """Render one entry as a level 2 section."""
        output = f"## `{entry.identifier}` {{#{entry.anchor(self.anchor_prefix)}}}\n\n"

        if entry.fn_type:
            if len(entry.fn_type.splitlines()) > 1:
                output += f"**Type**:\n```\n{entry.fn_type}\n```\n\n"
            else:
                output += f"`{entry.fn_type}`\n\n"

        for paragraph in entry.description:
            output += f"{paragraph}\n\n"

        for arg in entry.args:
            output += f"{format_argument(arg)}\n"

        if entry.example:
            output += (
                f"::: {{.example #{entry.anchor(self.anchor_prefix)}-example}}\n"
                f"### `{entry.identifier}` usage example\n\n"
                f"```nix\n{entry.example}\n```\n:::\n\n"
            )

        if entry.location:
            output += f"Located at {entry.location}.\n\n"

        return output

    @staticmethod
    def to_json(entries: list[ManualEntry], indent: int | None = None) -> str:
        """Serialize entries as ``{"version": 1, "entries": [...]}``.

        Raises
        ------
        SerializationError
            If the entries cannot be serialized
        """
        try:
            return ManualDocument(entries=entries).model_dump_json(by_alias=True, indent=indent)
        except (PydanticSerializationError, ValidationError) as e:
            raise SerializationError(f"Problem converting entries to JSON: {e}") from e

    @staticmethod
    def from_json(data: str | bytes) -> list[ManualEntry]:
        """Read back a record list written by ``to_json``.

        Raises
        ------
        SerializationError
            If the data is not a valid version 1 record list
        """
        try:
            return ManualDocument.model_validate_json(data).entries
        except ValidationError as e:
            raise SerializationError(f"Invalid entry record list: {e}") from e


def format_argument(arg: Argument) -> str:
    """Render an argument as a definition list item.

    A flat argument is a term with its doc; a pattern argument nests the
    definitions of its fields under "structured function argument".
    """
    match arg:
        case FlatArgument(arg=single):
            return _format_single(single)
        case PatternArgument(args=fields):
            inner = "".join(_format_single(field) for field in fields)
            return f"structured function argument\n\n: {textwrap.indent(inner, '    ').lstrip()}"
    raise TypeError(f"Unsupported argument type: {type(arg).__name__}")


def _format_single(arg: SingleArg) -> str:
    doc = arg.doc.strip() or UNDOCUMENTED_ARGUMENT
    first, newline, rest = doc.partition("\n")
    if newline:
        doc = f"{first}\n{textwrap.indent(rest, '  ')}"
    return f"`{arg.name}`\n\n: {doc}\n\n"
