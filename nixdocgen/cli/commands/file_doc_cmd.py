"""Extract the file-level doc comment of a Nix file."""

import json
from enum import StrEnum
from pathlib import Path
from typing import Annotated

import typer

from nixdocgen.cli.utils import fail
from nixdocgen.core.docs import DocExtractor, shift_headings
from nixdocgen.core.exceptions import InputError
from nixdocgen.core.logging import set_current_source
from nixdocgen.core.syntax import parse_file


class FileDocFormat(StrEnum):
    """Output formats of the file-doc command."""

    MARKDOWN = "markdown"
    JSON = "json"
    PLAIN = "plain"


def file_doc(
    file: Annotated[
        Path,
        typer.Option("--file", "-f", help="Nix file to extract documentation from", dir_okay=False),
    ],
    output_format: Annotated[
        FileDocFormat,
        typer.Option("--format", help="Output format", case_sensitive=False),
    ] = FileDocFormat.MARKDOWN,
    shift: Annotated[
        int,
        typer.Option("--shift-headings", min=0, help="Shift heading levels by this amount"),
    ] = 0,
) -> None:
    """Print the documentation comment at the top of a Nix file.

    Examples
    --------
    nixdocgen file-doc -f lib/strings.nix
    nixdocgen file-doc -f lib/strings.nix --format json --shift-headings 1
    """
    set_current_source(file)
    try:
        doc = DocExtractor(parse_file(file)).extract_file_doc()
    except InputError as e:
        fail(e)

    if doc is not None and shift > 0:
        doc = shift_headings(doc, shift)

    if output_format is FileDocFormat.JSON:
        typer.echo(json.dumps({"file": str(file), "doc": doc}, indent=2))
    elif doc is not None:
        typer.echo(doc)
