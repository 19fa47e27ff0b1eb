"""Render NixOS-style module options from JSON to CommonMark."""

from pathlib import Path
from typing import Annotated

import typer

from nixdocgen.cli.utils import err_console, fail, get_config
from nixdocgen.core.docs.options import (
    OptionsRenderOptions,
    parse_options_file,
    render_options_document,
)
from nixdocgen.core.exceptions import InputError
from nixdocgen.core.logging import set_current_source


def options(
    ctx: typer.Context,
    file: Annotated[
        Path,
        typer.Option(
            "--file", "-f", help="Options JSON (from lib.optionAttrSetToDocList)", dir_okay=False
        ),
    ],
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Output file (defaults to stdout)", dir_okay=False),
    ] = None,
    title: Annotated[str | None, typer.Option("--title", "-t", help="Document title")] = None,
    preamble: Annotated[
        str | None,
        typer.Option("--preamble", help="Text to include after the title"),
    ] = None,
    anchor_prefix: Annotated[
        str | None,
        typer.Option("--anchor-prefix", help="Prefix for option anchors"),
    ] = None,
    include_declarations: Annotated[
        bool | None,
        typer.Option(
            "--include-declarations/--no-include-declarations",
            help="Include declaration source links",
        ),
    ] = None,
    declarations_base_url: Annotated[
        str | None,
        typer.Option("--declarations-base-url", help="Base URL for declaration links"),
    ] = None,
    revision: Annotated[
        str | None,
        typer.Option("--revision", help="Git revision for declaration links"),
    ] = None,
) -> None:
    """Render a module options document.

    Examples
    --------
    nixdocgen options -f options.json -o options.md
    nixdocgen options -f options.json --declarations-base-url https://github.com/owner/repo
    """
    defaults = get_config(ctx).options
    render_options = OptionsRenderOptions(
        anchor_prefix=defaults.anchor_prefix if anchor_prefix is None else anchor_prefix,
        include_declarations=(
            defaults.include_declarations if include_declarations is None else include_declarations
        ),
        declarations_base_url=declarations_base_url or defaults.declarations_base_url,
        revision=revision or defaults.revision,
    )

    set_current_source(file)
    try:
        parsed = parse_options_file(file)
    except InputError as e:
        fail(e)

    result = render_options_document(
        parsed,
        title=title if title is not None else defaults.title,
        preamble=preamble,
        render_options=render_options,
    )

    if output is None:
        typer.echo(result)
        return

    try:
        output.write_text(result, encoding="utf-8")
    except OSError as e:
        fail(f"Error writing output {output}: {e}")
    err_console.print(f"[green]✓[/green] Wrote {len(parsed)} option(s) to {output}")
