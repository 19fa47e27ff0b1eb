"""Render the documented functions of a Nix file."""

from pathlib import Path
from typing import Annotated

import typer

from nixdocgen.cli.utils import fail, get_config
from nixdocgen.core.docs import DocExtractor, LocationIndex, SectionGenerator
from nixdocgen.core.exceptions import AliasCycleError, InputError, SerializationError
from nixdocgen.core.logging import get_logger, set_current_source
from nixdocgen.core.syntax import parse_file

logger = get_logger(__name__)


def parse_export_list(value: str | None) -> list[str] | None:
    """Split a comma-separated export list; None when the option is absent."""
    if value is None:
        return None
    return [name.strip() for name in value.split(",") if name.strip()]


def functions(
    ctx: typer.Context,
    file: Annotated[
        Path,
        typer.Option("--file", "-f", help="Nix file to process", dir_okay=False),
    ],
    prefix: Annotated[
        str | None,
        typer.Option("--prefix", "-p", help="Prefix for the category (e.g. 'lib' or 'utils')"),
    ] = None,
    category: Annotated[
        str | None,
        typer.Option("--category", "-c", help="Name of the function category (e.g. 'strings')"),
    ] = None,
    description: Annotated[
        str | None,
        typer.Option("--description", "-d", help="Description of the function category"),
    ] = None,
    anchor_prefix: Annotated[
        str | None,
        typer.Option("--anchor-prefix", help="Prefix of every generated anchor"),
    ] = None,
    locs: Annotated[
        Path | None,
        typer.Option("--locs", "-l", help="JSON file mapping identifiers to source locations"),
    ] = None,
    export: Annotated[
        str | None,
        typer.Option(
            "--export",
            "-e",
            help="Comma-separated bindings to document from the let block, in order",
        ),
    ] = None,
    json_output: Annotated[
        bool,
        typer.Option("--json-output", "-j", help="Output the entries as JSON records"),
    ] = False,
) -> None:
    """Generate reference documentation for the functions of a Nix file.

    Examples
    --------
    nixdocgen functions -f lib/strings.nix -c strings -d "String manipulation functions"
    nixdocgen functions -f lib/strings.nix -c strings --json-output
    nixdocgen functions -f default.nix -e add,sub
    """
    config = get_config(ctx)
    render = config.render
    prefix = render.prefix if prefix is None else prefix
    category = render.category if category is None else category
    description = render.description if description is None else description
    anchor_prefix = render.anchor_prefix if anchor_prefix is None else anchor_prefix
    locs = locs if locs is not None else (Path(config.locations) if config.locations else None)

    set_current_source(file)
    try:
        # The location index is loaded completely before any traversal
        locations = LocationIndex.from_file(locs) if locs is not None else LocationIndex()
        tree = parse_file(file)
        extractor = DocExtractor(tree, prefix=prefix, category=category, locations=locations)
        entries = extractor.collect_entries(parse_export_list(export))

        generator = SectionGenerator(anchor_prefix)
        if json_output:
            output = generator.to_json(entries)
        else:
            output = generator.generate_document(
                entries,
                category=category,
                description=description,
                file_doc=extractor.extract_file_doc(),
            )
    except AliasCycleError as e:
        fail(InputError(file, str(e)))
    except (InputError, SerializationError) as e:
        fail(e)

    logger.info("Documented {count} binding(s)", count=len(entries))
    typer.echo(output)
