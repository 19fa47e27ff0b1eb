"""nixdocgen CLI - Main entrypoint."""

from pathlib import Path

import typer

from nixdocgen import __version__
from nixdocgen.cli.commands import file_doc_cmd, functions_cmd, options_cmd
from nixdocgen.cli.utils import fail
from nixdocgen.core.config import load_config
from nixdocgen.core.exceptions import ConfigurationError
from nixdocgen.core.logging import configure_logging

app = typer.Typer(
    name="nixdocgen",
    help="Generate reference documentation from doc comments in Nix files.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    pretty_exceptions_enable=False,
)

app.command("functions", help="Document the functions of a Nix file")(functions_cmd.functions)
app.command("file-doc", help="Extract the file-level doc comment")(file_doc_cmd.file_doc)
app.command("options", help="Render a module options JSON document")(options_cmd.options)

_LOG_LEVELS = {"trace", "debug", "info", "warning", "error", "critical"}


@app.callback(invoke_without_command=True)
def callback(
    ctx: typer.Context,
    *,
    config: Path | None = typer.Option(
        None,
        "--config",
        help="Configuration file: YAML, or TOML with a tool.nixdocgen table",
    ),
    log_level: str | None = typer.Option(
        None, "--log-level", help="Log level: debug|info|warning|error"
    ),
    quiet: bool = typer.Option(False, "-q", "--quiet", help="Only log errors"),
    verbose: bool = typer.Option(False, "-V", "--verbose", help="Enable debug logging"),
    version: bool = typer.Option(False, "--version", "-v", help="Show version and exit"),
) -> None:
    """nixdocgen - documentation generator for Nix function libraries.

    Global flags are parsed here; the loaded configuration is stored on
    `ctx.obj` for the commands.
    """
    if version:
        typer.echo(f"nixdocgen {__version__}")
        raise typer.Exit()
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()

    try:
        loaded = load_config(config)
    except FileNotFoundError as e:
        fail(ConfigurationError(str(config), str(e)))
    except ConfigurationError as e:
        fail(e)

    level = loaded.logging.level
    if log_level is not None:
        if log_level.lower() not in _LOG_LEVELS:
            fail(ConfigurationError("--log-level", f"unknown level {log_level!r}"))
        level = log_level.upper()
    if quiet:
        level = "ERROR"
    elif verbose:
        level = "DEBUG"

    configure_logging(
        level=level,
        format=loaded.logging.format,
        output_file=loaded.logging.output_file,
        use_color=loaded.logging.use_color,
        include_timestamp=loaded.logging.include_timestamp,
    )

    if ctx.obj is None:
        ctx.obj = {}
    ctx.obj["config"] = loaded


def main() -> None:
    """Main CLI entrypoint."""
    app()


if __name__ == "__main__":
    main()
