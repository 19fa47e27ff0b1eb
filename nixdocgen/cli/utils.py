"""CLI helper utilities shared by nixdocgen commands."""

from __future__ import annotations

from typing import Any, NoReturn, Protocol

import typer
from rich.console import Console
from rich.markup import escape

from nixdocgen.core.config import DocgenConfig
from nixdocgen.core.exceptions import InputError, NixdocError

# Documents go to stdout through typer.echo; status and errors go here
err_console = Console(stderr=True, soft_wrap=True)


class ContextProtocol(Protocol):
    """Protocol for common interface between Click and Typer contexts."""

    @property
    def obj(self) -> dict[str, Any] | None: ...


def get_config(ctx: ContextProtocol | None) -> DocgenConfig:
    """Return the configuration loaded by the main callback, or defaults."""
    obj = getattr(ctx, "obj", None)
    if isinstance(obj, dict) and isinstance(obj.get("config"), DocgenConfig):
        return obj["config"]
    return DocgenConfig()


def fail(error: NixdocError | str) -> NoReturn:
    """Report a fatal error on stderr and exit with status 1."""
    if isinstance(error, InputError):
        message = f"[bold]{escape(error.path)}[/bold]: {escape(error.reason)}"
    else:
        message = escape(str(error))
    err_console.print(f"[red]✗ Error:[/red] {message}")
    raise typer.Exit(1)
