"""Command line interface for nixdocgen."""

from nixdocgen.cli.main import app, main

__all__ = ["app", "main"]
