"""CLI command modules for nixdocgen."""

from nixdocgen.cli.commands import file_doc_cmd, functions_cmd, options_cmd

__all__ = ["file_doc_cmd", "functions_cmd", "options_cmd"]
