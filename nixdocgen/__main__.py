"""Entry point for running nixdocgen as a module (``python -m nixdocgen``)."""

from __future__ import annotations


def main() -> None:
    """Main entry point for module execution."""
    from nixdocgen.cli.main import main as cli_main

    cli_main()


if __name__ == "__main__":
    main()
