#!/usr/bin/env python3
"""Entry point for the CLI when run as python -m nixdocgen.cli."""

if __name__ == "__main__":
    from nixdocgen.cli.main import main

    main()
