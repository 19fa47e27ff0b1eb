"""Exception hierarchy for nixdocgen.

All nixdocgen exceptions inherit from NixdocError. Errors about user input
(unreadable files, unparsable sources, malformed JSON side files) abort a run;
``SyntaxTreeError`` signals a broken tree adapter and is a bug, not an input
problem.
"""

from __future__ import annotations

from pathlib import Path

# ============================================================================
# Base Exception
# ============================================================================


class NixdocError(Exception):
    """Base exception for all nixdocgen errors."""

    pass


# ============================================================================
# Configuration Errors
# ============================================================================


class ConfigurationError(NixdocError):
    """Raised when configuration is invalid or missing.

    Examples
    --------
    Example usage::

        raise ConfigurationError("logging.level", "unknown level 'LOUD'")
    """

    def __init__(self, component: str, reason: str) -> None:
        super().__init__(f"Configuration error in '{component}': {reason}")
        self.component = component
        self.reason = reason


# ============================================================================
# Input Errors (fatal for a run)
# ============================================================================


class InputError(NixdocError):
    """Base class for fatal problems with an input file.

    Every input error names the offending path so the CLI can report it.
    """

    kind = "input"

    def __init__(self, path: str | Path | None, reason: str) -> None:
        location = str(path) if path is not None else "<string>"
        super().__init__(f"{location}: {reason}")
        self.path = location
        self.reason = reason


class SourceReadError(InputError):
    """Raised when a Nix source file cannot be read or decoded."""

    kind = "source"


class NixParseError(InputError):
    """Raised when a Nix source file does not parse.

    Examples
    --------
    Example usage::

        raise NixParseError("lib/strings.nix", "syntax error", line=12, column=3)
    """

    kind = "parse"

    def __init__(
        self,
        path: str | Path | None,
        reason: str,
        line: int | None = None,
        column: int | None = None,
    ) -> None:
        if line is not None and column is not None:
            reason = f"{reason} at line {line}, column {column}"
        super().__init__(path, reason)
        self.line = line
        self.column = column


class LocationIndexError(InputError):
    """Raised when the location index JSON cannot be read or is malformed."""

    kind = "locations"


class OptionsFileError(InputError):
    """Raised when an options JSON document cannot be read or is malformed."""

    kind = "options"


class SerializationError(NixdocError):
    """Raised when entries cannot be serialized to the JSON record format."""

    pass


# ============================================================================
# Resolution Errors
# ============================================================================


class AliasCycleError(NixdocError):
    """Raised when let-bound identifiers alias each other in a cycle.

    Examples
    --------
    Example usage::

        # let a = b; b = a; in a
        raise AliasCycleError(["a", "b", "a"])
    """

    def __init__(self, chain: list[str]) -> None:
        super().__init__(f"Identifier alias cycle in let block: {' -> '.join(chain)}")
        self.chain = chain


class SyntaxTreeError(NixdocError):
    """Raised when the syntax tree has a shape the adapter cannot classify.

    The parser is trusted to produce well-formed trees, so this is a bug in
    the adapter or the grammar binding rather than a problem with the input.
    """

    def __init__(self, node_type: str, reason: str) -> None:
        super().__init__(f"Unexpected '{node_type}' node: {reason}")
        self.node_type = node_type
        self.reason = reason


__all__ = [
    "AliasCycleError",
    "ConfigurationError",
    "InputError",
    "LocationIndexError",
    "NixParseError",
    "NixdocError",
    "OptionsFileError",
    "SerializationError",
    "SourceReadError",
    "SyntaxTreeError",
]
