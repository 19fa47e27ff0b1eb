"""nixdocgen - reference documentation generator for Nix function libraries.

Doc comments written above public bindings of a Nix file are attached,
normalized and rendered as CommonMark sections or as a JSON record list.
"""

# Version is defined in pyproject.toml and read dynamically
try:
    from importlib.metadata import version

    __version__ = version("nixdocgen")
except Exception:
    __version__ = "0.0.0.dev0"  # Fallback for development installs

from nixdocgen.core.docs import (
    Argument,
    DocExtractor,
    FlatArgument,
    LocationIndex,
    ManualEntry,
    PatternArgument,
    SectionGenerator,
    SingleArg,
)
from nixdocgen.core.syntax import SourceTree, parse_source

__all__ = [
    "Argument",
    "DocExtractor",
    "FlatArgument",
    "LocationIndex",
    "ManualEntry",
    "PatternArgument",
    "SectionGenerator",
    "SingleArg",
    "SourceTree",
    "__version__",
    "parse_source",
]
