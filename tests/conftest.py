"""Configuration file for pytest containing fixtures and configuration.

This module provides fixtures that can be used across multiple test files:
- write_nix: Writes a Nix source file into the test's temporary directory
- math_source: A small documented function library
- strings_source: An RFC145-style library with a file doc comment
"""

from collections.abc import Callable
from pathlib import Path

import pytest

from nixdocgen.core.config import clear_config_cache

MATH_NIX = """\
{
  /**
    Adds two numbers.

    # Example

    ```nix
    add 1 2
    => 3
    ```
  */
  add = a: b: a + b;

  /** Subtracts `b` from `a`. */
  sub = a: b: a - b;

  # Not documented
  mul = a: b: a * b;
}
"""

STRINGS_NIX = """\
/**
  String manipulation functions.
*/
{ lib }:
let
  inherit (builtins) length;
in
rec {
  /**
    Concatenate a list of strings.

    # Example

    ```nix
    concatStrings [ "foo" "bar" ]
    => "foobar"
    ```
  */
  concatStrings = builtins.concatStringsSep "";

  /**
    Map a function over a list and concatenate the resulting strings.

    # Inputs

    `f`
    : Function to apply to each element
  */
  concatMapStrings = f: list: concatStrings (map f list);

  /** Determine whether a string has given prefix. */
  hasPrefix =
    /** Prefix to check for */
    pref:
    /** Input string */
    str: builtins.substring 0 (builtins.stringLength pref) str == pref;
}
"""


@pytest.fixture(autouse=True)
def _fresh_config_cache():
    """Every test starts without cached configuration files."""
    clear_config_cache()
    yield
    clear_config_cache()


@pytest.fixture
def write_nix(tmp_path: Path) -> Callable[..., Path]:
    """Fixture returning a helper that writes Nix source to a file."""

    def _write(source: str, name: str = "default.nix") -> Path:
        path = tmp_path / name
        path.write_text(source, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def math_source() -> str:
    """Attribute set library with two documented and one plain binding."""
    return MATH_NIX


@pytest.fixture
def strings_source() -> str:
    """Function library returning a recursive attribute set from a let block."""
    return STRINGS_NIX
