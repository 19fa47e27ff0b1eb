"""Data models for extracted Nix documentation.

These Pydantic models are the output of the binding resolver and the input
of the renderers. Their field names and order define the JSON record format
(``{"version": 1, "entries": [...]}``), so they must stay stable.
"""

import re
from typing import Literal, TypeAlias

from pydantic import BaseModel, ConfigDict, Field

RECORD_FORMAT_VERSION = 1

_ANCHOR_UNSAFE = re.compile(r"[^A-Za-z0-9._-]")


class SingleArg(BaseModel):
    """A named function parameter or pattern field.

    Attributes
    ----------
    name : str
        Parameter name
    doc : str
        Normalized documentation, empty when the parameter is undocumented
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str
    doc: str = ""


class FlatArgument(BaseModel):
    """Simple identifier parameter, serialized as ``{"Flat": {...}}``."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    arg: SingleArg = Field(alias="Flat")

    @classmethod
    def of(cls, name: str, doc: str = "") -> "FlatArgument":
        return cls(arg=SingleArg(name=name, doc=doc))


class PatternArgument(BaseModel):
    """Destructured parameter, serialized as ``{"Pattern": [...]}``."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    args: list[SingleArg] = Field(alias="Pattern")

    @classmethod
    def of(cls, *args: SingleArg) -> "PatternArgument":
        return cls(args=list(args))


Argument: TypeAlias = FlatArgument | PatternArgument


class DocItem(BaseModel):
    """A documented binding before it is turned into a ManualEntry.

    Attributes
    ----------
    name : str
        Attribute path of the binding (may be dotted)
    comment : str
        Normalized doc comment
    args : list[Argument]
        Curried arguments when the bound value is a function
    """

    name: str
    comment: str
    args: list[Argument] = Field(default_factory=list)


def get_identifier(prefix: str, category: str, name: str) -> str:
    """Fully qualified identifier of a binding, e.g. ``lib.strings.concatStrings``.

    Empty prefix or category segments are left out.
    """
    name_prefix = f"{prefix}." if prefix else ""
    if not category:
        return f"{name_prefix}{name}"
    return f"{name_prefix}{category}.{name}"


class ManualEntry(BaseModel):
    """One documented binding, the unit of rendering.

    Attributes
    ----------
    prefix : str
        Identifier prefix (e.g. "lib")
    category : str
        Function category (e.g. "strings")
    location : str | None
        Source location from the location index, if known
    name : str
        Binding name
    description : list[str]
        Doc comment paragraphs, split on blank lines
    fn_type : str | None
        Type signature, if known
    example : str | None
        Example program listing, if known
    args : list[Argument]
        Curried arguments, outermost first
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    prefix: str
    category: str
    location: str | None = None
    name: str
    description: list[str]
    fn_type: str | None = None
    example: str | None = None
    args: list[Argument] = Field(default_factory=list)

    @property
    def identifier(self) -> str:
        return get_identifier(self.prefix, self.category, self.name)

    def anchor(self, anchor_prefix: str) -> str:
        """Anchor of the rendered section.

        Primes become ``-prime`` (``foldl'`` -> ``foldl-prime``) and any other
        character that is unsafe in an anchor becomes ``-``.
        """
        ident = self.identifier.replace("'", "-prime")
        return f"{anchor_prefix}{_ANCHOR_UNSAFE.sub('-', ident)}"


class ManualDocument(BaseModel):
    """Versioned record list written by the JSON output mode."""

    model_config = ConfigDict(extra="forbid")

    version: Literal[1] = RECORD_FORMAT_VERSION
    entries: list[ManualEntry] = Field(default_factory=list)
