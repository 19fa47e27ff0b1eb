"""Render NixOS-style module options to CommonMark.

The input is the JSON produced from ``lib.optionAttrSetToDocList``: either an
object keyed by option name or a list of option objects carrying a ``name``.
This renderer shares only heading shifting with the function documentation.
"""

import json
import re
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from nixdocgen.core.docs.format import shift_headings
from nixdocgen.core.exceptions import OptionsFileError
from nixdocgen.core.logging import get_logger

logger = get_logger(__name__)

# Option descriptions sit under a level 2 heading
OPTION_HEADING_SHIFT = 2

_ANCHOR_UNSAFE = re.compile(r"[^A-Za-z0-9._-]")


class OptionDeclaration(BaseModel):
    """A file declaring an option, optionally with an explicit URL."""

    name: str
    url: str | None = None


class OptionDoc(BaseModel):
    """Documentation of a single module option.

    Attributes
    ----------
    name : str
        Dotted option path, e.g. ``services.foo.enable``
    type : str
        Human readable option type
    description : str
        Markdown description
    default : Any
        Default value, plain JSON or a ``{"_type": ..., "text": ...}`` literal
    example : Any
        Example value in the same encoding as ``default``
    declarations : list[OptionDeclaration]
        Files declaring the option
    read_only : bool
        Whether the option is read-only
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: str
    type: str = ""
    description: str = ""
    default: Any = None
    example: Any = None
    declarations: list[OptionDeclaration] = Field(default_factory=list)
    read_only: bool = Field(default=False, alias="readOnly")
    visible: bool | str = True
    internal: bool = False

    @property
    def hidden(self) -> bool:
        return self.internal or self.visible is False

    @classmethod
    def from_raw(cls, name: str | None, raw: dict[str, Any]) -> "OptionDoc":
        data = dict(raw)
        if name is not None:
            data.setdefault("name", name)
        data["declarations"] = [
            {"name": d} if isinstance(d, str) else d for d in data.get("declarations") or []
        ]
        if data.get("default") is None and "defaultText" in data:
            data["default"] = data["defaultText"]
        return cls.model_validate(data)


class OptionsRenderOptions(BaseModel):
    """Rendering parameters for an options document."""

    anchor_prefix: str = "opt-"
    include_declarations: bool = True
    declarations_base_url: str | None = None
    revision: str | None = None


def parse_options_file(path: str | Path) -> list[OptionDoc]:
    """Load options from a JSON file.

    Raises
    ------
    OptionsFileError
        If the file cannot be read or does not describe options
    """
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as e:
        raise OptionsFileError(path, f"cannot be read: {e}") from e
    except json.JSONDecodeError as e:
        raise OptionsFileError(path, f"invalid JSON: {e}") from e

    try:
        return parse_options(data)
    except (ValueError, TypeError) as e:
        raise OptionsFileError(path, f"malformed options: {e}") from e


def parse_options(data: Any) -> list[OptionDoc]:
    """Build option docs from decoded JSON data, sorted by name.

    Raises
    ------
    TypeError
        If ``data`` is neither an object nor a list of objects
    """
    if isinstance(data, dict):
        options = [OptionDoc.from_raw(name, raw) for name, raw in data.items()]
    elif isinstance(data, list):
        options = [OptionDoc.from_raw(None, raw) for raw in data]
    else:
        raise TypeError(f"expected an object or a list, got {type(data).__name__}")
    return sorted(options, key=lambda option: option.name)


def option_anchor(name: str, anchor_prefix: str) -> str:
    """Anchor of an option section; ``<name>`` and ``*`` placeholders become ``_``."""
    return f"{anchor_prefix}{_ANCHOR_UNSAFE.sub('_', name)}"


def render_value(value: Any) -> str:
    """Render a default or example value.

    ``literalExpression`` values are Nix code (fenced when multi-line),
    ``literalMD`` values are Markdown, anything else is shown as JSON.
    """
    if isinstance(value, dict) and "_type" in value:
        text = str(value.get("text", ""))
        if value["_type"] == "literalMD":
            return text
        if "\n" in text:
            return f"\n\n```nix\n{text.rstrip()}\n```"
        return f"`{text}`"
    return f"`{json.dumps(value)}`"


def declaration_link(declaration: OptionDeclaration, options: OptionsRenderOptions) -> str:
    if declaration.url:
        return f"[`{declaration.name}`]({declaration.url})"
    if options.declarations_base_url:
        base = options.declarations_base_url.rstrip("/")
        revision = options.revision or "main"
        return f"[`{declaration.name}`]({base}/blob/{revision}/{declaration.name.lstrip('/')})"
    return f"`{declaration.name}`"


def render_option(option: OptionDoc, options: OptionsRenderOptions) -> str:
    """Render a single option as a level 2 section."""
    lines = [f"## `{option.name}` {{#{option_anchor(option.name, options.anchor_prefix)}}}", ""]

    if option.description.strip():
        lines += [shift_headings(option.description.strip(), OPTION_HEADING_SHIFT), ""]
    if option.type:
        lines += [f"*Type:* {option.type}", ""]
    if option.default is not None:
        lines += [f"*Default:* {render_value(option.default)}", ""]
    if option.example is not None:
        lines += [f"*Example:* {render_value(option.example)}", ""]
    if option.read_only:
        lines += ["*Read only*", ""]
    if options.include_declarations and option.declarations:
        lines += ["*Declared by:*", ""]
        lines += [f"- {declaration_link(d, options)}" for d in option.declarations]
        lines.append("")

    return "\n".join(lines) + "\n"


def render_options_document(
    options_list: list[OptionDoc],
    title: str = "Module Options",
    preamble: str | None = None,
    render_options: OptionsRenderOptions | None = None,
) -> str:
    """Render all visible options under a level 1 title.

    Internal options and options with ``visible = false`` are skipped.
    """
    render_options = render_options or OptionsRenderOptions()
    sections = [f"# {title}", ""]
    if preamble:
        sections += [preamble.strip(), ""]

    visible = [option for option in options_list if not option.hidden]
    logger.debug(
        "Rendering {count} option(s), {hidden} hidden",
        count=len(visible),
        hidden=len(options_list) - len(visible),
    )
    for option in visible:
        sections.append(render_option(option, render_options))

    return "\n".join(sections)
