"""Configuration data models for nixdocgen."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from nixdocgen.core.exceptions import ConfigurationError

_LEVELS = ("TRACE", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
_FORMATS = ("console", "json", "structured", "rich")


@dataclass(frozen=True, slots=True)
class LoggingConfig:
    """Logging configuration.

    Attributes
    ----------
    level : str, default="WARNING"
        Log level (TRACE, DEBUG, INFO, WARNING, ERROR, CRITICAL)
    format : str, default="structured"
        Output format (console, json, structured, rich)
    output_file : str | None, default=None
        Optional file path to write JSON log records to
    use_color : bool, default=True
        Use ANSI color codes (auto-disabled for non-TTY)
    include_timestamp : bool, default=False
        Include timestamp in log output

    Examples
    --------
    TOML configuration:

    ```toml
    [tool.nixdocgen.logging]
    level = "DEBUG"
    format = "rich"
    ```

    Environment variable overrides:

    ```bash
    export NIXDOCGEN_LOG_LEVEL=DEBUG
    export NIXDOCGEN_LOG_FORMAT=json
    export NIXDOCGEN_LOG_FILE=/tmp/nixdocgen.log
    ```
    """

    level: Literal["TRACE", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"
    format: Literal["console", "json", "structured", "rich"] = "structured"
    output_file: str | None = None
    use_color: bool = True
    include_timestamp: bool = False

    def __post_init__(self) -> None:
        """Validate level and format.

        Raises
        ------
        ConfigurationError
            If level or format is not a known value
        """
        if self.level not in _LEVELS:
            raise ConfigurationError("logging.level", f"unknown level {self.level!r}")
        if self.format not in _FORMATS:
            raise ConfigurationError("logging.format", f"unknown format {self.format!r}")


@dataclass(frozen=True, slots=True)
class RenderDefaults:
    """Default rendering parameters for the ``functions`` command.

    Attributes
    ----------
    prefix : str
        Prefix of every documented identifier (e.g. "lib")
    anchor_prefix : str
        Prefix prepended to every generated anchor
    category : str
        Function category (e.g. "strings")
    description : str
        Human readable title of the category
    """

    prefix: str = "lib"
    anchor_prefix: str = "function-library-"
    category: str = ""
    description: str = ""


@dataclass(frozen=True, slots=True)
class OptionsDefaults:
    """Default parameters for the ``options`` command."""

    title: str = "Module Options"
    anchor_prefix: str = "opt-"
    include_declarations: bool = True
    declarations_base_url: str | None = None
    revision: str | None = None


@dataclass(slots=True)
class DocgenConfig:
    """Complete nixdocgen configuration.

    Attributes
    ----------
    render : RenderDefaults
        Defaults for function library rendering
    options : OptionsDefaults
        Defaults for options document rendering
    logging : LoggingConfig
        Logging configuration
    locations : str | None
        Default path of the location index JSON file

    Examples
    --------
    TOML configuration in pyproject.toml:

    ```toml
    [tool.nixdocgen]
    locations = "locations.json"

    [tool.nixdocgen.render]
    prefix = "lib"
    anchor_prefix = "function-library-"

    [tool.nixdocgen.options]
    declarations_base_url = "https://github.com/owner/repo"
    revision = "main"
    ```
    """

    render: RenderDefaults = field(default_factory=RenderDefaults)
    options: OptionsDefaults = field(default_factory=OptionsDefaults)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    locations: str | None = None
