"""Configuration loader for nixdocgen.

Configuration sources, in discovery order:

1. An explicit path (``.yaml``/``.yml`` or ``.toml``).
2. The ``NIXDOCGEN_CONFIG_PATH`` environment variable.
3. ``pyproject.toml`` with a ``[tool.nixdocgen]`` table in the working
   directory or one of its parents.

When nothing is found the defaults are used. Command line options always
take precedence over configured values.
"""

from __future__ import annotations

import os
import re
import tomllib
from dataclasses import fields
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml

from nixdocgen.core.config.models import (
    DocgenConfig,
    LoggingConfig,
    OptionsDefaults,
    RenderDefaults,
)
from nixdocgen.core.exceptions import ConfigurationError
from nixdocgen.core.logging import get_logger

_TRUTHY_VALUES = frozenset({"true", "1", "yes", "on", "enabled"})
_FALSY_VALUES = frozenset({"false", "0", "no", "off", "disabled"})

logger = get_logger(__name__)


def _parse_bool_env(value: str) -> bool:
    """Parse boolean from environment variable value.

    Parameters
    ----------
    value : str
        Environment variable value

    Returns
    -------
    bool
        Parsed boolean value

    Raises
    ------
    ValueError
        If value is not a recognized boolean string
    """
    normalized = value.lower().strip()
    if normalized in _TRUTHY_VALUES:
        return True
    if normalized in _FALSY_VALUES:
        return False
    expected = sorted(_TRUTHY_VALUES | _FALSY_VALUES)
    raise ValueError(f"Invalid boolean value: {value!r}. Expected one of: {expected}")


@lru_cache(maxsize=32)
def _load_and_parse_cached(path_str: str) -> DocgenConfig:
    """Cached configuration loader."""
    return ConfigLoader()._load_and_parse(Path(path_str))


class ConfigLoader:
    """Loads nixdocgen configuration from YAML or TOML files."""

    ENV_VAR_PATTERN = re.compile(r"\$\{([^}]+)\}")

    def load_config_file(self, path: str | Path | None = None) -> DocgenConfig:
        """Load configuration from a discovered or explicit file.

        Parameters
        ----------
        path : str | Path | None
            Path to config file. If None, searches using discovery order.

        Returns
        -------
        DocgenConfig
            Parsed configuration with environment variables substituted

        Raises
        ------
        FileNotFoundError
            If no configuration file is found
        """
        config_path = self._find_config_file(path)
        return _load_and_parse_cached(str(config_path.absolute()))

    def _load_and_parse(self, config_path: Path) -> DocgenConfig:
        logger.debug("Loading configuration from {path}", path=config_path)

        try:
            if config_path.suffix in (".yaml", ".yml"):
                with config_path.open("r", encoding="utf-8") as f:
                    data = yaml.safe_load(f) or {}
            else:
                with config_path.open("rb") as f:
                    raw = tomllib.load(f)
                if config_path.name == "pyproject.toml" or "nixdocgen" in raw.get("tool", {}):
                    data = raw.get("tool", {}).get("nixdocgen", {})
                else:
                    # Standalone TOML file holds the settings at top level
                    data = raw
        except (OSError, yaml.YAMLError, tomllib.TOMLDecodeError) as e:
            raise ConfigurationError(str(config_path), f"cannot be loaded: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(
                str(config_path), f"expected a mapping, got {type(data).__name__}"
            )

        return self._parse_config(self._substitute_env_vars(data))

    def _find_config_file(self, path: str | Path | None) -> Path:
        """Find the configuration file.

        Raises
        ------
        FileNotFoundError
            If an explicit path does not exist or nothing is discovered
        """
        if path:
            config_path = Path(path)
            if not config_path.exists():
                raise FileNotFoundError(f"Configuration file not found: {config_path}")
            return config_path

        if env_path := os.getenv("NIXDOCGEN_CONFIG_PATH"):
            config_path = Path(env_path)
            if config_path.exists():
                logger.debug("Using config from NIXDOCGEN_CONFIG_PATH: {}", config_path)
                return config_path
            logger.warning("NIXDOCGEN_CONFIG_PATH set but file not found: {}", config_path)

        current = Path.cwd()
        while True:
            pyproject = current / "pyproject.toml"
            if pyproject.exists():
                with pyproject.open("rb") as f:
                    data = tomllib.load(f)
                if "nixdocgen" in data.get("tool", {}):
                    return pyproject
            if current == current.parent:
                break
            current = current.parent

        raise FileNotFoundError(
            "No configuration file found. Pass --config, set NIXDOCGEN_CONFIG_PATH, "
            "or add [tool.nixdocgen] to pyproject.toml"
        )

    def _substitute_env_vars(self, data: Any) -> Any:
        """Recursively replace ``${VAR}`` placeholders with environment values.

        Unknown variables keep their placeholder.
        """
        if isinstance(data, str):

            def replacer(match: re.Match[str]) -> str:
                value = os.environ.get(match.group(1))
                if value is None:
                    logger.debug(
                        "Environment variable {} not set, keeping placeholder", match.group(1)
                    )
                    return match.group(0)
                return value

            return self.ENV_VAR_PATTERN.sub(replacer, data)

        if isinstance(data, dict):
            return {key: self._substitute_env_vars(value) for key, value in data.items()}

        if isinstance(data, list):
            return [self._substitute_env_vars(item) for item in data]

        return data

    def _parse_config(self, data: dict[str, Any]) -> DocgenConfig:
        """Parse format-agnostic configuration data into DocgenConfig."""
        config = DocgenConfig()
        config.render = _build_section(RenderDefaults, data.get("render", {}), "render")
        config.options = _build_section(OptionsDefaults, data.get("options", {}), "options")
        config.logging = self._parse_logging_config(data.get("logging", {}))
        if locations := data.get("locations"):
            config.locations = str(locations)
        return config

    def _parse_logging_config(self, logging_data: dict[str, Any]) -> LoggingConfig:
        """Parse logging configuration with environment variable overrides.

        Environment variables take precedence over config file values:
        - NIXDOCGEN_LOG_LEVEL: Log level
        - NIXDOCGEN_LOG_FORMAT: Output format (console, json, structured, rich)
        - NIXDOCGEN_LOG_FILE: Optional file path for JSON log output
        - NIXDOCGEN_LOG_COLOR: Use color output (true/false)
        - NIXDOCGEN_LOG_TIMESTAMP: Include timestamp (true/false)
        """
        values = dict(logging_data)

        if env_level := os.getenv("NIXDOCGEN_LOG_LEVEL"):
            values["level"] = env_level
        if env_format := os.getenv("NIXDOCGEN_LOG_FORMAT"):
            values["format"] = env_format.lower()
        if env_file := os.getenv("NIXDOCGEN_LOG_FILE"):
            values["output_file"] = env_file

        for key, env_name in (
            ("use_color", "NIXDOCGEN_LOG_COLOR"),
            ("include_timestamp", "NIXDOCGEN_LOG_TIMESTAMP"),
        ):
            if env_value := os.getenv(env_name):
                try:
                    values[key] = _parse_bool_env(env_value)
                except ValueError as e:
                    logger.warning("Invalid {} value: {}", env_name, e)

        if "level" in values:
            values["level"] = str(values["level"]).upper()

        return _build_section(LoggingConfig, values, "logging")


def _build_section(cls: type, data: Any, section: str) -> Any:
    """Instantiate a config dataclass, rejecting unknown keys."""
    if not isinstance(data, dict):
        raise ConfigurationError(section, f"expected a table, got {type(data).__name__}")
    known = {f.name for f in fields(cls)}
    if unknown := sorted(set(data) - known):
        raise ConfigurationError(section, f"unknown keys: {', '.join(unknown)}")
    return cls(**data)


def load_config(path: str | Path | None = None) -> DocgenConfig:
    """Load configuration from file or return defaults.

    Parameters
    ----------
    path : str | Path | None
        Path to configuration file or None to search

    Returns
    -------
    DocgenConfig
        Loaded configuration or defaults if no file was found

    Raises
    ------
    FileNotFoundError
        If an explicit ``path`` does not exist
    """
    loader = ConfigLoader()
    try:
        return loader.load_config_file(path)
    except FileNotFoundError:
        if path:
            raise
        logger.debug("No configuration file found, using defaults")
        return DocgenConfig(logging=loader._parse_logging_config({}))


def clear_config_cache() -> None:
    """Clear cached configurations, e.g. after a config file changed."""
    _load_and_parse_cached.cache_clear()
