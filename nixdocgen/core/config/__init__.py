"""Configuration models and loader."""

from nixdocgen.core.config.loader import ConfigLoader, clear_config_cache, load_config
from nixdocgen.core.config.models import (
    DocgenConfig,
    LoggingConfig,
    OptionsDefaults,
    RenderDefaults,
)

__all__ = [
    "ConfigLoader",
    "DocgenConfig",
    "LoggingConfig",
    "OptionsDefaults",
    "RenderDefaults",
    "clear_config_cache",
    "load_config",
]
