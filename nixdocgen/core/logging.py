"""Centralized logging configuration for nixdocgen using Loguru.

All diagnostics go to stderr so that rendered documents written to stdout
are never interleaved with log lines.

Examples
--------
Basic usage:

>>> from nixdocgen.core.logging import get_logger
>>> logger = get_logger(__name__)
>>> logger.debug("Found attribute set", entries=3)

Configure logging globally::

    from nixdocgen.core.logging import configure_logging
    configure_logging(level="DEBUG", format="rich")
"""

import contextvars
import os
import sys
from contextlib import suppress
from functools import lru_cache
from pathlib import Path
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from loguru import Logger

from loguru import logger
from rich.console import Console
from rich.logging import RichHandler

LogLevel = Literal["TRACE", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
LogFormat = Literal["console", "json", "structured", "rich"]

_CURRENT_CONFIG: dict | None = None
_HANDLER_IDS: list[int] = []

# Source file currently being documented, attached to every record
current_source: contextvars.ContextVar[str] = contextvars.ContextVar("current_source", default="-")


def _patch_record(record: dict) -> None:
    record["extra"].setdefault("source", current_source.get())


def _stderr_sink(message: str) -> None:
    # Resolved per write so redirected or captured stderr streams are honored
    sys.stderr.write(message)


def configure_logging(
    level: LogLevel = "WARNING",
    format: LogFormat = "structured",
    output_file: str | Path | None = None,
    use_color: bool = True,
    include_timestamp: bool = False,
    force_reconfigure: bool = False,
    backtrace: bool = False,
    diagnose: bool = False,
) -> None:
    """Configure global logging for nixdocgen.

    Calling it again with an identical configuration is a no-op.

    Parameters
    ----------
    level : LogLevel, default="WARNING"
        Minimum log level to output
    format : LogFormat, default="structured"
        Output format:
        - "console": plain single-line records
        - "json": serialized records for machine consumption
        - "structured": colored Loguru format including the source file
        - "rich": Rich console handler
    output_file : str | Path | None, default=None
        Optional file to write JSON records to, in addition to stderr
    use_color : bool, default=True
        Use ANSI colors in structured format (auto-disabled for non-TTY)
    include_timestamp : bool, default=False
        Include timestamp in log output
    force_reconfigure : bool, default=False
        Reconfigure even if the configuration did not change
    backtrace : bool, default=False
        Extended backtraces on logged exceptions
    diagnose : bool, default=False
        Show variable values in logged tracebacks
    """
    global _CURRENT_CONFIG

    current_config = {
        "level": level,
        "format": format,
        "output_file": str(output_file) if output_file else None,
        "use_color": use_color,
        "include_timestamp": include_timestamp,
        "backtrace": backtrace,
        "diagnose": diagnose,
    }

    if not force_reconfigure and current_config == _CURRENT_CONFIG:
        return

    # Remove only our previously added handlers so pytest's capture keeps working
    for handler_id in _HANDLER_IDS:
        with suppress(ValueError):
            logger.remove(handler_id)
    _HANDLER_IDS.clear()

    # Loguru installs a default stderr handler (id 0) on import
    with suppress(ValueError):
        logger.remove(0)

    logger.configure(patcher=_patch_record)

    common = {"level": level, "backtrace": backtrace, "diagnose": diagnose}
    stamp = "{time:YYYY-MM-DD HH:mm:ss} " if include_timestamp else ""

    match format:
        case "rich":
            sink = RichHandler(
                console=Console(stderr=True),
                rich_tracebacks=True,
                markup=False,
                show_time=include_timestamp,
                show_path=False,
            )
            _HANDLER_IDS.append(
                logger.add(sink, format="{extra[source]} | {message}", **common)
            )
        case "json":
            _HANDLER_IDS.append(logger.add(_stderr_sink, serialize=True, **common))
        case "structured":
            colorize = use_color and sys.stderr.isatty()
            level_fmt = "<level>{level: <8}</level>" if colorize else "{level: <8}"
            line_fmt = (
                f"<green>{stamp}</green>[{level_fmt}]"
                "<cyan>{extra[source]}</cyan> {name}:{line} | <level>{message}</level>"
            )
            _HANDLER_IDS.append(
                logger.add(_stderr_sink, format=line_fmt, colorize=colorize, **common)
            )
        case _:
            line_fmt = f"{stamp}{{level: <8}} | {{extra[source]}} | {{message}}"
            _HANDLER_IDS.append(logger.add(_stderr_sink, format=line_fmt, colorize=False, **common))

    if output_file:
        log_path = Path(output_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        _HANDLER_IDS.append(logger.add(log_path, serialize=True, **common))

    _CURRENT_CONFIG = current_config


@lru_cache(maxsize=64)
def get_logger(name: str) -> "Logger":
    """Get a logger bound to the given module name (cached).

    Parameters
    ----------
    name : str
        Logger name, typically ``__name__`` of the calling module

    Returns
    -------
    loguru.Logger
        Logger instance bound with the module name

    Notes
    -----
    If configure_logging() has not been called yet, it is initialized from
    ``NIXDOCGEN_LOG_LEVEL`` and ``NIXDOCGEN_LOG_FORMAT``.
    """
    _ensure_configured()
    return logger.bind(module=name)


def set_current_source(path: str | Path) -> None:
    """Mark ``path`` as the file being documented in subsequent log records."""
    current_source.set(str(path))


def get_current_source() -> str:
    """Return the file currently being documented, or ``"-"``.

    Examples
    --------
    >>> from nixdocgen.core.logging import get_current_source, set_current_source
    >>> set_current_source("lib/strings.nix")
    >>> get_current_source()
    'lib/strings.nix'
    """
    return current_source.get()


def _ensure_configured() -> None:
    """Apply environment-based defaults when logging was never configured."""
    if _CURRENT_CONFIG is None:
        level = os.getenv("NIXDOCGEN_LOG_LEVEL", "WARNING").upper()
        format_type = os.getenv("NIXDOCGEN_LOG_FORMAT", "structured").lower()
        configure_logging(level=level, format=format_type)  # type: ignore[arg-type]
