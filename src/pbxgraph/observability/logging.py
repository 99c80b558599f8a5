"""Structured logging setup for the ``pbxgraph`` command line.

Library modules log through ``structlog.get_logger(__name__)`` and never
configure logging themselves; :func:`configure_logging` is called once by the
CLI to select the level and the console or JSON-lines renderer.
"""

from __future__ import annotations

import logging
import sys
from typing import IO, Final

import structlog
from structlog.types import Processor

_DEFAULT_LEVEL: Final[str] = "WARNING"


def configure_logging(
    level: int | str = _DEFAULT_LEVEL,
    *,
    json_output: bool = False,
    stream: IO[str] | None = None,
) -> None:
    """Route structlog events at ``level`` and above to ``stream`` (stderr)."""

    numeric_level = _parse_log_level(level)
    renderer: Processor
    if json_output:
        renderer = structlog.processors.JSONRenderer(sort_keys=True)
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        logger_factory=structlog.PrintLoggerFactory(file=stream or sys.stderr),
        cache_logger_on_first_use=False,
    )


def reset_logging() -> None:
    """Restore structlog's defaults."""

    structlog.reset_defaults()


def _parse_log_level(value: int | str) -> int:
    if isinstance(value, int):
        return value

    if not isinstance(value, str):
        raise ValueError(f"level must be int or str, got {type(value).__name__}")

    normalized = value.strip().upper()
    parsed = logging.getLevelName(normalized)
    if isinstance(parsed, int):
        return parsed

    raise ValueError(f"unsupported logging level {value!r}")


__all__ = ["configure_logging", "reset_logging"]
