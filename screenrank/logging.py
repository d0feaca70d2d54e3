"""Structured logging for ScreenRank.

ScreenRank runs inside a host application, so its events go to stderr
unless a stream is given, and every event is tagged with
``component="screenrank"``. Output is JSON lines by default, or colored
console lines for local development.

Modules obtain their logger through ``get_logger(__name__)``; long-lived
objects bind their own context once, e.g. ``get_logger(__name__, category="movie")``.
"""

import logging
import sys
from typing import Any, TextIO

import structlog
from structlog.processors import (
    JSONRenderer,
    StackInfoRenderer,
    TimeStamper,
    add_log_level,
    format_exc_info,
)

COMPONENT = "screenrank"


def add_component(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """Processor tagging each event with the library name."""
    event_dict.setdefault("component", COMPONENT)
    return event_dict


def configure_logging(
    console: bool = False,
    log_level: str = "INFO",
    stream: TextIO | None = None
) -> None:
    """Configure structlog for ScreenRank events.

    Args:
        console: Render colored console lines instead of JSON lines
        log_level: Minimum level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        stream: Where to write events (sys.stderr if None)
    """
    processors = [
        add_component,
        add_log_level,
        TimeStamper(fmt="iso"),
        StackInfoRenderer(),
        format_exc_info,
    ]

    if console:
        from structlog.dev import ConsoleRenderer
        processors.append(ConsoleRenderer(colors=True))
    else:
        processors.append(JSONRenderer(sort_keys=True))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, log_level.upper(), logging.INFO)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream or sys.stderr),
        # The host may reconfigure at any time
        cache_logger_on_first_use=False,
    )


def get_logger(name: str | None = None, **context: Any) -> structlog.BoundLogger:
    """Logger for ``name`` with ``context`` bound to every event."""
    if name:
        return structlog.get_logger(name, **context)
    return structlog.get_logger(**context)
