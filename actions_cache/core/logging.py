"""Structured logging configuration.

Features:
- JSON-formatted log output for production/staging
- Human-readable format for development
- Library name and environment attached to every event

The cache core only calls ``get_logger``; configuring output is left to the
application (the CLI calls ``configure_logging`` on startup).
"""

import logging
import sys
from typing import Any

import structlog
from structlog.types import Processor

from actions_cache.core.config import get_settings


LIBRARY_NAME = "actions-cache"


def add_library_context(
    logger: logging.Logger,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Add the library name to all log entries.

    The client label is bound by each client from its own configuration.

    Args:
        logger: The wrapped logger object.
        method_name: The name of the method called on the logger.
        event_dict: The event dictionary to process.

    Returns:
        Updated event dictionary with the library name.
    """
    event_dict["library"] = LIBRARY_NAME
    return event_dict


def configure_logging() -> None:
    """Configure structured logging for the application.

    In development: Human-readable colored output
    In production: JSON-formatted structured logs
    """
    settings = get_settings()

    use_json = settings.environment in ("production", "staging")
    level = logging.getLevelName(settings.log_level.upper())
    structlog.contextvars.bind_contextvars(environment=settings.environment)

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        add_library_context,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if use_json:
        processors: list[Processor] = [
            *shared_processors,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = [
            *shared_processors,
            structlog.dev.ConsoleRenderer(colors=True),
        ]

    # Logs go to stderr so CLI output on stdout stays clean for piping.
    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=level,
    )

    # Reduce noise from the transport layer
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    """Get a structured logger instance.

    Args:
        name: Optional logger name (module name recommended).

    Returns:
        Configured structlog BoundLogger instance.

    Example:
        ```python
        from actions_cache.core.logging import get_logger

        logger = get_logger(__name__)
        logger.debug("Cache lookup", key_space=key_space, prefixes=prefixes)
        ```
    """
    return structlog.get_logger(name)


# Convenience type alias
Logger = structlog.BoundLogger
