"""Structured logging configuration for replayable body middleware.

This module provides structured logging using structlog to emit
JSON-formatted logs with contextual information. The adapters log
buffering outcomes with:
- HTTP method and path
- Trace IDs
- Buffered body length
- Failure causes

Body content is never logged unless explicitly enabled through
ReplayableBodyConfig.log_bodies.

Examples:
    Configure logging::

        from replayable_body.observability.logging import configure_logging

        configure_logging(level="INFO", json_output=True)

    Use the logger::

        from replayable_body.observability.logging import get_logger

        logger = get_logger(__name__)
        logger.debug("body.buffered", method="POST", length=128)

    Output (JSON)::

        {
            "event": "body.buffered",
            "method": "POST",
            "length": 128,
            "timestamp": "2024-01-01T00:00:00.000000Z",
            "level": "debug"
        }
"""

import logging
import sys
from typing import Any

import structlog

# Longest body preview emitted when body logging is enabled
MAX_PREVIEW_BYTES = 256


def configure_logging(
    level: str = "INFO",
    json_output: bool = True,
) -> None:
    """Configure structured logging for the application.

    This should be called once at application startup.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_output: If True, emit JSON logs; if False, use console format
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level.upper()),
    )

    processors: list[object] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
    ]

    if json_output:
        # ConsoleRenderer formats exc_info itself
        processors.append(structlog.processors.format_exc_info)
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,  # type: ignore[arg-type]
        wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, level.upper())),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> Any:
    """Get a structured logger instance.

    Args:
        name: Logger name (typically __name__ from the calling module)

    Returns:
        A structlog logger instance
    """
    return structlog.get_logger(name)


def body_preview(body: bytes, limit: int = MAX_PREVIEW_BYTES) -> str:
    """Render the start of a body for debug logs.

    Undecodable bytes are replaced rather than raising, since this is
    diagnostic output only.

    Examples:
        >>> body_preview(b"hello")
        'hello'
        >>> body_preview(b"a" * 300, limit=4)
        'aaaa...'
    """
    preview = body[:limit].decode("utf-8", errors="replace")
    if len(body) > limit:
        preview += "..."
    return preview
