"""Observability utilities for replayable body middleware.

This package provides:
- Prometheus metrics for buffering outcomes and body sizes
- Structured logging with contextual information
"""

from replayable_body.observability.logging import body_preview, configure_logging, get_logger
from replayable_body.observability.metrics import (
    record_buffered,
    record_failure,
    record_skipped,
)

__all__ = [
    "body_preview",
    "configure_logging",
    "get_logger",
    "record_buffered",
    "record_failure",
    "record_skipped",
]
