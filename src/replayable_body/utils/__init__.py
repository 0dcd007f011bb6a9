"""Utility modules for replayable body middleware."""

from .headers import TRACE_HEADERS, environ_headers, extract_trace_id
from .state import get_replayable_body

__all__ = [
    "TRACE_HEADERS",
    "environ_headers",
    "extract_trace_id",
    "get_replayable_body",
]
