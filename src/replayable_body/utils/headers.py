"""Header helpers shared by the framework adapters.

This module provides functions for:
- Reading request headers out of a WSGI environ
- Extracting a distributed tracing ID for log context
"""

from collections.abc import Mapping
from typing import Any

# Headers checked, in order, for a tracing ID
TRACE_HEADERS = (
    "x-trace-id",
    "x-request-id",
    "x-correlation-id",
    "traceparent",
)


def environ_headers(environ: Mapping[str, Any]) -> dict[str, str]:
    """Collect request headers from a WSGI environ.

    Header names are lowercased and use dashes, so ``HTTP_X_TRACE_ID``
    becomes ``x-trace-id``. CONTENT_TYPE and CONTENT_LENGTH are included
    since WSGI stores them without the HTTP_ prefix.

    Example:
        >>> environ_headers({"HTTP_X_REQUEST_ID": "abc", "CONTENT_TYPE": "text/plain"})
        {'x-request-id': 'abc', 'content-type': 'text/plain'}
    """
    headers: dict[str, str] = {}
    for key, value in environ.items():
        if key.startswith("HTTP_"):
            headers[key[5:].replace("_", "-").lower()] = value
        elif key in ("CONTENT_TYPE", "CONTENT_LENGTH") and value:
            headers[key.replace("_", "-").lower()] = value
    return headers


def extract_trace_id(headers: Mapping[str, str]) -> str | None:
    """Extract a distributed tracing ID from request headers.

    Args:
        headers: Request headers with lowercase names, or a case-insensitive
            mapping such as starlette.datastructures.Headers

    Returns:
        Trace ID if found, None otherwise
    """
    for header in TRACE_HEADERS:
        value = headers.get(header)
        if value:
            return value

    return None
