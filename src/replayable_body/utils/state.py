"""Lookup of a buffered body published by one of the adapters."""

from collections.abc import Mapping
from typing import Any

from replayable_body.core.body import ReplayableBody

DEFAULT_STATE_KEY = "replayable_body"


def get_replayable_body(
    carrier: Any,
    state_key: str = DEFAULT_STATE_KEY,
) -> ReplayableBody | None:
    """Find the ReplayableBody stored for a request.

    Args:
        carrier: A Starlette request (anything with a ``scope``), an ASGI
            scope, or a WSGI environ
        state_key: Key the adapter was configured to publish under

    Returns:
        The buffered body, or None if the request was not buffered

    Examples:
        >>> get_replayable_body({"type": "http", "state": {}}) is None
        True
    """
    scope = getattr(carrier, "scope", carrier)
    if not isinstance(scope, Mapping):
        return None

    if "wsgi.input" in scope:
        found = scope.get(state_key)
    else:
        state = scope.get("state")
        found = state.get(state_key) if isinstance(state, Mapping) else None

    return found if isinstance(found, ReplayableBody) else None
