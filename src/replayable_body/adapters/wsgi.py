"""WSGI adapter for Flask, Django and other WSGI applications.

The middleware drains ``wsgi.input`` once, publishes the buffered body in
the environ, and gives the application a fresh replay view as its
``wsgi.input``. Any later consumer that needs the body again asks the
published ReplayableBody for a new stream.

Examples:
    Wrapping a Flask application::

        from replayable_body.adapters.wsgi import WSGIReplayableBodyMiddleware

        app.wsgi_app = WSGIReplayableBodyMiddleware(app.wsgi_app)

    Reading the body again inside a view::

        from replayable_body.utils import get_replayable_body

        body = get_replayable_body(request.environ)
        raw = body.get_body_stream().read()
"""

from collections.abc import Callable, Iterable
from typing import Any

from replayable_body.config import ReplayableBodyConfig
from replayable_body.core.body import ReplayableBody
from replayable_body.exceptions import BufferingError
from replayable_body.observability.logging import body_preview, get_logger
from replayable_body.observability.metrics import (
    record_buffered,
    record_failure,
    record_skipped,
)
from replayable_body.utils.headers import environ_headers, extract_trace_id

logger = get_logger(__name__)

StartResponse = Callable[..., Any]
WSGIApp = Callable[[dict[str, Any], StartResponse], Iterable[bytes]]


class WSGIReplayableBodyMiddleware:
    """WSGI middleware that buffers request bodies once for replay.

    Attributes:
        app: The wrapped WSGI application
        config: Configuration object
    """

    def __init__(self, app: WSGIApp, config: ReplayableBodyConfig | None = None) -> None:
        self.app = app
        self.config = config or ReplayableBodyConfig()

    def __call__(self, environ: dict[str, Any], start_response: StartResponse) -> Iterable[bytes]:
        method = environ.get("REQUEST_METHOD", "GET")
        if not self.config.buffers_method(method):
            record_skipped()
            return self.app(environ, start_response)

        log = logger.bind(
            method=method,
            path=environ.get("PATH_INFO", ""),
            trace_id=extract_trace_id(environ_headers(environ)),
        )

        try:
            body = ReplayableBody(environ)
        except BufferingError as e:
            record_failure()
            log.warning("body.buffering_failed", error=e.message, exc_info=e)
            payload = f"Unable to read request body: {e.message}".encode()
            start_response(
                "400 Bad Request",
                [
                    ("Content-Type", "text/plain; charset=utf-8"),
                    ("Content-Length", str(len(payload))),
                ],
            )
            return [payload]

        record_buffered(len(body))
        if self.config.log_bodies:
            log.debug("body.buffered", length=len(body), preview=body_preview(body.cached_body))
        else:
            log.debug("body.buffered", length=len(body))

        environ[self.config.state_key] = body
        environ["wsgi.input"] = body.get_body_stream()
        environ["CONTENT_LENGTH"] = str(len(body))
        return self.app(environ, start_response)
