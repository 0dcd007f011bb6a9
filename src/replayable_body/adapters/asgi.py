"""ASGI adapter for FastAPI and Starlette applications.

This module installs a ReplayableBody at the ASGI boundary and offers a
request wrapper that reads the buffered body instead of the one-shot
receive channel.

The middleware:
1. Skips non-HTTP scopes and methods that are not configured for buffering
2. Drains the receive channel into a ReplayableBody
3. Publishes the body in the scope state under the configured key
4. Calls the app with a receive channel that replays the body

Examples:
    FastAPI integration::

        from fastapi import Depends, FastAPI
        from replayable_body.adapters.asgi import (
            ReplayableBodyMiddleware,
            ReplayableRequest,
            replayable_request,
        )

        app = FastAPI()
        app.add_middleware(ReplayableBodyMiddleware)

        @app.post("/webhooks")
        async def webhook(request: ReplayableRequest = Depends(replayable_request)):
            verify_signature(await request.body(), request.headers["x-signature"])
            return await request.json()

    Starlette integration::

        from starlette.applications import Starlette
        from starlette.middleware import Middleware

        middleware = [
            Middleware(
                ReplayableBodyMiddleware,
                config=ReplayableBodyConfig(enabled_methods=["POST"]),
            )
        ]

        app = Starlette(middleware=middleware)
"""

import json
from collections.abc import AsyncGenerator, Iterator
from typing import Any

from starlette.datastructures import Headers
from starlette.requests import Request as StarletteRequest
from starlette.responses import PlainTextResponse
from starlette.types import ASGIApp, Receive, Scope, Send

from replayable_body.config import ReplayableBodyConfig
from replayable_body.core.body import ReplayableBody
from replayable_body.core.view import ReplayTextReader, ReplayView
from replayable_body.exceptions import BufferingError
from replayable_body.observability.logging import body_preview, get_logger
from replayable_body.observability.metrics import (
    record_buffered,
    record_failure,
    record_skipped,
)
from replayable_body.utils.headers import extract_trace_id
from replayable_body.utils.state import get_replayable_body

logger = get_logger(__name__)


class ReplayableBodyMiddleware:
    """ASGI middleware that buffers request bodies once for replay.

    Attributes:
        app: The wrapped ASGI application
        config: Configuration object
    """

    def __init__(self, app: ASGIApp, config: ReplayableBodyConfig | None = None) -> None:
        """Initialize the ASGI middleware.

        Args:
            app: The ASGI application
            config: Configuration object (uses defaults if not provided)
        """
        self.app = app
        self.config = config or ReplayableBodyConfig()

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        if not self.config.buffers_method(scope.get("method", "GET")):
            record_skipped()
            await self.app(scope, receive, send)
            return

        log = logger.bind(
            method=scope.get("method"),
            path=scope.get("path", ""),
            trace_id=extract_trace_id(Headers(scope=scope)),
        )

        try:
            body = await ReplayableBody.from_receive(receive)
        except BufferingError as e:
            record_failure()
            log.warning("body.buffering_failed", error=e.message, exc_info=e)
            response = PlainTextResponse(
                f"Unable to read request body: {e.message}",
                status_code=400,
            )
            await response(scope, receive, send)
            return

        record_buffered(len(body))
        if self.config.log_bodies:
            log.debug("body.buffered", length=len(body), preview=body_preview(body.cached_body))
        else:
            log.debug("body.buffered", length=len(body))

        scope.setdefault("state", {})[self.config.state_key] = body
        await self.app(scope, body.asgi_receive(receive), send)


class ReplayableRequest:
    """A Starlette request whose body can be read any number of times.

    Wraps the original request by composition. Only the body access paths
    are intercepted; every other attribute (headers, method, url,
    query_params, cookies, state, ...) is forwarded to the wrapped request
    unchanged, so this can be passed anywhere a Request is read from.

    Attributes:
        request: The wrapped Starlette request
        replayable_body: The buffered body
    """

    def __init__(
        self,
        request: StarletteRequest,
        body: ReplayableBody,
        config: ReplayableBodyConfig | None = None,
    ) -> None:
        self.request = request
        self.replayable_body = body
        self.config = config or ReplayableBodyConfig()

    @classmethod
    async def wrap(
        cls,
        request: StarletteRequest,
        config: ReplayableBodyConfig | None = None,
    ) -> "ReplayableRequest":
        """Wrap a request, buffering its body if no adapter has done so yet.

        The body published by ReplayableBodyMiddleware is reused when
        present. Otherwise it is read through ``request.body()``, which
        Starlette caches on the request, so a framework that parsed the
        body first (FastAPI body parameters) does not leave the receive
        channel drained.

        Raises:
            BufferingError: If the body has to be read and that fails.
        """
        config = config or ReplayableBodyConfig()
        body = get_replayable_body(request, config.state_key)
        if body is None:
            try:
                data = await request.body()
            except Exception as e:
                raise BufferingError(f"Failed to buffer request body: {e!r}", cause=e) from e
            body = ReplayableBody.from_bytes(data)
            request.scope.setdefault("state", {})[config.state_key] = body
        return cls(request, body, config)

    @property
    def receive(self) -> Receive:
        """A fresh receive channel replaying the body from the start."""
        return self.replayable_body.asgi_receive(self.request.receive)

    async def body(self) -> bytes:
        return self.replayable_body.cached_body

    async def stream(self) -> AsyncGenerator[bytes, None]:
        async for chunk in self.replayable_body.iter_chunks(self.config.chunk_size):
            yield chunk
        yield b""

    async def json(self) -> Any:
        return json.loads(self.replayable_body.cached_body)

    def form(self, **kwargs: Any) -> Any:
        return self.as_request().form(**kwargs)

    def as_request(self) -> StarletteRequest:
        """Build a new Starlette request that reads the body from the start."""
        return StarletteRequest(self.request.scope, receive=self.receive)

    def get_body_stream(self) -> ReplayView:
        return self.replayable_body.get_body_stream()

    def get_text_reader(self, encoding: str | None = None) -> ReplayTextReader:
        return self.replayable_body.get_text_reader(encoding or self.config.encoding)

    def text(self, encoding: str | None = None) -> str:
        return self.replayable_body.text(encoding or self.config.encoding)

    def __getattr__(self, name: str) -> Any:
        return getattr(self.request, name)

    def __getitem__(self, key: str) -> Any:
        return self.request[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self.request)

    def __len__(self) -> int:
        return len(self.request)

    def __repr__(self) -> str:
        return f"<ReplayableRequest {self.request.method} {self.request.url.path} body={len(self.replayable_body)}>"


async def replayable_request(request: StarletteRequest) -> ReplayableRequest:
    """FastAPI dependency returning the current request as a ReplayableRequest.

    Examples:
        >>> @app.post("/echo")
        ... async def echo(request: ReplayableRequest = Depends(replayable_request)):
        ...     return {"body": request.text()}
    """
    return await ReplayableRequest.wrap(request)
