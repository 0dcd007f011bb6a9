"""Buffer-once, replay-many request bodies.

An HTTP request body is a single-use stream: once one consumer reads it,
nobody else can. ReplayableBody drains that stream exactly once into an
immutable buffer and then hands out any number of independent ReplayView
cursors over it, so a logging layer, a signature check and the handler can
each read the full body from the start.

The buffer is a ``bytes`` object that is never modified after
construction, which makes concurrent reads from multiple views safe
without locking. Each view's position is private to whoever holds it.

Examples:
    Wrapping a WSGI request::

        body = ReplayableBody(environ)
        signature_ok = verify(body.get_body_stream().read())
        payload = json.load(body.get_body_stream())

    Wrapping an ASGI request::

        body = await ReplayableBody.from_receive(receive)
        await app(scope, body.asgi_receive(receive), send)

    Text access::

        for line in body.get_text_reader():
            ...
"""

from collections.abc import AsyncIterator, Awaitable, Callable, Mapping
from typing import Any, BinaryIO

from replayable_body.core.view import ReplayTextReader, ReplayView
from replayable_body.exceptions import BufferingError, DecodingError

DEFAULT_ENCODING = "utf-8"
DEFAULT_CHUNK_SIZE = 65536

# Read size used while draining streams of unknown length
_DRAIN_CHUNK_SIZE = 65536

Message = dict[str, Any]
Receive = Callable[[], Awaitable[Message]]


class ReplayableBody:
    """A request body captured once and readable any number of times.

    Attributes:
        cached_body: The buffered body bytes.
    """

    __slots__ = ("_cached_body",)

    def __init__(self, source: BinaryIO | Mapping[str, Any]) -> None:
        """Drain the source stream into memory.

        Args:
            source: A binary file-like object, or a WSGI environ whose
                ``wsgi.input`` is one. The stream must not have been read
                from yet. An environ without CONTENT_LENGTH has an empty
                body unless ``wsgi.input_terminated`` is set, in which case
                the input is read to its end.

        Raises:
            BufferingError: If reading the stream fails or ends before the
                declared Content-Length.
        """
        if isinstance(source, Mapping):
            stream = source.get("wsgi.input")
            if stream is None:
                raise BufferingError("WSGI environ has no wsgi.input stream")
            length = _content_length(source)
        else:
            stream = source
            length = None

        self._cached_body = _drain(stream, length)

    @classmethod
    def from_bytes(cls, data: bytes | bytearray | memoryview) -> "ReplayableBody":
        """Create a body from bytes that are already in memory.

        Raises:
            TypeError: If data is not a bytes-like object.
        """
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise TypeError(f"Expected a bytes-like object, got {type(data).__name__}")
        instance = cls.__new__(cls)
        instance._cached_body = bytes(data)
        return instance

    @classmethod
    async def from_receive(cls, receive: Receive) -> "ReplayableBody":
        """Drain an ASGI receive channel into memory.

        Collects ``http.request`` messages until one arrives without
        ``more_body``.

        Args:
            receive: The ASGI receive callable for the request.

        Returns:
            The buffered body.

        Raises:
            BufferingError: If the client disconnects before the body is
                complete or receive itself fails.
        """
        chunks: list[bytes] = []
        while True:
            try:
                message = await receive()
            except Exception as e:
                raise BufferingError(
                    message=f"Failed to buffer request body: {e}",
                    cause=e,
                ) from e

            message_type = message.get("type")
            if message_type == "http.request":
                chunks.append(message.get("body", b""))
                if not message.get("more_body", False):
                    break
            elif message_type == "http.disconnect":
                raise BufferingError(
                    "Client disconnected before the request body was fully received"
                )

        return cls.from_bytes(b"".join(chunks))

    @property
    def cached_body(self) -> bytes:
        return self._cached_body

    body = cached_body

    def __len__(self) -> int:
        return len(self._cached_body)

    def __repr__(self) -> str:
        return f"<ReplayableBody length={len(self._cached_body)}>"

    def get_body_stream(self) -> ReplayView:
        """Return a new independent stream positioned at the start of the body."""
        return ReplayView(self._cached_body)

    def get_text_reader(self, encoding: str | None = None) -> ReplayTextReader:
        """Return a new text reader over the body.

        Args:
            encoding: Text encoding, UTF-8 by default.

        Returns:
            A reader whose reads raise DecodingError on malformed input.
        """
        return ReplayTextReader(self.get_body_stream(), encoding=encoding or DEFAULT_ENCODING)

    def text(self, encoding: str | None = None) -> str:
        """Decode the whole body.

        Raises:
            DecodingError: If the body is not valid in the encoding.
        """
        encoding = encoding or DEFAULT_ENCODING
        try:
            return self._cached_body.decode(encoding)
        except UnicodeDecodeError as e:
            raise DecodingError(
                message=f"Request body is not valid {encoding}: {e.reason}",
                encoding=encoding,
                cause=e,
            ) from e

    async def iter_chunks(self, chunk_size: int = DEFAULT_CHUNK_SIZE) -> AsyncIterator[bytes]:
        """Yield the body in chunks from a fresh view."""
        view = self.get_body_stream()
        while chunk := view.read(chunk_size):
            yield chunk

    def asgi_receive(self, fallback: Receive | None = None) -> Receive:
        """Build a fresh ASGI receive callable that replays the body.

        The first call returns the whole body as a single ``http.request``
        message. Later calls are forwarded to ``fallback`` (normally the
        original receive, which reports the client disconnect), or answer
        ``http.disconnect`` when no fallback is given.

        Args:
            fallback: Receive callable to use once the body has been sent.

        Returns:
            An async callable usable as an ASGI receive channel.
        """
        sent = False

        async def receive() -> Message:
            nonlocal sent
            if not sent:
                sent = True
                return {"type": "http.request", "body": self._cached_body, "more_body": False}
            if fallback is not None:
                return await fallback()
            return {"type": "http.disconnect"}

        return receive


def _content_length(environ: Mapping[str, Any]) -> int | None:
    value = environ.get("CONTENT_LENGTH")
    if value in (None, ""):
        # PEP 3333: no length means no body unless the server terminates the input
        return None if environ.get("wsgi.input_terminated") else 0
    try:
        length = int(value)
    except (TypeError, ValueError) as e:
        raise BufferingError(f"Invalid CONTENT_LENGTH: {value!r}", cause=e) from e
    if length < 0:
        raise BufferingError(f"Invalid CONTENT_LENGTH: {value!r}")
    return length


def _drain(stream: Any, length: int | None) -> bytes:
    """Read a stream to its end, or exactly ``length`` bytes when given."""
    chunks: list[bytes] = []
    received = 0
    try:
        while length is None or received < length:
            size = _DRAIN_CHUNK_SIZE if length is None else min(_DRAIN_CHUNK_SIZE, length - received)
            chunk = stream.read(size)
            if not chunk:
                break
            chunks.append(bytes(chunk))
            received += len(chunk)
    except Exception as e:
        raise BufferingError(
            message=f"Failed to buffer request body: {e}",
            cause=e,
        ) from e

    if length is not None and received < length:
        raise BufferingError(
            f"Request body ended after {received} of {length} bytes"
        )
    return b"".join(chunks)
