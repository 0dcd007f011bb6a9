"""Test doubles for request streams and ASGI channels."""

import io
from typing import Any


class FailingStream(io.RawIOBase):
    """Binary stream that yields some bytes and then raises an I/O error."""

    def __init__(self, prefix: bytes = b"partial", error: Exception | None = None) -> None:
        super().__init__()
        self._prefix = prefix
        self._error = error or ConnectionResetError("connection reset by peer")
        self.reads = 0

    def readable(self) -> bool:
        return True

    def read(self, size: int = -1) -> bytes:
        self.reads += 1
        if self._prefix:
            chunk, self._prefix = self._prefix, b""
            return chunk
        raise self._error


class CountingStream(io.BytesIO):
    """BytesIO that counts read calls, to check the source is drained once."""

    def __init__(self, data: bytes) -> None:
        super().__init__(data)
        self.reads = 0

    def read(self, size: int | None = -1) -> bytes:
        self.reads += 1
        return super().read(size)


def make_receive(*chunks: bytes, disconnect_after: bool = False) -> Any:
    """Build an ASGI receive callable delivering the given body chunks."""
    messages: list[dict[str, Any]] = []
    for index, chunk in enumerate(chunks):
        more_body = index < len(chunks) - 1 or disconnect_after
        messages.append({"type": "http.request", "body": chunk, "more_body": more_body})
    if disconnect_after or not chunks:
        messages.append({"type": "http.disconnect"})

    async def receive() -> dict[str, Any]:
        if messages:
            return messages.pop(0)
        return {"type": "http.disconnect"}

    return receive


def make_scope(method: str = "POST", path: str = "/", headers: list | None = None) -> dict[str, Any]:
    """Build a minimal ASGI HTTP scope."""
    return {
        "type": "http",
        "asgi": {"version": "3.0"},
        "http_version": "1.1",
        "method": method,
        "scheme": "http",
        "path": path,
        "raw_path": path.encode(),
        "query_string": b"",
        "root_path": "",
        "headers": headers or [],
        "client": ("127.0.0.1", 12345),
        "server": ("testserver", 80),
    }
