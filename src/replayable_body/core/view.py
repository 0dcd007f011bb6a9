"""Independent read cursors over a buffered request body.

A ReplayView is a read-only binary stream positioned over an immutable
buffer. Views never share state: each one owns its read position, so any
number of them can drain the same body in any order without affecting one
another.

The view goes through two states:

    Open (position < length) -> Exhausted (position == length)

Because all data is already resident in memory, a view is always ready and
never fails on read. The readiness listener hook exists for parity with
callback-driven request APIs and does nothing.

Examples:
    Reading byte by byte::

        view = body.get_body_stream()
        while (byte := view.read_byte()) != EOF:
            handle(byte)
        assert view.is_finished()

    Using it as a regular file object::

        data = json.load(body.get_body_stream())
"""

import io
from collections.abc import Callable, Iterator
from typing import Any

from replayable_body.exceptions import DecodingError

# Returned by read_byte() once the view is exhausted
EOF = -1


class ReplayView(io.RawIOBase):
    """Read-only binary stream over a shared immutable buffer.

    Attributes:
        position: Offset of the next byte to be read.
        length: Total number of buffered bytes.
    """

    def __init__(self, buffer: bytes) -> None:
        """Initialize a view positioned at offset 0.

        Args:
            buffer: The immutable body bytes. Never copied or modified.
        """
        super().__init__()
        self._buffer = memoryview(buffer).toreadonly()
        self._position = 0

    @property
    def position(self) -> int:
        return self._position

    @property
    def length(self) -> int:
        return len(self._buffer)

    def readable(self) -> bool:
        return True

    def seekable(self) -> bool:
        return False

    def tell(self) -> int:
        self._check_open()
        return self._position

    def read_byte(self) -> int:
        """Read a single byte.

        Returns:
            The next byte as an int in 0-255, or EOF (-1) when exhausted.

        Raises:
            ValueError: If the view has been closed.
        """
        self._check_open()
        if self._position >= len(self._buffer):
            return EOF
        value = self._buffer[self._position]
        self._position += 1
        return value

    def read(self, size: int | None = -1) -> bytes:
        self._check_open()
        if size is None or size < 0:
            return self.readall()
        end = min(self._position + size, len(self._buffer))
        chunk = self._buffer[self._position : end].tobytes()
        self._position = end
        return chunk

    def readall(self) -> bytes:
        self._check_open()
        chunk = self._buffer[self._position :].tobytes()
        self._position = len(self._buffer)
        return chunk

    def readinto(self, b: Any) -> int:
        self._check_open()
        target = memoryview(b).cast("B")
        end = min(self._position + len(target), len(self._buffer))
        count = end - self._position
        target[:count] = self._buffer[self._position : end]
        self._position = end
        return count

    def available(self) -> int:
        """Number of bytes that can still be read without blocking."""
        self._check_open()
        return len(self._buffer) - self._position

    def is_finished(self) -> bool:
        """Return True once every byte has been read.

        A closed view also reports finished, since it can never yield data.
        """
        if self.closed:
            return True
        return self._position >= len(self._buffer)

    def is_ready(self) -> bool:
        """Buffered data is always immediately available."""
        return True

    def set_read_listener(self, listener: Callable[[], Any] | None) -> None:
        """Accept a readiness listener.

        Data is resident in memory, so there is never anything to wait for.
        The listener is neither stored nor invoked.
        """

    def _check_open(self) -> None:
        if self.closed:
            raise ValueError("I/O operation on closed replay view")

    def __repr__(self) -> str:
        return f"<ReplayView position={self._position} length={len(self._buffer)}>"


class ReplayTextReader(io.TextIOWrapper):
    """Line-oriented text reader over a fresh ReplayView.

    Decoding is strict: malformed input surfaces as DecodingError at the
    point text is read, never earlier.

    Examples:
        >>> reader = ReplayableBody.from_bytes(b"a\\nb\\n").get_text_reader()
        >>> reader.readline()
        'a\\n'
        >>> list(reader)
        ['b\\n']
    """

    def __init__(self, view: ReplayView, encoding: str = "utf-8") -> None:
        super().__init__(io.BufferedReader(view), encoding=encoding, errors="strict")

    def read(self, size: int | None = -1) -> str:
        try:
            return super().read(size)
        except UnicodeDecodeError as e:
            raise self._decoding_error(e) from e

    def readline(self, size: int = -1) -> str:
        try:
            return super().readline(size)
        except UnicodeDecodeError as e:
            raise self._decoding_error(e) from e

    def readlines(self, hint: int = -1) -> list[str]:
        lines = []
        total = 0
        for line in self:
            lines.append(line)
            total += len(line)
            if 0 < hint <= total:
                break
        return lines

    def __iter__(self) -> Iterator[str]:
        return self

    def __next__(self) -> str:
        line = self.readline()
        if not line:
            raise StopIteration
        return line

    def _decoding_error(self, error: UnicodeDecodeError) -> DecodingError:
        return DecodingError(
            message=f"Request body is not valid {self.encoding}: {error.reason}",
            encoding=self.encoding,
            cause=error,
        )
