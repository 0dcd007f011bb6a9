"""Custom exceptions for replayable request bodies.

This module defines the exception hierarchy used to signal the two ways
buffered body access can fail: the one-time drain of the original stream,
and text decoding of the buffered bytes.

Examples:
    Handling a buffering failure::

        from replayable_body.exceptions import BufferingError

        try:
            body = ReplayableBody(environ)
        except BufferingError as e:
            logger.warning("body.buffering_failed", error=str(e))
            return bad_request()

    Handling a decoding failure::

        from replayable_body.exceptions import DecodingError

        try:
            text = body.text()
        except DecodingError as e:
            logger.info("body.not_text", encoding=e.encoding)
"""


class ReplayableBodyError(Exception):
    """Base exception for all replayable body errors.

    Attributes:
        message: Human-readable error description.
    """

    def __init__(self, message: str) -> None:
        """Initialize the exception with a message.

        Args:
            message: Human-readable error description.
        """
        self.message = message
        super().__init__(message)


class BufferingError(ReplayableBodyError):
    """The original request body could not be read in full.

    Raised while constructing a ReplayableBody when the underlying stream
    fails (I/O fault, broken connection, short read). The wrapper is never
    exposed in this case, so no partially buffered body can be observed.

    The body cannot be re-read from its origin once consumption has started,
    so callers should treat the request as unprocessable rather than retry.

    Attributes:
        message: Human-readable error description.
        cause: The underlying exception, if any.

    Examples:
        Raising a buffering error::

            try:
                data = stream.read()
            except OSError as e:
                raise BufferingError(
                    message=f"Failed to buffer request body: {e}",
                    cause=e,
                ) from e
    """

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        """Initialize the buffering error with details.

        Args:
            message: Human-readable error description.
            cause: The underlying exception that aborted the read.
        """
        super().__init__(message)
        self.cause = cause


class DecodingError(ReplayableBodyError, ValueError):
    """Buffered bytes are not valid in the requested text encoding.

    Only raised from text access. Construction and raw byte access never
    decode, so they never raise this.

    Attributes:
        message: Human-readable error description.
        encoding: The codec that rejected the bytes.
        cause: The underlying UnicodeDecodeError, if any.
    """

    def __init__(
        self,
        message: str,
        encoding: str,
        cause: UnicodeDecodeError | None = None,
    ) -> None:
        """Initialize the decoding error with details.

        Args:
            message: Human-readable error description.
            encoding: The codec that rejected the bytes.
            cause: The underlying decode error.
        """
        super().__init__(message)
        self.encoding = encoding
        self.cause = cause
