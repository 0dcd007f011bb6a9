"""
Replayable request bodies for Python web applications.

This package reads an HTTP request body exactly once and makes it available
to any number of downstream consumers, each reading its own independent
stream from the start.
"""

from replayable_body.config import ReplayableBodyConfig
from replayable_body.core import EOF, ReplayableBody, ReplayTextReader, ReplayView
from replayable_body.exceptions import BufferingError, DecodingError, ReplayableBodyError
from replayable_body.utils.state import get_replayable_body

__version__ = "0.1.0"

__all__ = [
    "EOF",
    "BufferingError",
    "DecodingError",
    "ReplayableBody",
    "ReplayableBodyConfig",
    "ReplayableBodyError",
    "ReplayTextReader",
    "ReplayView",
    "__version__",
    "get_replayable_body",
]
