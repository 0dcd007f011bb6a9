"""Core buffering logic for replayable request bodies.

This package contains the framework-agnostic pieces:
- ReplayableBody: drains a single-use body stream once into memory
- ReplayView: independent read cursor over the buffered bytes
- ReplayTextReader: strict text decoding over a fresh view

Framework adapters (ASGI, WSGI) build on these to install the buffered
body at the request boundary.
"""

from replayable_body.core.body import ReplayableBody
from replayable_body.core.view import EOF, ReplayTextReader, ReplayView

__all__ = ["EOF", "ReplayableBody", "ReplayTextReader", "ReplayView"]
