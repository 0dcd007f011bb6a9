"""
Pytest configuration and shared fixtures for replayable_body tests.
"""


import pytest

from replayable_body.core.body import ReplayableBody


@pytest.fixture
def hello_body() -> bytes:
    """Provide the canonical five byte body."""
    return b"hello"


@pytest.fixture
def sample_request_body() -> bytes:
    """Provide a sample JSON request body for tests."""
    return b'{"data": "test"}'


@pytest.fixture
def hello_replayable(hello_body: bytes) -> ReplayableBody:
    """Provide a ReplayableBody wrapping b"hello"."""
    return ReplayableBody.from_bytes(hello_body)
