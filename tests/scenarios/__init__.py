"""End-to-end scenario tests for replayable request bodies.

Each scenario drives a real ASGI or WSGI application through the adapters
and checks one aspect of buffer-once, replay-many behavior.
"""
