"""Framework adapters for replayable request bodies.

Adapters install a ReplayableBody at the request boundary:
- ASGI: ReplayableBodyMiddleware and ReplayableRequest (FastAPI, Starlette)
- WSGI: WSGIReplayableBodyMiddleware (Flask, Django, any WSGI app)

The ASGI adapter needs Starlette. Import it from its module so WSGI-only
deployments do not pull it in.
"""

from replayable_body.adapters.wsgi import WSGIReplayableBodyMiddleware

__all__ = ["WSGIReplayableBodyMiddleware"]
