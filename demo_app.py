"""Demo FastAPI application with replayable request bodies.

A webhook endpoint verifies an HMAC signature over the raw body and then
parses the same body as JSON, while an audit middleware also reads it.
Every consumer sees the complete body.

Run with: python demo_app.py
Then test with:
    curl -X POST http://localhost:8000/api/webhooks \\
        -H 'X-Signature: <hex hmac>' -d '{"event": "ping"}'
"""

import hashlib
import hmac
from datetime import UTC, datetime

import uvicorn
from fastapi import Depends, FastAPI, HTTPException, Request
from pydantic import BaseModel

from replayable_body.adapters.asgi import (
    ReplayableBodyMiddleware,
    ReplayableRequest,
    replayable_request,
)
from replayable_body.config import ReplayableBodyConfig
from replayable_body.observability.logging import configure_logging, get_logger
from replayable_body.utils import get_replayable_body

WEBHOOK_SECRET = b"demo-secret"

configure_logging(level="DEBUG", json_output=False)
logger = get_logger("demo_app")

app = FastAPI(
    title="Replayable Body Demo",
    description="Demo API reading the same request body several times",
    version="0.1.0",
)


@app.middleware("http")
async def audit_bodies(request: Request, call_next):
    """Log a digest of every buffered body before the handler runs."""
    body = get_replayable_body(request)
    if body is not None:
        digest = hashlib.sha256(body.get_body_stream().read()).hexdigest()
        logger.info("audit.body", path=request.url.path, sha256=digest, length=len(body))
    return await call_next(request)


# Added last so it runs first and buffers before the audit middleware
app.add_middleware(ReplayableBodyMiddleware, config=ReplayableBodyConfig())


class WebhookEvent(BaseModel):
    event: str
    data: dict = {}


@app.get("/")
async def root():
    """Root endpoint - returns API info."""
    return {
        "name": "Replayable Body Demo",
        "version": "0.1.0",
        "endpoints": {
            "POST /api/webhooks": "Signed webhook, body read for HMAC and JSON",
            "POST /api/echo": "Echo the body back as text",
        },
    }


@app.post("/api/webhooks")
async def receive_webhook(request: ReplayableRequest = Depends(replayable_request)):
    """Verify the signature over the raw body, then parse it."""
    expected = hmac.new(WEBHOOK_SECRET, await request.body(), hashlib.sha256).hexdigest()
    if not hmac.compare_digest(expected, request.headers.get("x-signature", "")):
        raise HTTPException(status_code=401, detail="Invalid signature")

    event = WebhookEvent.model_validate(await request.json())
    return {
        "status": "accepted",
        "event": event.event,
        "received_at": datetime.now(UTC).isoformat(),
    }


@app.post("/api/echo")
async def echo(request: ReplayableRequest = Depends(replayable_request)):
    """Echo the body, read twice through independent streams."""
    first = request.get_body_stream().read()
    second = request.text()
    return {"bytes": len(first), "text": second}


if __name__ == "__main__":
    print("=" * 60)
    print("Replayable Body Demo Server")
    print("=" * 60)
    print("\nStarting server at http://localhost:8000")
    print("\nPress Ctrl+C to stop")
    print("=" * 60)
    print()

    uvicorn.run(app, host="0.0.0.0", port=8000, log_level="info")
