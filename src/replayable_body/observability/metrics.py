"""Prometheus metrics for replayable body middleware.

Metrics include:

- Request counters by buffering result (buffered, skipped, failed)
- Buffered body size histogram
- Buffering failure counter

Only the adapters record metrics. The core buffering types have no side
effects beyond memory allocation.

Examples:
    Recording a buffered request::

        from replayable_body.observability.metrics import record_buffered

        record_buffered(body_bytes=512)

    Recording a failure::

        from replayable_body.observability.metrics import record_failure

        record_failure()
"""

from prometheus_client import Counter, Histogram

# Request counter by result
# Labels: result (buffered, skipped, failed)
requests_total = Counter(
    "replayable_body_requests_total",
    "Total number of requests seen by the replayable body middleware",
    ["result"],
)

# Buffered body size histogram (bytes)
buffered_bytes = Histogram(
    "replayable_body_buffered_bytes",
    "Size in bytes of buffered request bodies",
    buckets=[
        0,
        128,
        1024,
        8192,
        65536,
        262144,
        1048576,
        4194304,
        16777216,
    ],  # empty to 16 MiB
)

buffering_failures = Counter(
    "replayable_body_buffering_failures_total",
    "Total number of request bodies that could not be buffered",
)


def record_buffered(body_bytes: int) -> None:
    """Record a successfully buffered body.

    Args:
        body_bytes: Size of the buffered body in bytes
    """
    requests_total.labels(result="buffered").inc()
    buffered_bytes.observe(body_bytes)


def record_skipped() -> None:
    """Record a request passed through without buffering."""
    requests_total.labels(result="skipped").inc()


def record_failure() -> None:
    """Record a request whose body could not be buffered."""
    requests_total.labels(result="failed").inc()
    buffering_failures.inc()
