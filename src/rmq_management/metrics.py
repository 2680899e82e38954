"""Prometheus instrumentation of management API requests."""

from prometheus_client import Counter, Histogram

REQUESTS_TOTAL = Counter(
    "rmq_management_requests_total",
    "Management API requests by method and response status",
    ["method", "status"],
)

REQUEST_DURATION = Histogram(
    "rmq_management_request_duration_seconds",
    "Management API request latency",
    ["method"],
)


def record_request(method: str, status: int | str, duration: float) -> None:
    """Record one completed (or failed) round trip."""
    REQUESTS_TOTAL.labels(method=method, status=str(status)).inc()
    REQUEST_DURATION.labels(method=method).observe(duration)
