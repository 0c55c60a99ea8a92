"""Prometheus metrics for inbound requests and upstream calls."""

from prometheus_client import Counter, Histogram

http_requests = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["service", "method", "path", "status"],
)
http_duration = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["service", "method", "path"],
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

upstream_requests = Counter(
    "upstream_requests_total",
    "Total upstream API requests",
    ["upstream", "outcome"],
)
upstream_duration = Histogram(
    "upstream_request_duration_seconds",
    "Upstream request duration in seconds",
    ["upstream"],
    buckets=[0.05, 0.1, 0.25, 0.5, 0.75, 1.0, 2.5, 5.0, 10.0],
)


def observe_request(
    service: str, method: str, path: str, status: int, duration: float | None = None
) -> None:
    """Count one served request; duration is only known when a response was built."""
    http_requests.labels(service=service, method=method, path=path, status=str(status)).inc()
    if duration is not None:
        http_duration.labels(service=service, method=method, path=path).observe(duration)
