"""Prometheus metrics for calls to the SnailMail distance service."""

from __future__ import annotations

from prometheus_client import Counter, Histogram

estimate_requests_total = Counter(
    "snailmail_estimate_requests_total",
    "Requests issued to the distance service",
    ["endpoint", "outcome"],
)

estimate_request_duration_seconds = Histogram(
    "snailmail_estimate_request_duration_seconds",
    "Round-trip latency of distance service requests",
    ["endpoint"],
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)


def record_request(endpoint: str, outcome: str, duration_seconds: float) -> None:
    """Count one request and observe its latency."""
    estimate_requests_total.labels(endpoint=endpoint, outcome=outcome).inc()
    estimate_request_duration_seconds.labels(endpoint=endpoint).observe(duration_seconds)


__all__ = [
    "estimate_request_duration_seconds",
    "estimate_requests_total",
    "record_request",
]
