"""Prometheus metrics for backend calls and fail-open fallbacks"""

from prometheus_client import Counter, Histogram
from mysanvi.domain.exceptions import DecodeError, HttpError, NetworkError

# Backend call metrics
backend_request_counter = Counter(
    "mysanvi_backend_requests_total",
    "Backend HTTP calls by outcome",
    ["backend", "method", "status"],
)

backend_latency_histogram = Histogram(
    "mysanvi_backend_request_seconds",
    "Backend HTTP call latency",
    ["backend"],
    buckets=[0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0],
)

backend_failure_counter = Counter(
    "mysanvi_backend_failures_total",
    "Failed backend calls",
    ["backend", "kind"],  # network | http | decode
)

# Fail-open paths
status_probe_fallback_counter = Counter(
    "mysanvi_status_probe_fallback_total",
    "Mandii presence probes that fell back to absent",
)

overview_fallback_counter = Counter(
    "mysanvi_overview_fallback_total",
    "Overview 'today' figures served from the fallback value",
)


def record_failure(backend: str, error: Exception) -> None:
    """Count a failed call by error class"""
    if isinstance(error, NetworkError):
        kind = "network"
    elif isinstance(error, HttpError):
        kind = "http"
    elif isinstance(error, DecodeError):
        kind = "decode"
    else:
        kind = "other"
    backend_failure_counter.labels(backend=backend, kind=kind).inc()
