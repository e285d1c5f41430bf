"""Prometheus metric inventory.

All metrics are defined here; the modules that own a behavior import
the metric and update it at the point of action. ``/metrics`` exposes
the default registry.
"""

from __future__ import annotations

from prometheus_client import Counter, Gauge, Histogram

# ---------------------------------------------------------------------------
# HTTP metrics (populated by MetricsMiddleware)
# ---------------------------------------------------------------------------

REQUEST_COUNT = Counter(
    "http_requests_total",
    "Total HTTP requests by method, endpoint, and status code",
    ["method", "endpoint", "status_code"],
)

REQUEST_DURATION = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)

ACTIVE_REQUESTS = Gauge(
    "http_active_requests",
    "Number of HTTP requests currently being processed",
)

# ---------------------------------------------------------------------------
# Authorization
# ---------------------------------------------------------------------------

ACCESS_DENIALS = Counter(
    "access_denials_total",
    "Requests rejected with 403 by an authorization guard",
    ["guard"],  # e.g. "capability:manage_courses", "teacher_course"
)
