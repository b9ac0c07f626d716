from __future__ import annotations

import time
from contextlib import contextmanager
from typing import Any

import structlog
from prometheus_client import Counter, Histogram

log = structlog.get_logger("picks")


# --- Metrics
HTTP_REQUESTS = Counter("http_requests_total", "Total HTTP requests", ["route", "method", "status"])
HTTP_LATENCY = Histogram("http_request_latency_seconds", "HTTP request latency seconds", ["route", "method"])

ESTIMATIONS = Counter("estimations_total", "Channel mix estimations computed")
ESTIMATE_LATENCY = Histogram("estimate_latency_seconds", "Estimate + match latency seconds (catalog reads included)")

UNPARSABLE_VALUES = Counter(
    "catalog_unparsable_values_total",
    "Catalog values that could not be converted to a number",
    ["field"],
)
MATCH_OUTCOMES = Counter("capacity_match_total", "Capacity match outcomes", ["rule", "tier", "outcome"])
CATALOG_FAILURES = Counter("catalog_read_failures_total", "Failed catalog reads", ["source"])


@contextmanager
def timer(hist: Histogram, labels: dict | None = None):
    t0 = time.time()
    try:
        yield
    finally:
        dt = time.time() - t0
        if labels:
            hist.labels(**labels).observe(dt)
        else:
            hist.observe(dt)


def emit_event(name: str, payload: dict[str, Any]) -> None:
    """Structured event emission through structlog."""
    log.info("event", name=name, **payload)
