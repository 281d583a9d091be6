# natalchart/utils/metrics.py
from __future__ import annotations

from typing import Final, Iterable

from prometheus_client import Counter, Gauge, Histogram

# Names are scraped by dashboards; keep them stable.
MET_REQUESTS: Final = Counter("natal_api_requests_total", "API requests", ["route"])
MET_CHARTS: Final = Counter("natal_charts_total", "Chart computations", ["outcome"])
MET_WARNINGS: Final = Counter("natal_warning_total", "Non-fatal chart warnings", ["kind"])
GAUGE_APP_UP: Final = Gauge("natal_app_up", "1 if app is running")
REQ_LATENCY: Final = Histogram("natal_request_seconds", "API request latency", ["route"])

CHART_OUTCOMES: Final = ("ok", "invalid", "degenerate", "failed")


def count_warnings(warnings: Iterable[str]) -> None:
    for kind in warnings:
        MET_WARNINGS.labels(kind=kind).inc()


def seed(routes: Iterable[str]) -> None:
    """Create zero-valued series so they are visible before first traffic."""
    for route in routes:
        MET_REQUESTS.labels(route=route).inc(0)
    for outcome in CHART_OUTCOMES:
        MET_CHARTS.labels(outcome=outcome).inc(0)
    GAUGE_APP_UP.set(1.0)
