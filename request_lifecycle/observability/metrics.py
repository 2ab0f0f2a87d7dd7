# ==== PROMETHEUS METRICS ==== #

"""
Prometheus metrics for the request lifecycle engine.

This module provides counters and histograms for state transitions, side
effects and SLA monitoring, plus a text exposition helper for whichever
surface the host application scrapes from.
"""

from prometheus_client import (
    Counter,
    Gauge,
    Histogram,
    generate_latest,
    REGISTRY
)


# ==== TRANSITION METRICS ==== #

transitions_total = Counter(
    "lifecycle_transitions_total",
    "Total successful state transitions",
    ["from_status", "action", "to_status"]
)

transition_failures_total = Counter(
    "lifecycle_transition_failures_total",
    "Total failed transition attempts by action and error type",
    ["action", "error_type"]
)

side_effect_duration_seconds = Histogram(
    "lifecycle_side_effect_duration_seconds",
    "Side effect execution time in seconds",
    ["effect"]
)


# ==== SLA MONITORING METRICS ==== #

sla_breach_count = Counter(
    "lifecycle_sla_breach_count",
    "Total SLA breaches detected by status and expiry action",
    ["status", "action"]
)

sla_calculations_total = Counter(
    "lifecycle_sla_calculations_total",
    "Total SLA deadline calculations",
    ["urgent"]
)


# System metrics
app_info = Gauge(
    "lifecycle_app_info",
    "Application information",
    ["version", "environment", "service_name"]
)


def init_metrics() -> None:
    """Set application info from settings."""
    from request_lifecycle import __version__
    from request_lifecycle.settings import settings
    app_info.labels(
        version=__version__,
        environment=settings.APP_ENV,
        service_name=settings.SERVICE_NAME
    ).set(1)


def render_metrics() -> str:
    """Render the default registry in Prometheus text format."""
    return generate_latest(REGISTRY).decode("utf-8")
