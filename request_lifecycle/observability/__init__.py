"""
Observability for the request lifecycle engine.

Logging (loguru), tracing (OpenTelemetry) and metrics (prometheus_client),
initialized together by ``init_observability``.
"""

from request_lifecycle.settings import get_settings

from .logging import get_logger, init_logging, log_business_event
from .metrics import init_metrics, render_metrics
from .tracing import get_tracer, init_tracing


def init_observability() -> None:
    """Initialize logging, tracing and metrics from settings."""
    settings = get_settings()
    init_logging(settings.LOG_LEVEL, settings.LOG_DIR)
    init_tracing(settings.SERVICE_NAME)
    init_metrics()


__all__ = [
    "get_logger",
    "get_tracer",
    "init_logging",
    "init_metrics",
    "init_observability",
    "init_tracing",
    "log_business_event",
    "render_metrics",
]
