"""Pydantic schemas for the request lifecycle engine."""

from .context import RecurringOptions, RequestContext, RequestTypeConfig, TierOption
from .sla import OverdueResult, SLAConfig, SLADeadlines

__all__ = [
    "RecurringOptions",
    "RequestContext",
    "RequestTypeConfig",
    "TierOption",
    "OverdueResult",
    "SLAConfig",
    "SLADeadlines",
]
