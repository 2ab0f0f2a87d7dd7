"""Pydantic schemas for SLA deadlines and breach verdicts."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class SLAConfig(BaseModel):
    """Effective SLA budget after urgency is applied."""

    model_config = ConfigDict(frozen=True)

    find_agent_hours: float
    completion_hours: float
    allow_extension: bool
    max_extension_hours: float


class SLADeadlines(BaseModel):
    """Deadlines derived for a request at creation time."""

    model_config = ConfigDict(frozen=True)

    find_agent_deadline: datetime
    completion_deadline: datetime
    sla_config: SLAConfig


class OverdueResult(BaseModel):
    """Breach verdict for a request at a point in time."""

    model_config = ConfigDict(frozen=True)

    is_overdue: bool
    reason: Optional[str] = None
