# ==== REQUEST CONTEXT SCHEMAS ==== #

"""
Pydantic schemas for request-type configuration and request context.

The request context is the snapshot the state machine operates on. It is
frozen; callers produce the next snapshot with ``model_copy(update=...)``.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from request_lifecycle.business.statuses import RequestStatus


# ==== REQUEST TYPE CONFIGURATION ==== #


class TierOption(BaseModel):
    """Tier entry as stored in the request-type catalog."""

    tier: str
    price: int = Field(..., ge=0, description="Price in kobo")
    description: str


class RecurringOptions(BaseModel):
    """Recurring options offered by a request type."""

    frequencies: List[str] = Field(default_factory=list)
    min_occurrences: int = Field(1, ge=1)
    max_occurrences: int = Field(365, ge=1, le=365)
    discount_percentage: float = Field(0, ge=0, le=100)


class RequestTypeConfig(BaseModel):
    """
    Request-type configuration consumed by the lifecycle engine.

    Only the SLA and extension fields drive the engine; the remaining fields
    describe the catalog entry for pricing and recurrence.
    """

    model_config = ConfigDict(frozen=True, extra='ignore')

    # --► SLA CONFIGURATION
    sla_hours: float = Field(..., ge=0, description="Hours to find an agent")
    completion_sla_hours: float = Field(..., ge=0, description="Hours to complete after the search window")
    allow_extension: bool = False
    extension_hours: Optional[float] = Field(None, ge=0)

    # --► CATALOG METADATA
    name: Optional[str] = None
    display_name: Optional[str] = None
    description: Optional[str] = None

    # --► PRICING AND RECURRENCE
    tiered_pricing: Optional[List[TierOption]] = None
    allows_recurring: bool = False
    recurring_options: Optional[RecurringOptions] = None


# ==== REQUEST CONTEXT ==== #


class RequestContext(BaseModel):
    """Snapshot of a verification request handed to the state machine."""

    model_config = ConfigDict(frozen=True)

    request_id: str = Field(..., min_length=1)
    current_status: RequestStatus
    request_type: RequestTypeConfig
    agent_id: Optional[str] = None
    customer_id: str
    created_at: datetime
    scheduled_for: Optional[datetime] = None
    is_urgent: bool = False
    is_recurring: bool = False
    metadata: Dict[str, Any] = Field(default_factory=dict)

    def with_status(self, status: RequestStatus) -> "RequestContext":
        """Return a copy of the context moved to ``status``."""
        return self.model_copy(update={"current_status": RequestStatus(status)})
