# ==== SLA ENGINE SERVICE ==== #

"""
SLA deadline calculation and breach detection for verification requests.

This module derives find-agent and completion deadlines from a request type,
decides whether a request has breached its SLA at a given time, and provides
a monitor that fires the matching expiry action through the state machine.
"""

import datetime as dt
from datetime import timezone
from typing import Optional

from request_lifecycle.business.statuses import RequestAction, RequestStatus, WORKING_STATUSES
from request_lifecycle.observability.logging import get_logger
from request_lifecycle.observability.metrics import sla_breach_count, sla_calculations_total
from request_lifecycle.observability.tracing import get_tracer
from request_lifecycle.schemas.context import RequestContext, RequestTypeConfig
from request_lifecycle.schemas.sla import OverdueResult, SLAConfig, SLADeadlines
from request_lifecycle.services.state_machine import RequestStateMachine, get_state_machine


# ==== MODULE INITIALIZATION ==== #


tracer = get_tracer(__name__)
logger = get_logger(__name__)

# Urgent requests get half the time for both windows
URGENT_MULTIPLIER = 0.5

FIND_AGENT_BREACH_REASON = "Failed to find agent within SLA"
COMPLETION_BREACH_REASON = "Failed to complete within SLA"


# ==== DEADLINE CALCULATION ==== #


def calculate_sla_deadlines(
    request_type: RequestTypeConfig,
    created_at: dt.datetime,
    is_urgent: bool = False
) -> SLADeadlines:
    """
    Calculate SLA deadlines for a request.

    Both deadlines are measured from creation: the completion window starts
    where the find-agent window ends, not at assignment time.

    Args:
        request_type (RequestTypeConfig): Request type with SLA hours and
                                          extension policy
        created_at (dt.datetime): Request creation time
        is_urgent (bool): Whether the request is urgent

    Returns:
        SLADeadlines: Find-agent deadline, completion deadline and the
                      effective SLA configuration
    """
    multiplier = URGENT_MULTIPLIER if is_urgent else 1

    find_agent_hours = request_type.sla_hours * multiplier
    completion_hours = request_type.completion_sla_hours * multiplier

    sla_calculations_total.labels(urgent=str(bool(is_urgent)).lower()).inc()

    return SLADeadlines(
        find_agent_deadline=created_at + dt.timedelta(hours=find_agent_hours),
        completion_deadline=created_at + dt.timedelta(hours=find_agent_hours + completion_hours),
        sla_config=SLAConfig(
            find_agent_hours=find_agent_hours,
            completion_hours=completion_hours,
            allow_extension=request_type.allow_extension,
            max_extension_hours=request_type.extension_hours or 0,
        ),
    )


# ==== BREACH DETECTION ==== #


def is_overdue(
    current_status: RequestStatus,
    find_agent_deadline: dt.datetime,
    completion_deadline: dt.datetime,
    now: Optional[dt.datetime] = None
) -> OverdueResult:
    """
    Check whether a request has breached its SLA.

    Only two conditions count, first match wins: still searching for an agent
    after the find-agent deadline, or still being worked on after the
    completion deadline. Every other status is never overdue.

    Args:
        current_status (RequestStatus): Current request status
        find_agent_deadline (dt.datetime): Find-agent deadline
        completion_deadline (dt.datetime): Completion deadline
        now (Optional[dt.datetime]): Evaluation time, current UTC time if omitted

    Returns:
        OverdueResult: Verdict and breach reason
    """
    now = _ensure_utc(now or dt.datetime.now(timezone.utc))
    current_status = RequestStatus(current_status)

    if (
        current_status == RequestStatus.PENDING_ASSIGNMENT
        and now > _ensure_utc(find_agent_deadline)
    ):
        return OverdueResult(is_overdue=True, reason=FIND_AGENT_BREACH_REASON)

    if current_status in WORKING_STATUSES and now > _ensure_utc(completion_deadline):
        return OverdueResult(is_overdue=True, reason=COMPLETION_BREACH_REASON)

    return OverdueResult(is_overdue=False)


def get_expiry_action(current_status: RequestStatus) -> Optional[RequestAction]:
    """
    Get the expiry action that applies to a status.

    Returns:
        Optional[RequestAction]: SLA_EXPIRED while searching,
            COMPLETION_SLA_EXPIRED while working, None otherwise
    """
    current_status = RequestStatus(current_status)
    if current_status == RequestStatus.PENDING_ASSIGNMENT:
        return RequestAction.SLA_EXPIRED
    if current_status in WORKING_STATUSES:
        return RequestAction.COMPLETION_SLA_EXPIRED
    return None


# ==== SLA MONITOR CLASS ==== #


class SLAMonitor:
    """
    Expires requests that have breached their SLA.

    Intended for the periodic scheduler: each call evaluates one request and,
    when it is overdue, fires the expiry action through the state machine.
    """

    def __init__(self, state_machine: Optional[RequestStateMachine] = None):
        self.state_machine = state_machine or get_state_machine()

    async def enforce(
        self,
        context: RequestContext,
        find_agent_deadline: dt.datetime,
        completion_deadline: dt.datetime,
        now: Optional[dt.datetime] = None
    ) -> Optional[RequestStatus]:
        """
        Evaluate a request and expire it if overdue.

        Args:
            context (RequestContext): Current request snapshot
            find_agent_deadline (dt.datetime): Find-agent deadline
            completion_deadline (dt.datetime): Completion deadline
            now (Optional[dt.datetime]): Evaluation time

        Returns:
            Optional[RequestStatus]: New status after expiry, or None when
                                     the request is within its SLA
        """
        with tracer.start_as_current_span("sla_evaluation") as span:
            span.set_attribute("request_id", context.request_id)
            span.set_attribute("status", context.current_status.value)

            verdict = is_overdue(
                context.current_status, find_agent_deadline, completion_deadline, now
            )
            span.set_attribute("breach_detected", verdict.is_overdue)
            if not verdict.is_overdue:
                return None

            action = get_expiry_action(context.current_status)
            sla_breach_count.labels(
                status=context.current_status.value,
                action=action.value
            ).inc()
            logger.warning(
                f"SLA breach detected: {verdict.reason}",
                request_id=context.request_id,
                status=context.current_status.value,
                action=action.value
            )

            return await self.state_machine.transition(context, action)


# ==== UTILITY FUNCTIONS ==== #


def _ensure_utc(value: dt.datetime) -> dt.datetime:
    """Treat naive datetimes as UTC so naive and aware values compare."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
