# ==== REQUEST STATUSES AND ACTIONS ==== #

"""
Status and action vocabulary for the service-verification request lifecycle.

This module defines the closed set of request statuses, the actions that move
a request between them, occurrence and frequency enums for recurring requests,
and the per-status metadata used to render the lifecycle timeline.
"""

from enum import Enum
from typing import Any, Dict, List


# ==== ENUMERATION DEFINITIONS ==== #


class RequestStatus(str, Enum):
    """
    Lifecycle statuses of a verification request.

    Status progression: CREATED → PENDING_ASSIGNMENT → ASSIGNED → IN_PROGRESS
    → COMPLETED, with scheduling, extension, reassignment, expiry and
    recurring branches defined by the transition table.
    """

    CREATED = "CREATED"
    PENDING_ASSIGNMENT = "PENDING_ASSIGNMENT"
    SCHEDULED = "SCHEDULED"
    ASSIGNED = "ASSIGNED"
    IN_PROGRESS = "IN_PROGRESS"
    EXTENDED = "EXTENDED"
    REASSIGNMENT_NEEDED = "REASSIGNMENT_NEEDED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"
    EXPIRED = "EXPIRED"
    REFUNDED = "REFUNDED"
    RECURRING_ACTIVE = "RECURRING_ACTIVE"
    RECURRING_PAUSED = "RECURRING_PAUSED"
    RECURRING_COMPLETED = "RECURRING_COMPLETED"


class RequestAction(str, Enum):
    """Actions a caller may request against the current status."""

    START_SEARCH = "START_SEARCH"
    SCHEDULE = "SCHEDULE"
    AGENT_ACCEPTED = "AGENT_ACCEPTED"
    NO_AGENT_FOUND = "NO_AGENT_FOUND"
    SLA_EXPIRED = "SLA_EXPIRED"
    ACTIVATE_SCHEDULED = "ACTIVATE_SCHEDULED"
    START_WORK = "START_WORK"
    EXTEND_SLA = "EXTEND_SLA"
    COMPLETION_SLA_EXPIRED = "COMPLETION_SLA_EXPIRED"
    COMPLETE = "COMPLETE"
    RESUME_WORK = "RESUME_WORK"
    CANCEL_BY_CUSTOMER = "CANCEL_BY_CUSTOMER"
    AGENT_FAILED = "AGENT_FAILED"
    RETRY_ASSIGNMENT = "RETRY_ASSIGNMENT"
    REFUND = "REFUND"
    START_RECURRING = "START_RECURRING"
    PAUSE_RECURRING = "PAUSE_RECURRING"
    RESUME_RECURRING = "RESUME_RECURRING"
    COMPLETE_RECURRING = "COMPLETE_RECURRING"


class RecurringFrequency(str, Enum):
    """How often a recurring request repeats."""

    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"


class OccurrenceStatus(str, Enum):
    """Status of a single occurrence of a recurring request."""

    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    SKIPPED = "SKIPPED"


# ==== STATUS GROUPS ==== #


# Statuses from which no further lifecycle progress is expected
TERMINAL_STATUSES = frozenset({
    RequestStatus.COMPLETED,
    RequestStatus.CANCELLED,
    RequestStatus.EXPIRED,
    RequestStatus.REFUNDED,
    RequestStatus.RECURRING_COMPLETED,
})

# Statuses during which the completion SLA is running
WORKING_STATUSES = frozenset({
    RequestStatus.ASSIGNED,
    RequestStatus.IN_PROGRESS,
    RequestStatus.EXTENDED,
})


# ==== LIFECYCLE METADATA ==== #


STATUS_METADATA: Dict[RequestStatus, Dict[str, Any]] = {
    RequestStatus.CREATED: {
        "description": "Request created by customer",
    },
    RequestStatus.PENDING_ASSIGNMENT: {
        "description": "Searching for qualified agent",
    },
    RequestStatus.SCHEDULED: {
        "description": "Scheduled for future date/time",
    },
    RequestStatus.ASSIGNED: {
        "description": "Agent accepted, preparing to start",
    },
    RequestStatus.IN_PROGRESS: {
        "description": "Agent working on request",
    },
    RequestStatus.EXTENDED: {
        "description": "SLA extended by customer",
    },
    RequestStatus.REASSIGNMENT_NEEDED: {
        "description": "Agent failed, finding replacement",
    },
    RequestStatus.COMPLETED: {
        "description": "Request completed successfully",
    },
    RequestStatus.CANCELLED: {
        "description": "Request cancelled by customer",
    },
    RequestStatus.EXPIRED: {
        "description": "Request expired due to SLA breach",
    },
    RequestStatus.REFUNDED: {
        "description": "Request refunded to customer",
    },
    RequestStatus.RECURRING_ACTIVE: {
        "description": "Recurring request active",
    },
    RequestStatus.RECURRING_PAUSED: {
        "description": "Recurring request paused",
    },
    RequestStatus.RECURRING_COMPLETED: {
        "description": "All recurring occurrences completed",
    },
}

_missing = [status for status in RequestStatus if status not in STATUS_METADATA]
if _missing:
    raise RuntimeError(f"Missing STATUS_METADATA for: {[m.value for m in _missing]}")


# ==== BUSINESS RULE FUNCTIONS ==== #


def is_terminal(status: RequestStatus) -> bool:
    """
    Check whether a status is final.

    Args:
        status (RequestStatus): Status to check

    Returns:
        bool: True for COMPLETED, CANCELLED, EXPIRED, REFUNDED and
              RECURRING_COMPLETED
    """
    return RequestStatus(status) in TERMINAL_STATUSES


def get_status_description(status: RequestStatus) -> str:
    """Get the human-readable description for a status."""
    return STATUS_METADATA[RequestStatus(status)]["description"]


def get_lifecycle_timeline() -> List[Dict[str, Any]]:
    """
    Get the request lifecycle timeline.

    Lists every status in declaration order together with its description
    and whether it is final, for clients rendering the lifecycle.

    Returns:
        List[Dict[str, Any]]: Entries with ``status``, ``description`` and
                              ``is_final`` keys
    """
    return [
        {
            "status": status,
            "description": STATUS_METADATA[status]["description"],
            "is_final": status in TERMINAL_STATUSES,
        }
        for status in RequestStatus
    ]
