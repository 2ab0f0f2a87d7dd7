"""
Request lifecycle engine for on-demand verification services.

Drives a verification request through its lifecycle with a table-driven state
machine, computes and enforces SLA deadlines, and provides the recurring
schedule and tiered pricing value objects.
"""

__version__ = "0.1.0"

from request_lifecycle.business.errors import (
    IllegalTransitionError,
    InvalidTierError,
    LifecycleError,
    PricingValidationError,
    ScheduleValidationError,
    TransitionValidationError,
    UnknownRequestTypeError,
    ValidationFailure,
)
from request_lifecycle.business.recurring_schedule import RecurringOccurrence, RecurringSchedule
from request_lifecycle.business.statuses import (
    OccurrenceStatus,
    RecurringFrequency,
    RequestAction,
    RequestStatus,
)
from request_lifecycle.business.tiered_pricing import TieredPricing, TieredPricingOption
from request_lifecycle.schemas import RequestContext, RequestTypeConfig
from request_lifecycle.services.recurrence import calculate_next_occurrence
from request_lifecycle.services.sla_engine import calculate_sla_deadlines, is_overdue
from request_lifecycle.services.state_machine import (
    RequestStateMachine,
    can_transition,
    get_possible_actions,
    transition,
)
from request_lifecycle.services.transition_table import SideEffect, build_transition_table

__all__ = [
    "IllegalTransitionError",
    "InvalidTierError",
    "LifecycleError",
    "OccurrenceStatus",
    "PricingValidationError",
    "RecurringFrequency",
    "RecurringOccurrence",
    "RecurringSchedule",
    "RequestAction",
    "RequestContext",
    "RequestStateMachine",
    "RequestStatus",
    "RequestTypeConfig",
    "ScheduleValidationError",
    "SideEffect",
    "TieredPricing",
    "TieredPricingOption",
    "TransitionValidationError",
    "UnknownRequestTypeError",
    "ValidationFailure",
    "build_transition_table",
    "calculate_next_occurrence",
    "calculate_sla_deadlines",
    "can_transition",
    "get_possible_actions",
    "is_overdue",
    "transition",
]
