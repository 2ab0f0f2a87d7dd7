# ==== TRANSITION TABLE ==== #

"""
Static registry of legal request transitions.

This module defines the transition, validation and side-effect descriptors
and builds the immutable table the state machine consults. Side effects are
bound at build time; a built table has no mutation path.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import (
    Awaitable,
    Callable,
    Dict,
    Iterator,
    List,
    Mapping,
    Optional,
    Sequence,
    Tuple,
    Union,
)

from request_lifecycle.business.errors import ValidationFailure
from request_lifecycle.business.statuses import RequestAction, RequestStatus
from request_lifecycle.schemas.context import RequestContext


# ==== VALIDATION RESULT ==== #


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of a transition precondition: pass, or a typed failure."""
    passed: bool
    failure: Optional[ValidationFailure] = None
    message: Optional[str] = None

    @classmethod
    def ok(cls) -> "ValidationResult":
        return cls(passed=True)

    @classmethod
    def fail(cls, failure: ValidationFailure, message: str) -> "ValidationResult":
        return cls(passed=False, failure=failure, message=message)


Validator = Callable[[RequestContext], ValidationResult]


# ==== SIDE EFFECT DESCRIPTOR ==== #


@dataclass(frozen=True)
class SideEffect:
    """
    Named asynchronous operation run when a transition commits.

    Attributes:
        name: Identifier used in logs and metrics
        handler: Coroutine function receiving the request context
    """
    name: str
    handler: Callable[[RequestContext], Awaitable[None]]

    async def run(self, context: RequestContext) -> None:
        await self.handler(context)


# ==== TRANSITION DESCRIPTOR ==== #


@dataclass(frozen=True)
class StateTransition:
    """A legal (from status, action) → to status move."""
    from_status: RequestStatus
    action: RequestAction
    to_status: RequestStatus
    validations: Tuple[Validator, ...] = ()
    side_effects: Tuple[SideEffect, ...] = ()

    @property
    def key(self) -> Tuple[RequestStatus, RequestAction]:
        return (self.from_status, self.action)


# ==== VALIDATORS ==== #


def validate_agent_assignment(context: RequestContext) -> ValidationResult:
    """An agent must be present to accept a request."""
    if not context.agent_id:
        return ValidationResult.fail(
            ValidationFailure.AGENT_REQUIRED,
            "Agent ID is required for assignment"
        )
    return ValidationResult.ok()


def validate_extension_request(context: RequestContext) -> ValidationResult:
    """The request type must allow extensions and configure extension hours."""
    request_type = context.request_type
    if not request_type.allow_extension:
        return ValidationResult.fail(
            ValidationFailure.EXTENSION_NOT_ALLOWED,
            "Extensions are not allowed for this request type"
        )
    if not request_type.extension_hours:
        return ValidationResult.fail(
            ValidationFailure.NO_EXTENSION_HOURS,
            "No extension hours configured for this request type"
        )
    return ValidationResult.ok()


# ==== TRANSITION DEFINITIONS ==== #


# (from statuses, action, to status, validations)
_TRANSITION_ROWS: List[Tuple[Tuple[RequestStatus, ...], RequestAction, RequestStatus, Tuple[Validator, ...]]] = [
    ((RequestStatus.CREATED,), RequestAction.START_SEARCH, RequestStatus.PENDING_ASSIGNMENT, ()),
    ((RequestStatus.CREATED,), RequestAction.SCHEDULE, RequestStatus.SCHEDULED, ()),
    ((RequestStatus.PENDING_ASSIGNMENT,), RequestAction.AGENT_ACCEPTED, RequestStatus.ASSIGNED,
     (validate_agent_assignment,)),
    ((RequestStatus.PENDING_ASSIGNMENT,), RequestAction.NO_AGENT_FOUND, RequestStatus.REFUNDED, ()),
    ((RequestStatus.PENDING_ASSIGNMENT,), RequestAction.SLA_EXPIRED, RequestStatus.EXPIRED, ()),
    ((RequestStatus.SCHEDULED,), RequestAction.ACTIVATE_SCHEDULED, RequestStatus.PENDING_ASSIGNMENT, ()),
    ((RequestStatus.ASSIGNED,), RequestAction.START_WORK, RequestStatus.IN_PROGRESS, ()),
    ((RequestStatus.ASSIGNED, RequestStatus.IN_PROGRESS), RequestAction.EXTEND_SLA, RequestStatus.EXTENDED,
     (validate_extension_request,)),
    ((RequestStatus.IN_PROGRESS, RequestStatus.EXTENDED), RequestAction.COMPLETE, RequestStatus.COMPLETED, ()),
    ((RequestStatus.EXTENDED,), RequestAction.RESUME_WORK, RequestStatus.IN_PROGRESS, ()),
    ((RequestStatus.ASSIGNED, RequestStatus.IN_PROGRESS, RequestStatus.EXTENDED),
     RequestAction.COMPLETION_SLA_EXPIRED, RequestStatus.EXPIRED, ()),
    ((RequestStatus.CREATED, RequestStatus.PENDING_ASSIGNMENT, RequestStatus.SCHEDULED, RequestStatus.ASSIGNED),
     RequestAction.CANCEL_BY_CUSTOMER, RequestStatus.CANCELLED, ()),
    ((RequestStatus.ASSIGNED, RequestStatus.IN_PROGRESS, RequestStatus.EXTENDED),
     RequestAction.AGENT_FAILED, RequestStatus.REASSIGNMENT_NEEDED, ()),
    ((RequestStatus.REASSIGNMENT_NEEDED,), RequestAction.RETRY_ASSIGNMENT, RequestStatus.PENDING_ASSIGNMENT, ()),
    ((RequestStatus.REASSIGNMENT_NEEDED,), RequestAction.REFUND, RequestStatus.REFUNDED, ()),
    ((RequestStatus.COMPLETED,), RequestAction.START_RECURRING, RequestStatus.RECURRING_ACTIVE, ()),
    ((RequestStatus.RECURRING_ACTIVE,), RequestAction.PAUSE_RECURRING, RequestStatus.RECURRING_PAUSED, ()),
    ((RequestStatus.RECURRING_PAUSED,), RequestAction.RESUME_RECURRING, RequestStatus.RECURRING_ACTIVE, ()),
    ((RequestStatus.RECURRING_ACTIVE,), RequestAction.COMPLETE_RECURRING, RequestStatus.RECURRING_COMPLETED, ()),
]


# ==== TRANSITION TABLE ==== #


TransitionKey = Tuple[RequestStatus, RequestAction]
SideEffectKey = Union[RequestAction, TransitionKey]


class TransitionTable:
    """
    Immutable mapping of (from status, action) to transition.

    Built once and shared read-only; lookups never raise.
    """

    __slots__ = ("_transitions",)

    def __init__(self, transitions: Sequence[StateTransition]):
        registry: Dict[TransitionKey, StateTransition] = {}
        for transition in transitions:
            if transition.key in registry:
                raise ValueError(
                    f"Duplicate transition for {transition.from_status.value}:{transition.action.value}"
                )
            registry[transition.key] = transition
        self._transitions: Mapping[TransitionKey, StateTransition] = MappingProxyType(registry)

    def lookup(self, from_status, action) -> Optional[StateTransition]:
        """
        Find the transition registered for a status and action.

        Args:
            from_status: Current status (enum member or value)
            action: Requested action (enum member or value)

        Returns:
            Optional[StateTransition]: The transition, or None when the move
                                       is illegal or the action is unknown
        """
        key = _normalize_key(from_status, action)
        if key is None:
            return None
        return self._transitions.get(key)

    def actions_from(self, status) -> List[RequestAction]:
        """List actions registered from a status; empty for unknown statuses."""
        try:
            status = RequestStatus(status)
        except ValueError:
            return []
        return [action for (from_status, action) in self._transitions if from_status == status]

    def __contains__(self, key) -> bool:
        from_status, action = key
        return self.lookup(from_status, action) is not None

    def __iter__(self) -> Iterator[StateTransition]:
        return iter(self._transitions.values())

    def __len__(self) -> int:
        return len(self._transitions)


def build_transition_table(
    side_effects: Optional[Mapping[SideEffectKey, Sequence[SideEffect]]] = None
) -> TransitionTable:
    """
    Build the transition table with side effects bound in declared order.

    Side effects keyed by an action apply to every transition with that
    action; effects keyed by a (status, action) pair apply to that transition
    only and run after the action-wide ones.

    Args:
        side_effects: Ordered side effects per action or per (status, action)

    Returns:
        TransitionTable: Immutable table

    Raises:
        ValueError: If a side-effect key matches no registered transition
    """
    side_effects = side_effects or {}
    transitions: List[StateTransition] = []

    for from_statuses, action, to_status, validations in _TRANSITION_ROWS:
        for from_status in from_statuses:
            effects = tuple(side_effects.get(action, ())) + tuple(side_effects.get((from_status, action), ()))
            transitions.append(StateTransition(
                from_status=from_status,
                action=action,
                to_status=to_status,
                validations=validations,
                side_effects=effects,
            ))

    table = TransitionTable(transitions)

    for key in side_effects:
        if isinstance(key, tuple):
            if key not in table:
                raise ValueError(f"No transition registered for side effect key {key!r}")
        elif not any(transition.action == RequestAction(key) for transition in table):
            raise ValueError(f"No transition registered for action {key!r}")

    return table


# ==== DEFAULT TABLE ==== #


_default_table: Optional[TransitionTable] = None


def get_transition_table() -> TransitionTable:
    """
    Get the process-wide default table (no side effects).

    Built lazily on first use; subsequent calls return the same instance.
    """
    global _default_table
    if _default_table is None:
        _default_table = build_transition_table()
    return _default_table


def _normalize_key(from_status, action) -> Optional[TransitionKey]:
    try:
        return (RequestStatus(from_status), RequestAction(action))
    except ValueError:
        return None
