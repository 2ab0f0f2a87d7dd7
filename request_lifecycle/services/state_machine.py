# ==== REQUEST STATE MACHINE SERVICE ==== #

"""
State machine for the verification request lifecycle.

This module executes requested actions against a request context using the
transition table: it rejects illegal moves, runs preconditions, executes side
effects strictly in order and returns the next status for the caller to
persist. The engine holds no per-request state.
"""

import time
from typing import Any, Dict, List, Optional, Union

from request_lifecycle.business.errors import IllegalTransitionError, TransitionValidationError
from request_lifecycle.business.statuses import RequestAction, RequestStatus, get_lifecycle_timeline
from request_lifecycle.observability.logging import get_logger, log_business_event
from request_lifecycle.observability.metrics import (
    side_effect_duration_seconds,
    transition_failures_total,
    transitions_total,
)
from request_lifecycle.observability.tracing import get_tracer
from request_lifecycle.schemas.context import RequestContext
from request_lifecycle.services.transition_table import (
    StateTransition,
    TransitionTable,
    get_transition_table,
)


# ==== MODULE INITIALIZATION ==== #


tracer = get_tracer(__name__)
logger = get_logger(__name__)

ActionInput = Union[RequestAction, str]


# ==== STATE MACHINE CLASS ==== #


class RequestStateMachine:
    """
    Finite state machine over the request lifecycle.

    Wraps an immutable transition table. Concurrent calls for different
    requests are independent; callers must not run two transitions for the
    same request at once.
    """

    def __init__(self, table: Optional[TransitionTable] = None):
        """
        Initialize the state machine.

        Args:
            table (Optional[TransitionTable]): Transition table to execute;
                the process-wide default table when omitted
        """
        self.table = table if table is not None else get_transition_table()

    # ==== TRANSITION EXECUTION ==== #

    async def transition(self, context: RequestContext, action: ActionInput) -> RequestStatus:
        """
        Attempt to move a request to its next status.

        Looks up the transition for the context's current status and the
        action, runs every validation in order, then awaits each side effect
        in declared order. Nothing is applied if any step fails.

        Args:
            context (RequestContext): Current request snapshot
            action (ActionInput): Action to perform

        Returns:
            RequestStatus: Target status for the caller to persist

        Raises:
            IllegalTransitionError: If the action is not legal from the
                                    current status
            TransitionValidationError: If a precondition rejects the attempt
            Exception: Whatever a side effect raised, unchanged
        """
        from_status = context.current_status
        action_label = getattr(action, "value", action)

        with tracer.start_as_current_span("state_transition") as span:
            span.set_attribute("request_id", context.request_id)
            span.set_attribute("from_status", from_status.value)
            span.set_attribute("action", str(action_label))

            logger.debug(
                f"Attempting transition: {from_status.value} -> {action_label}",
                request_id=context.request_id
            )

            transition = self.table.lookup(from_status, action)
            if transition is None:
                self._record_failure(action_label, "illegal_transition")
                raise IllegalTransitionError(from_status, action)

            self._run_validations(transition, context)

            try:
                await self._run_side_effects(transition, context)
            except Exception as e:
                self._record_failure(action_label, "side_effect_failed")
                logger.warning(
                    f"Side effect failed during {transition.action.value}: {e}",
                    request_id=context.request_id,
                    error_type=type(e).__name__
                )
                raise

            span.set_attribute("to_status", transition.to_status.value)
            transitions_total.labels(
                from_status=from_status.value,
                action=transition.action.value,
                to_status=transition.to_status.value
            ).inc()

            log_business_event(
                "request_transition",
                context.request_id,
                from_status=from_status.value,
                action=transition.action.value,
                to_status=transition.to_status.value
            )
            logger.info(
                f"Transition successful: {from_status.value} -> {transition.to_status.value}",
                request_id=context.request_id
            )

            return transition.to_status

    def _run_validations(self, transition: StateTransition, context: RequestContext) -> None:
        for validation in transition.validations:
            result = validation(context)
            if not result.passed:
                self._record_failure(transition.action.value, "validation_failed")
                logger.warning(
                    f"Validation failed for transition {transition.action.value}: {result.message}",
                    request_id=context.request_id,
                    failure=result.failure.value if result.failure else None
                )
                raise TransitionValidationError(transition.action, result.failure, result.message)

    async def _run_side_effects(self, transition: StateTransition, context: RequestContext) -> None:
        # Strictly sequential: later effects may depend on earlier ones
        for effect in transition.side_effects:
            started = time.perf_counter()
            try:
                await effect.run(context)
            finally:
                side_effect_duration_seconds.labels(effect=effect.name).observe(
                    time.perf_counter() - started
                )

    def _record_failure(self, action_label: Any, error_type: str) -> None:
        transition_failures_total.labels(action=str(action_label), error_type=error_type).inc()

    # ==== QUERIES ==== #

    def can_transition(self, current_status: RequestStatus, action: ActionInput) -> bool:
        """Check whether an action is registered from a status (no validation)."""
        return self.table.lookup(current_status, action) is not None

    def get_possible_actions(self, current_status: RequestStatus) -> List[RequestAction]:
        """List every action registered from a status."""
        return self.table.actions_from(current_status)

    def get_lifecycle_timeline(self) -> List[Dict[str, Any]]:
        return get_lifecycle_timeline()


# ==== GLOBAL SERVICE INSTANCE ==== #


_state_machine: Optional[RequestStateMachine] = None


def get_state_machine() -> RequestStateMachine:
    """
    Get global state machine instance.

    Uses the default transition table, which has no side effects bound.
    Applications that register side effects build their own
    ``RequestStateMachine(build_transition_table(...))``.

    Returns:
        RequestStateMachine: Global state machine instance
    """
    global _state_machine
    if _state_machine is None:
        _state_machine = RequestStateMachine()
    return _state_machine


# ==== CONVENIENCE FUNCTIONS ==== #


async def transition(context: RequestContext, action: ActionInput) -> RequestStatus:
    """Run a transition on the global state machine."""
    return await get_state_machine().transition(context, action)


def can_transition(current_status: RequestStatus, action: ActionInput) -> bool:
    return get_state_machine().can_transition(current_status, action)


def get_possible_actions(current_status: RequestStatus) -> List[RequestAction]:
    return get_state_machine().get_possible_actions(current_status)
