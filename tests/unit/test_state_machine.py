# ==== STATE MACHINE TEST SUITE ==== #

"""
Tests for the request state machine.

Covers legal and illegal transitions, precondition failures, ordered side
effects and the query helpers.
"""

from unittest.mock import AsyncMock

import pytest

from request_lifecycle.business.errors import (
    IllegalTransitionError,
    TransitionValidationError,
    ValidationFailure,
)
from request_lifecycle.business.statuses import RequestAction, RequestStatus
from request_lifecycle.services import state_machine as state_machine_module
from request_lifecycle.services.state_machine import RequestStateMachine
from request_lifecycle.services.transition_table import (
    SideEffect,
    build_transition_table,
    get_transition_table,
)


@pytest.mark.unit
class TestRequestStateMachine:
    """Test transition execution on the default table."""

    @pytest.fixture
    def machine(self):
        """
        Create state machine instance.

        Returns:
            RequestStateMachine: Machine over the default table
        """
        return RequestStateMachine()

    # ==== LEGAL TRANSITIONS ==== #

    @pytest.mark.asyncio
    async def test_every_registered_transition(self, machine, make_context):
        """
        Test all registered pairs.

        Verifies that each registered (status, action) pair yields its
        declared target when its preconditions are satisfied.
        """
        for registered in get_transition_table():
            context = make_context(registered.from_status, agent_id="agent-7")
            result = await machine.transition(context, registered.action)
            assert result == registered.to_status

    @pytest.mark.asyncio
    async def test_happy_path(self, machine, make_context):
        """Test a request can be driven from creation to completion."""
        context = make_context(agent_id="agent-7")

        for action in (
            RequestAction.START_SEARCH,
            RequestAction.AGENT_ACCEPTED,
            RequestAction.START_WORK,
            RequestAction.EXTEND_SLA,
            RequestAction.RESUME_WORK,
            RequestAction.COMPLETE,
        ):
            context = context.with_status(await machine.transition(context, action))

        assert context.current_status == RequestStatus.COMPLETED

    @pytest.mark.asyncio
    async def test_string_action_accepted(self, machine, make_context):
        result = await machine.transition(make_context(), "START_SEARCH")
        assert result == RequestStatus.PENDING_ASSIGNMENT

    # ==== ILLEGAL TRANSITIONS ==== #

    @pytest.mark.asyncio
    async def test_illegal_transition(self, machine, make_context):
        """Test a pair that is not registered is rejected."""
        with pytest.raises(IllegalTransitionError) as exc_info:
            await machine.transition(make_context(RequestStatus.COMPLETED), RequestAction.START_WORK)

        assert str(exc_info.value) == "Invalid transition: Cannot START_WORK from COMPLETED"
        assert exc_info.value.status == RequestStatus.COMPLETED

    @pytest.mark.asyncio
    async def test_unknown_action_is_illegal(self, machine, make_context):
        with pytest.raises(IllegalTransitionError, match="Cannot FLY_AWAY from CREATED"):
            await machine.transition(make_context(), "FLY_AWAY")

    @pytest.mark.asyncio
    async def test_unregistered_pairs_all_rejected(self, machine, make_context):
        """Test every pair missing from the table is illegal."""
        table = get_transition_table()

        for status in RequestStatus:
            for action in RequestAction:
                if (status, action) in table:
                    continue
                with pytest.raises(IllegalTransitionError):
                    await machine.transition(make_context(status, agent_id="agent-7"), action)

    # ==== VALIDATION FAILURES ==== #

    @pytest.mark.asyncio
    async def test_accept_without_agent(self, machine, make_context):
        """Test accepting without an agent fails validation."""
        with pytest.raises(TransitionValidationError) as exc_info:
            await machine.transition(
                make_context(RequestStatus.PENDING_ASSIGNMENT), RequestAction.AGENT_ACCEPTED
            )

        assert exc_info.value.failure == ValidationFailure.AGENT_REQUIRED
        assert str(exc_info.value) == (
            "Validation failed for transition AGENT_ACCEPTED: Agent ID is required for assignment"
        )

    @pytest.mark.asyncio
    async def test_extension_not_allowed(self, machine, make_context, non_extendable_type):
        context = make_context(RequestStatus.IN_PROGRESS, request_type=non_extendable_type)

        with pytest.raises(TransitionValidationError) as exc_info:
            await machine.transition(context, RequestAction.EXTEND_SLA)

        assert exc_info.value.failure == ValidationFailure.EXTENSION_NOT_ALLOWED

    @pytest.mark.asyncio
    async def test_extension_with_zero_hours(self, machine, make_context, request_type):
        """Test an assigned request cannot extend when zero extension hours are configured."""
        context = make_context(
            RequestStatus.ASSIGNED,
            agent_id="agent-7",
            request_type=request_type.model_copy(update={"extension_hours": 0}),
        )

        with pytest.raises(TransitionValidationError) as exc_info:
            await machine.transition(context, RequestAction.EXTEND_SLA)

        assert exc_info.value.failure == ValidationFailure.NO_EXTENSION_HOURS


@pytest.mark.unit
class TestSideEffects:
    """Test side effect ordering and failure propagation."""

    @pytest.mark.asyncio
    async def test_side_effects_run_in_declared_order(self, make_context):
        """Test effects are awaited sequentially in the order they were bound."""
        calls = []

        async def reserve(context):
            calls.append("reserve")

        async def notify(context):
            calls.append("notify")

        table = build_transition_table({
            RequestAction.AGENT_ACCEPTED: [SideEffect("reserve", reserve), SideEffect("notify", notify)]
        })
        machine = RequestStateMachine(table)

        context = make_context(RequestStatus.PENDING_ASSIGNMENT, agent_id="agent-7")
        result = await machine.transition(context, RequestAction.AGENT_ACCEPTED)

        assert result == RequestStatus.ASSIGNED
        assert calls == ["reserve", "notify"]

    @pytest.mark.asyncio
    async def test_failing_side_effect_stops_later_effects(self, make_context):
        """Test a failing effect propagates its own error and skips the rest."""
        failing = AsyncMock(side_effect=RuntimeError("payment gateway down"))
        later = AsyncMock()

        machine = RequestStateMachine(build_transition_table({
            RequestAction.REFUND: [SideEffect("refund", failing), SideEffect("notify", later)]
        }))
        context = make_context(RequestStatus.REASSIGNMENT_NEEDED)

        with pytest.raises(RuntimeError, match="payment gateway down"):
            await machine.transition(context, RequestAction.REFUND)

        failing.assert_awaited_once_with(context)
        later.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_side_effects_skipped_when_validation_fails(self, make_context):
        effect = AsyncMock()
        machine = RequestStateMachine(build_transition_table({
            RequestAction.AGENT_ACCEPTED: [SideEffect("reserve", effect)]
        }))

        with pytest.raises(TransitionValidationError):
            await machine.transition(
                make_context(RequestStatus.PENDING_ASSIGNMENT), RequestAction.AGENT_ACCEPTED
            )

        effect.assert_not_awaited()


@pytest.mark.unit
class TestQueries:
    """Test read-only state machine queries."""

    def test_can_transition(self):
        machine = RequestStateMachine()

        assert machine.can_transition(RequestStatus.CREATED, RequestAction.START_SEARCH)
        assert not machine.can_transition(RequestStatus.CREATED, RequestAction.COMPLETE)
        assert not machine.can_transition(RequestStatus.CREATED, "FLY_AWAY")

    def test_can_transition_ignores_validations(self):
        """Test a guarded move is reported possible without running checks."""
        assert state_machine_module.can_transition(
            RequestStatus.PENDING_ASSIGNMENT, RequestAction.AGENT_ACCEPTED
        )

    def test_possible_actions(self):
        actions = state_machine_module.get_possible_actions(RequestStatus.CREATED)

        assert set(actions) == {
            RequestAction.START_SEARCH,
            RequestAction.SCHEDULE,
            RequestAction.CANCEL_BY_CUSTOMER,
        }

    def test_possible_actions_is_stable(self):
        """Test repeated queries return the same answer."""
        first = state_machine_module.get_possible_actions(RequestStatus.IN_PROGRESS)
        second = state_machine_module.get_possible_actions(RequestStatus.IN_PROGRESS)
        assert first == second

    def test_possible_actions_unknown_status(self):
        assert state_machine_module.get_possible_actions("BOGUS") == []

    def test_lifecycle_timeline(self):
        timeline = RequestStateMachine().get_lifecycle_timeline()

        assert len(timeline) == 14
        assert sum(1 for entry in timeline if entry["is_final"]) == 5

    @pytest.mark.asyncio
    async def test_module_transition_uses_global_machine(self, make_context):
        result = await state_machine_module.transition(make_context(), RequestAction.SCHEDULE)
        assert result == RequestStatus.SCHEDULED
