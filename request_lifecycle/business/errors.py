# ==== LIFECYCLE ERROR TAXONOMY ==== #

"""
Errors raised by the request lifecycle engine.

Every failure is an ordinary exception scoped to the single operation that
raised it. Side-effect failures are not wrapped: the side effect's own
exception reaches the caller unchanged.
"""

from enum import Enum
from typing import Iterable


class LifecycleError(Exception):
    """Base class for lifecycle engine errors."""
    pass


class IllegalTransitionError(LifecycleError):
    """Raised when no transition is registered for (status, action)."""

    def __init__(self, status, action):
        self.status = status
        self.action = action
        super().__init__(
            f"Invalid transition: Cannot {_label(action)} from {_label(status)}"
        )


class ValidationFailure(str, Enum):
    """Typed reasons a transition precondition can reject an attempt."""

    AGENT_REQUIRED = "AGENT_REQUIRED"
    EXTENSION_NOT_ALLOWED = "EXTENSION_NOT_ALLOWED"
    NO_EXTENSION_HOURS = "NO_EXTENSION_HOURS"


class TransitionValidationError(LifecycleError):
    """Raised when a registered precondition rejects a transition."""

    def __init__(self, action, failure: ValidationFailure, message: str):
        self.action = action
        self.failure = failure
        self.message = message
        super().__init__(f"Validation failed for transition {_label(action)}: {message}")


class ScheduleValidationError(LifecycleError, ValueError):
    """Raised when a recurring schedule is built from invalid input."""
    pass


class PricingValidationError(LifecycleError, ValueError):
    """Raised when pricing input is malformed."""
    pass


class InvalidTierError(LifecycleError, ValueError):
    """Raised when a tier name does not match any pricing option."""

    def __init__(self, tier: str, available_tiers: Iterable[str]):
        self.tier = tier
        self.available_tiers = list(available_tiers)
        super().__init__(
            f"Invalid tier: {tier}. Available tiers: {', '.join(self.available_tiers)}"
        )


class UnknownRequestTypeError(LifecycleError, KeyError):
    """Raised when a request type is not present in the catalog."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(name)

    def __str__(self) -> str:
        return f"Unknown request type: {self.name}"


def _label(value) -> str:
    return getattr(value, "value", value)
