# ==== SHARED TEST FIXTURES AND CONFIGURATION ==== #

"""
Shared test fixtures and configuration.

This module pins the environment before any package import and provides
request-type and request-context builders used across the unit suites.
"""

import os
from datetime import datetime, timezone

import pytest


# ==== FORCE ENVIRONMENT SETUP BEFORE ANY IMPORTS ==== #

# Set environment variables BEFORE importing any package modules
os.environ.update({
    "APP_ENV": "test",
    "LOG_LEVEL": "WARNING",
})
os.environ.pop("OTEL_EXPORTER_OTLP_ENDPOINT", None)
os.environ.pop("REQUEST_TYPES_PATH", None)

# Now import package modules after environment is set
from request_lifecycle.business.statuses import RequestStatus
from request_lifecycle.schemas.context import RequestContext, RequestTypeConfig
from request_lifecycle.services import policy_loader


CREATED_AT = datetime(2024, 1, 1, 9, 0, tzinfo=timezone.utc)


# ==== REQUEST TYPE FIXTURES ==== #


@pytest.fixture
def request_type():
    """
    Request type with a 24h search window and a 48h completion window.

    Returns:
        RequestTypeConfig: Extendable request type
    """
    return RequestTypeConfig(
        name="standard_verification",
        sla_hours=24,
        completion_sla_hours=48,
        allow_extension=True,
        extension_hours=24,
    )


@pytest.fixture
def non_extendable_type():
    """Request type that does not allow SLA extensions."""
    return RequestTypeConfig(
        name="urgent_priority",
        sla_hours=6,
        completion_sla_hours=0.5,
        allow_extension=False,
    )


# ==== REQUEST CONTEXT FIXTURES ==== #


@pytest.fixture
def make_context(request_type):
    """
    Factory for request contexts.

    Returns:
        Callable: Builds a RequestContext for a status with optional overrides
    """
    def _make(status=RequestStatus.CREATED, **overrides):
        fields = {
            "request_id": "req-001",
            "current_status": status,
            "request_type": request_type,
            "customer_id": "cust-001",
            "created_at": CREATED_AT,
        }
        fields.update(overrides)
        return RequestContext(**fields)

    return _make


# ==== CACHE CLEANUP ==== #


@pytest.fixture(autouse=True)
def clear_policy_cache():
    """Keep request-type catalog lookups isolated between tests."""
    policy_loader.clear_cache()
    yield
    policy_loader.clear_cache()
