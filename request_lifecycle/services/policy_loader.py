# ==== POLICY LOADER SERVICE ==== #

"""
Policy loader for request-type configurations.

This module loads the request-type catalog (SLA hours, extension policy,
tier tables and recurring options) from YAML and validates each entry into
a ``RequestTypeConfig``, with caching so repeated lookups do not touch disk.
"""

import functools
import os
from typing import Any, Dict, List, Optional

import yaml

from request_lifecycle.business.errors import UnknownRequestTypeError
from request_lifecycle.observability.logging import get_logger
from request_lifecycle.observability.tracing import get_tracer
from request_lifecycle.schemas.context import RequestTypeConfig
from request_lifecycle.settings import get_settings


tracer = get_tracer(__name__)
logger = get_logger(__name__)

DEFAULT_CATALOG_PATH = os.path.join(
    os.path.dirname(__file__),
    "..",
    "business",
    "policies",
    "request_types.yaml"
)


# ==== CATALOG LOADING ==== #


@functools.lru_cache(maxsize=8)
def load_request_type_catalog(path: Optional[str] = None) -> Dict[str, Dict[str, Any]]:
    """
    Load the raw request-type catalog.

    Args:
        path (Optional[str]): Catalog file; ``REQUEST_TYPES_PATH`` or the
                              bundled catalog when omitted

    Returns:
        Dict[str, Dict[str, Any]]: Request type name to raw configuration
    """
    catalog_path = path or get_settings().REQUEST_TYPES_PATH or DEFAULT_CATALOG_PATH

    with tracer.start_as_current_span("load_request_type_catalog") as span:
        span.set_attribute("path", catalog_path)

        with open(catalog_path, "r", encoding="utf-8") as f:
            catalog = yaml.safe_load(f) or {}

        if not isinstance(catalog, dict):
            raise ValueError(f"Request type catalog must be a mapping: {catalog_path}")

        span.set_attribute("request_type_count", len(catalog))
        logger.debug(f"Loaded {len(catalog)} request types", path=catalog_path)
        return catalog


@functools.lru_cache(maxsize=64)
def get_request_type_config(name: str) -> RequestTypeConfig:
    """
    Get the configuration for a request type.

    Args:
        name (str): Request type name, e.g. ``standard_verification``

    Returns:
        RequestTypeConfig: Validated, immutable configuration

    Raises:
        UnknownRequestTypeError: If the catalog has no such request type
        pydantic.ValidationError: If the catalog entry is malformed
    """
    with tracer.start_as_current_span("load_request_type_config") as span:
        span.set_attribute("request_type", name)

        catalog = load_request_type_catalog()
        if name not in catalog:
            span.set_attribute("config_loaded", False)
            raise UnknownRequestTypeError(name)

        config = RequestTypeConfig.model_validate({"name": name, **(catalog[name] or {})})
        span.set_attribute("config_loaded", True)
        return config


def list_request_types() -> List[str]:
    """List the request type names in catalog order."""
    return list(load_request_type_catalog())


# ==== CACHE MANAGEMENT ==== #


def clear_cache() -> None:
    """
    Clear request-type configuration cache.

    Call after changing ``REQUEST_TYPES_PATH`` or editing the catalog file.
    """
    load_request_type_catalog.cache_clear()
    get_request_type_config.cache_clear()
