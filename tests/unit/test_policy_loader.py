"""Unit tests for the request-type policy loader."""

import pytest

from request_lifecycle.business.errors import UnknownRequestTypeError
from request_lifecycle.business.tiered_pricing import TieredPricing
from request_lifecycle.services import policy_loader
from request_lifecycle.services.sla_engine import calculate_sla_deadlines
from request_lifecycle.settings import get_settings


@pytest.mark.unit
class TestPolicyLoader:
    """Test loading the bundled request-type catalog."""

    def test_lists_catalog_types(self):
        names = policy_loader.list_request_types()

        assert len(names) == 12
        assert names[0] == "standard_verification"
        assert "recurring_verification" in names

    def test_standard_verification(self):
        config = policy_loader.get_request_type_config("standard_verification")

        assert config.name == "standard_verification"
        assert config.sla_hours == 24
        assert config.completion_sla_hours == 1
        assert config.allow_extension is True
        assert config.extension_hours == 24
        assert config.allows_recurring is True

    def test_urgent_priority_has_no_extension(self):
        config = policy_loader.get_request_type_config("urgent_priority")

        assert config.completion_sla_hours == 0.5
        assert config.allow_extension is False
        assert config.extension_hours is None

    def test_tiers_feed_tiered_pricing(self):
        """Test catalog tiers build a valid pricing value object."""
        config = policy_loader.get_request_type_config("site_survey")
        pricing = TieredPricing([tier.model_dump() for tier in config.tiered_pricing])

        assert pricing.get_available_tiers() == ["RESIDENTIAL", "COMMERCIAL", "WAREHOUSE"]

    def test_recurring_options(self):
        options = policy_loader.get_request_type_config("recurring_verification").recurring_options

        assert options.frequencies == ["WEEKLY", "MONTHLY"]
        assert options.min_occurrences == 4
        assert options.max_occurrences == 52
        assert options.discount_percentage == 20

    def test_catalog_drives_deadlines(self):
        import datetime as dt

        config = policy_loader.get_request_type_config("research_request")
        created = dt.datetime(2024, 3, 1, tzinfo=dt.timezone.utc)
        deadlines = calculate_sla_deadlines(config, created)

        assert deadlines.completion_deadline == created + dt.timedelta(hours=52)

    def test_unknown_type(self):
        with pytest.raises(UnknownRequestTypeError) as exc_info:
            policy_loader.get_request_type_config("teleportation")

        assert str(exc_info.value) == "Unknown request type: teleportation"
        assert isinstance(exc_info.value, KeyError)

    def test_lookups_are_cached(self):
        first = policy_loader.get_request_type_config("virtual_tour")
        assert policy_loader.get_request_type_config("virtual_tour") is first

    def test_path_override(self, tmp_path, monkeypatch):
        """Test REQUEST_TYPES_PATH points the loader at another catalog."""
        catalog = tmp_path / "types.yaml"
        catalog.write_text(
            "site_visit:\n"
            "  sla_hours: 2\n"
            "  completion_sla_hours: 1\n",
            encoding="utf-8",
        )
        monkeypatch.setattr(get_settings(), "REQUEST_TYPES_PATH", str(catalog))
        policy_loader.clear_cache()

        assert policy_loader.list_request_types() == ["site_visit"]
        assert policy_loader.get_request_type_config("site_visit").sla_hours == 2
