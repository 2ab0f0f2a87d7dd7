"""Unit tests for the tiered and recurring price calculators."""

import pytest

from request_lifecycle.business.errors import InvalidTierError, PricingValidationError
from request_lifecycle.business.tiered_pricing import TieredPricing
from request_lifecycle.services.pricing import RecurringDiscountCalculator, TieredPriceCalculator


SITE_SURVEY_TIERS = [
    {"tier": "RESIDENTIAL", "description": "Apartment, house", "price": 2000000},
    {"tier": "COMMERCIAL", "description": "Shop, office", "price": 3500000},
    {"tier": "WAREHOUSE", "description": "Warehouse, factory", "price": 5000000},
]


@pytest.mark.unit
class TestTieredPriceCalculator:
    """Test tier price resolution."""

    @pytest.fixture
    def calculator(self):
        return TieredPriceCalculator()

    def test_calculate_price(self, calculator):
        assert calculator.calculate_price("commercial", SITE_SURVEY_TIERS) == 3500000

    def test_accepts_built_pricing(self, calculator):
        pricing = TieredPricing(SITE_SURVEY_TIERS)
        assert calculator.calculate_price("WAREHOUSE", pricing) == 5000000

    def test_blank_tier(self, calculator):
        with pytest.raises(PricingValidationError, match="selected_tier is required"):
            calculator.calculate_price("  ", SITE_SURVEY_TIERS)

    def test_empty_table(self, calculator):
        with pytest.raises(PricingValidationError, match="cannot be empty"):
            calculator.calculate_price("BASIC", [])

    def test_unknown_tier(self, calculator):
        with pytest.raises(InvalidTierError, match="Available tiers: RESIDENTIAL, COMMERCIAL, WAREHOUSE"):
            calculator.validate_params("CASTLE", SITE_SURVEY_TIERS)

    def test_breakdown(self, calculator):
        assert calculator.get_price_breakdown("RESIDENTIAL", SITE_SURVEY_TIERS) == (
            "RESIDENTIAL (Apartment, house): ₦20000.00"
        )


@pytest.mark.unit
class TestRecurringDiscountCalculator:
    """Test recurring bulk discounts."""

    @pytest.fixture
    def calculator(self):
        return RecurringDiscountCalculator()

    def test_four_weekly_checks_at_twenty_percent(self, calculator):
        """Test 100000 × 4 at 20% off."""
        assert calculator.calculate_price(100000, 4, 20) == 320000
        assert calculator.calculate_discount_amount(100000, 4, 20) == 80000
        assert calculator.calculate_price_per_occurrence(100000, 4, 20) == 80000

    def test_no_discount_any_count(self, calculator):
        assert calculator.calculate_price(500000, 1) == 500000
        assert calculator.calculate_price(500000, 3, 0) == 1500000

    def test_rounds_half_up(self, calculator):
        """Test fractional totals round to the nearest minor unit, halves up."""
        # 333 × 5 = 1665; 12.5% → 1456.875
        assert calculator.calculate_price(333, 5, 12.5) == 1457
        # 1 × 4 = 4; 12.5% → 3.5
        assert calculator.calculate_price(1, 4, 12.5) == 4

    @pytest.mark.parametrize("base_price,count,discount,message", [
        (0, 4, 20, "Invalid base_price"),
        (-100, 4, 20, "Invalid base_price"),
        (100000, 0, 0, "Invalid occurrence_count"),
        (100000, 4, 101, "Invalid discount_percentage"),
        (100000, 4, -1, "Invalid discount_percentage"),
        (100000, 3, 20, "requires at least 4 occurrences"),
    ])
    def test_rejects(self, calculator, base_price, count, discount, message):
        with pytest.raises(PricingValidationError, match=message):
            calculator.calculate_price(base_price, count, discount)

    def test_breakdown(self, calculator):
        assert calculator.get_price_breakdown(100000, 4, 20) == (
            "4 occurrences × ₦1000.00 = ₦4000.00\n"
            "Discount (20%): -₦800.00\n"
            "Total: ₦3200.00 (₦800.00 per occurrence)"
        )
