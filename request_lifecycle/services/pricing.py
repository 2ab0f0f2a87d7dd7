# ==== PRICING CALCULATORS ==== #

"""
Price calculators for tiered and recurring verification requests.

All amounts are integer minor units (kobo). Calculators validate their
parameters before computing and raise ``PricingValidationError`` (or
``InvalidTierError`` for an unknown tier) on bad input.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Union

from request_lifecycle.business.errors import InvalidTierError, PricingValidationError
from request_lifecycle.business.tiered_pricing import OptionInput, TieredPricing
from request_lifecycle.observability.logging import get_logger


logger = get_logger(__name__)

# Business rule: discounts only apply to bulk bookings
MIN_OCCURRENCES_FOR_DISCOUNT = 4

PricingTable = Union[TieredPricing, Iterable[OptionInput]]


# ==== TIERED PRICE CALCULATOR ==== #


class TieredPriceCalculator:
    """Resolves the price of a selected tier from a pricing table."""

    def calculate_price(self, selected_tier: str, pricing_table: PricingTable) -> int:
        """
        Calculate the price for the selected tier.

        Args:
            selected_tier (str): Tier chosen by the customer
            pricing_table (PricingTable): Tier options or a built TieredPricing

        Returns:
            int: Tier price in minor units
        """
        pricing = self.validate_params(selected_tier, pricing_table)
        return pricing.get_price_for_tier(selected_tier)

    def validate_params(self, selected_tier: str, pricing_table: PricingTable) -> TieredPricing:
        """
        Validate tier selection against the pricing table.

        Returns:
            TieredPricing: The validated pricing table

        Raises:
            PricingValidationError: If the tier is blank or the table empty
            InvalidTierError: If the tier is not in the table
        """
        if not selected_tier or not selected_tier.strip():
            raise PricingValidationError("selected_tier is required")

        pricing = _as_tiered_pricing(pricing_table)
        if not pricing.has_tier(selected_tier):
            raise InvalidTierError(selected_tier, pricing.get_available_tiers())
        return pricing

    def get_price_breakdown(self, selected_tier: str, pricing_table: PricingTable) -> str:
        return _as_tiered_pricing(pricing_table).get_breakdown(selected_tier)


# ==== RECURRING DISCOUNT CALCULATOR ==== #


class RecurringDiscountCalculator:
    """
    Total price for a recurring booking with a bulk discount.

    total = base_price × occurrence_count × (1 − discount_percentage / 100),
    rounded half-up to whole minor units.
    """

    def calculate_price(
        self,
        base_price: int,
        occurrence_count: int,
        discount_percentage: float = 0
    ) -> int:
        """
        Calculate the total price for all occurrences.

        Args:
            base_price (int): Price of a single occurrence
            occurrence_count (int): Number of occurrences
            discount_percentage (float): Discount in percent, 0 to 100

        Returns:
            int: Discounted total in minor units
        """
        self.validate_params(base_price, occurrence_count, discount_percentage)

        subtotal = Decimal(base_price) * occurrence_count
        discount = subtotal * Decimal(str(discount_percentage)) / 100
        return _round(subtotal - discount)

    def calculate_price_per_occurrence(
        self,
        base_price: int,
        occurrence_count: int,
        discount_percentage: float = 0
    ) -> int:
        total = self.calculate_price(base_price, occurrence_count, discount_percentage)
        return _round(Decimal(total) / occurrence_count)

    def calculate_discount_amount(
        self,
        base_price: int,
        occurrence_count: int,
        discount_percentage: float = 0
    ) -> int:
        subtotal = Decimal(base_price) * occurrence_count
        return _round(subtotal * Decimal(str(discount_percentage)) / 100)

    def validate_params(
        self,
        base_price: int,
        occurrence_count: int,
        discount_percentage: float = 0
    ) -> None:
        """
        Validate recurring pricing parameters.

        Raises:
            PricingValidationError: On a non-positive base price, fewer than
                one occurrence, a discount outside 0-100, or a discount on
                fewer than four occurrences
        """
        if not isinstance(base_price, (int, float)) or base_price <= 0:
            raise PricingValidationError("Invalid base_price: must be a positive number")

        if not isinstance(occurrence_count, int) or occurrence_count < 1:
            raise PricingValidationError("Invalid occurrence_count: must be at least 1")

        if discount_percentage < 0 or discount_percentage > 100:
            raise PricingValidationError("Invalid discount_percentage: must be between 0 and 100")

        if discount_percentage > 0 and occurrence_count < MIN_OCCURRENCES_FOR_DISCOUNT:
            raise PricingValidationError(
                f"Recurring discount requires at least {MIN_OCCURRENCES_FOR_DISCOUNT} occurrences"
            )

    def get_price_breakdown(
        self,
        base_price: int,
        occurrence_count: int,
        discount_percentage: float = 0
    ) -> str:
        """
        Three-line breakdown: subtotal, discount, total.

        Example:
            4 occurrences × ₦1000.00 = ₦4000.00
            Discount (20%): -₦800.00
            Total: ₦3200.00 (₦800.00 per occurrence)
        """
        total = self.calculate_price(base_price, occurrence_count, discount_percentage)
        discount = self.calculate_discount_amount(base_price, occurrence_count, discount_percentage)
        per_occurrence = self.calculate_price_per_occurrence(
            base_price, occurrence_count, discount_percentage
        )
        subtotal = base_price * occurrence_count

        logger.debug(
            "Recurring price calculated",
            occurrence_count=occurrence_count,
            discount_percentage=discount_percentage,
            total=total
        )

        return (
            f"{occurrence_count} occurrences × {_naira(base_price)} = {_naira(subtotal)}\n"
            f"Discount ({discount_percentage:g}%): -{_naira(discount)}\n"
            f"Total: {_naira(total)} ({_naira(per_occurrence)} per occurrence)"
        )


# ==== UTILITY FUNCTIONS ==== #


def _as_tiered_pricing(pricing_table: PricingTable) -> TieredPricing:
    if isinstance(pricing_table, TieredPricing):
        return pricing_table
    options = list(pricing_table or [])
    if not options:
        raise PricingValidationError("Tiered pricing table is required and cannot be empty")
    return TieredPricing(options)


def _round(value: Decimal) -> int:
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _naira(amount: Union[int, float]) -> str:
    return f"₦{amount / 100:.2f}"
