# ==== TIERED PRICING VALUE OBJECT ==== #

"""
Tiered pricing value object.

Holds a validated, price-sorted, immutable set of named pricing tiers and
resolves tier names to prices. Prices are integer minor units (kobo).
"""

from dataclasses import asdict, dataclass
from typing import Any, Dict, Iterable, List, Mapping, Tuple, Union

from .errors import InvalidTierError, PricingValidationError


@dataclass(frozen=True)
class TieredPricingOption:
    """A single pricing tier."""
    tier: str
    price: int
    description: str


OptionInput = Union[TieredPricingOption, Mapping[str, Any]]


class TieredPricing:
    """
    Immutable set of pricing tiers sorted ascending by price.

    Tier names are matched case-insensitively. Options can be neither added,
    removed nor modified after construction.
    """

    __slots__ = ("_options",)

    def __init__(self, options: Iterable[OptionInput]):
        coerced = [_coerce_option(option) for option in (options or [])]
        self._validate(coerced)
        self._options: Tuple[TieredPricingOption, ...] = tuple(
            sorted(coerced, key=lambda option: option.price)
        )

    @property
    def options(self) -> Tuple[TieredPricingOption, ...]:
        return self._options

    # ==== LOOKUPS ==== #

    def get_price_for_tier(self, tier: str) -> int:
        """
        Get the price for a tier.

        Args:
            tier (str): Tier name, matched case-insensitively

        Returns:
            int: Tier price in minor units

        Raises:
            InvalidTierError: If no tier matches; the message lists valid tiers
        """
        option = self._find(tier)
        if option is None:
            raise InvalidTierError(tier, self.get_available_tiers())
        return option.price

    def get_available_tiers(self) -> List[str]:
        return [option.tier for option in self._options]

    def has_tier(self, tier: str) -> bool:
        return self._find(tier) is not None

    def get_tier_description(self, tier: str) -> str:
        option = self._find(tier)
        return option.description if option else ""

    def get_cheapest_tier(self) -> TieredPricingOption:
        return self._options[0]

    def get_most_expensive_tier(self) -> TieredPricingOption:
        return self._options[-1]

    def get_breakdown(self, tier: str) -> str:
        """Human-readable price line for a tier, empty for unknown tiers."""
        option = self._find(tier)
        if option is None:
            return ""
        return f"{option.tier} ({option.description}): ₦{option.price / 100:.2f}"

    # ==== SERIALIZATION ==== #

    def to_list(self) -> List[Dict[str, Any]]:
        return [asdict(option) for option in self._options]

    @classmethod
    def from_list(cls, options: Iterable[OptionInput]) -> "TieredPricing":
        return cls(options)

    # ==== INTERNALS ==== #

    def _find(self, tier: str):
        wanted = (tier or "").upper()
        for option in self._options:
            if option.tier.upper() == wanted:
                return option
        return None

    @staticmethod
    def _validate(options: List[TieredPricingOption]) -> None:
        if not options:
            raise PricingValidationError("Tiered pricing options cannot be empty")

        for index, option in enumerate(options):
            if not isinstance(option.tier, str) or not option.tier.strip():
                raise PricingValidationError(f"Invalid tier name at index {index}")
            if not isinstance(option.price, (int, float)) or option.price < 0:
                raise PricingValidationError(
                    f"Invalid price at index {index}: cannot be negative"
                )
            if not isinstance(option.description, str) or not option.description.strip():
                raise PricingValidationError(f"Missing description at index {index}")

        tier_names = [option.tier.upper() for option in options]
        if len(tier_names) != len(set(tier_names)):
            raise PricingValidationError("Duplicate tier names found in pricing options")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TieredPricing):
            return NotImplemented
        return self._options == other._options

    def __hash__(self) -> int:
        return hash(self._options)

    def __repr__(self) -> str:
        return f"TieredPricing({self.get_available_tiers()!r})"


def _coerce_option(option: OptionInput) -> TieredPricingOption:
    if isinstance(option, TieredPricingOption):
        return option
    if not isinstance(option, Mapping):
        raise PricingValidationError(f"Unsupported pricing option: {option!r}")
    return TieredPricingOption(
        tier=option.get("tier") or "",
        price=option.get("price", 0),
        description=option.get("description") or "",
    )
