"""
Delivery pricing.

    price = base_price + distance_km * price_per_km * multiplier(weight category)

The configuration is read once from settings and never mutated; the same
``weight_category`` function classifies parcels and prices orders.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from sendit.app.models.enums import WeightCategory

LIGHT_MAX_KG = 5
MEDIUM_MAX_KG = 20
HEAVY_MAX_KG = 50


def weight_category(weight_kg: float) -> WeightCategory:
    if weight_kg <= LIGHT_MAX_KG:
        return WeightCategory.LIGHT
    if weight_kg <= MEDIUM_MAX_KG:
        return WeightCategory.MEDIUM
    if weight_kg <= HEAVY_MAX_KG:
        return WeightCategory.HEAVY
    return WeightCategory.EXTRA_HEAVY


def _default_multipliers() -> Mapping[WeightCategory, float]:
    return MappingProxyType({
        WeightCategory.LIGHT: 1.0,
        WeightCategory.MEDIUM: 1.2,
        WeightCategory.HEAVY: 1.5,
        WeightCategory.EXTRA_HEAVY: 2.0,
    })


@dataclass(frozen=True)
class PricingConfig:
    base_price: float = 10.0
    price_per_km: float = 0.5
    weight_multipliers: Mapping[WeightCategory, float] = field(default_factory=_default_multipliers)

    @classmethod
    def from_settings(cls, settings) -> "PricingConfig":
        multipliers = {WeightCategory(name): value for name, value in settings.weight_multipliers.items()}
        missing = set(WeightCategory) - set(multipliers)
        if missing:
            raise ValueError(f"Missing weight multipliers for: {sorted(c.value for c in missing)}")
        return cls(
            base_price=settings.base_price,
            price_per_km=settings.price_per_km,
            weight_multipliers=MappingProxyType(multipliers),
        )

    def multiplier(self, category: WeightCategory) -> float:
        return self.weight_multipliers[category]


DEFAULT_PRICING = PricingConfig()


def price(weight_kg: float, distance_km: float, config: PricingConfig = DEFAULT_PRICING) -> float:
    """Order price in USD. Not rounded; callers format for display."""
    multiplier = config.multiplier(weight_category(weight_kg))
    return config.base_price + distance_km * config.price_per_km * multiplier
