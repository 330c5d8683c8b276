"""Pricing and risk engine — pure, stateless calculations."""
from .composition import assess_position, leverage_profile
from .liquidation import (
    calculate_liquidation_distance,
    calculate_liquidation_price,
    calculate_liquidation_with_spread,
    calculate_margin_ratio,
)
from .pairs import PAIR_INDEX_BY_MARKET, resolve_pair_index
from .spread import calculate_dynamic_spread, entry_exit_multipliers

__all__ = [
    "PAIR_INDEX_BY_MARKET",
    "assess_position",
    "calculate_dynamic_spread",
    "calculate_liquidation_distance",
    "calculate_liquidation_price",
    "calculate_liquidation_with_spread",
    "calculate_margin_ratio",
    "entry_exit_multipliers",
    "leverage_profile",
    "resolve_pair_index",
]
