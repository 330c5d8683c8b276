"""Composition layer — market symbol → pair index → spread-aware result."""
from __future__ import annotations

import logging
from dataclasses import replace
from typing import Mapping

from ..config import RiskConfig, SpreadDefaults
from ..models import LeverageProfilePoint, LiquidationResult, MarketLiquidityParams, Position
from .liquidation import (
    DEFAULT_RISK,
    DEFAULT_SPREAD,
    calculate_liquidation_price,
    calculate_liquidation_with_spread,
    distance_to_liquidation,
)
from .pairs import PAIR_INDEX_BY_MARKET, resolve_pair_index

logger = logging.getLogger(__name__)


def assess_position(
    position: Position,
    snapshot: Mapping[int, MarketLiquidityParams] | None,
    markets: Mapping[str, int] = PAIR_INDEX_BY_MARKET,
    risk: RiskConfig = DEFAULT_RISK,
    defaults: SpreadDefaults = DEFAULT_SPREAD,
) -> LiquidationResult:
    """Attach the market's liquidity parameters and compute the final result.

    A missing snapshot or a pair absent from it gives the spread-free result.
    """
    pair_index = resolve_pair_index(position.market, markets)
    liquidity = snapshot.get(pair_index) if snapshot else None
    if liquidity is None:
        logger.debug("No liquidity parameters for pair %d", pair_index)

    return calculate_liquidation_with_spread(
        replace(position, pair_index=pair_index, liquidity=liquidity),
        risk=risk,
        defaults=defaults,
    )


def leverage_profile(
    position: Position,
    start: int = 1,
    stop: int = 500,
    step: int = 5,
    risk: RiskConfig = DEFAULT_RISK,
) -> list[LeverageProfilePoint]:
    """Liquidation price and distance across a range of leverage settings.

    Entry and current price are held fixed so only leverage varies.
    """
    if step <= 0:
        raise ValueError("step must be positive")

    points: list[LeverageProfilePoint] = []
    for leverage in range(start, stop + 1, step):
        candidate = replace(position, leverage=leverage)
        liquidation_price = calculate_liquidation_price(candidate, risk)
        distance_in_price, distance_pct = distance_to_liquidation(
            candidate.is_long, candidate.current_price, liquidation_price
        )
        points.append(
            LeverageProfilePoint(
                leverage=leverage,
                liquidation_price=liquidation_price,
                distance_from_liquidation=distance_pct,
                distance_in_price=distance_in_price,
            )
        )
    return points
