"""Liquidation engine — pure functions over a Position, no I/O.

Liquidation happens when the loss reaches a fixed fraction of collateral
(``RiskConfig.liquidation_threshold``, 85% by default). Since the loss as a
fraction of collateral equals ``price_move x leverage``, the price move to
liquidation is ``threshold / leverage``:

    long:  entry x (1 - threshold / leverage)
    short: entry x (1 + threshold / leverage)

Example: 10x, entry $100 → move 8.5% → long liquidates at $91.50,
short at $108.50.
"""
from __future__ import annotations

import logging
from dataclasses import replace

from ..config import RiskConfig, SpreadDefaults
from ..models import LiquidationResult, Position
from .pairs import resolve_pair_index
from .spread import calculate_dynamic_spread

logger = logging.getLogger(__name__)

DEFAULT_RISK = RiskConfig()
DEFAULT_SPREAD = SpreadDefaults()


def calculate_liquidation_price(
    position: Position, risk: RiskConfig = DEFAULT_RISK
) -> float:
    """Price at which the threshold share of collateral is lost."""
    move = risk.liquidation_threshold / position.leverage
    if position.is_long:
        return position.entry_price * (1 - move)
    return position.entry_price * (1 + move)


def calculate_margin_ratio(position: Position) -> float:
    """Current equity over position size."""
    size = position.position_size
    pnl = (position.current_price - position.entry_price) * (size / position.entry_price)
    if not position.is_long:
        pnl = -pnl
    return (position.collateral + pnl) / size


def distance_to_liquidation(
    side_is_long: bool, current_price: float, liquidation_price: float
) -> tuple[float, float]:
    """Return ``(distance_in_price, distance_percent)``.

    Positive means the position is still on the safe side of its liquidation
    price. Without a usable current price the percentage is 0.
    """
    if side_is_long:
        distance = current_price - liquidation_price
    else:
        distance = liquidation_price - current_price
    if not current_price > 0:
        return distance, 0.0
    return distance, distance / current_price * 100


def calculate_liquidation_distance(
    position: Position, risk: RiskConfig = DEFAULT_RISK
) -> LiquidationResult:
    liquidation_price = calculate_liquidation_price(position, risk)
    distance_in_price, distance_pct = distance_to_liquidation(
        position.is_long, position.current_price, liquidation_price
    )

    return LiquidationResult(
        liquidation_price=liquidation_price,
        distance_from_liquidation=distance_pct,
        distance_in_price=distance_in_price,
        margin_ratio=calculate_margin_ratio(position),
        is_at_risk=distance_pct < risk.at_risk_distance,
        # critical_distance <= at_risk_distance keeps critical a subset of at-risk
        is_critical=distance_pct < min(risk.critical_distance, risk.at_risk_distance),
    )


def calculate_liquidation_with_spread(
    position: Position,
    risk: RiskConfig = DEFAULT_RISK,
    defaults: SpreadDefaults = DEFAULT_SPREAD,
) -> LiquidationResult:
    """Liquidation result after paying the dynamic spread on entry.

    The spread moves the effective entry price against the trader: a long
    fills higher, a short fills lower. Falls back to the spread-free result
    when no liquidity parameters are attached or no current price is known.
    """
    if position.liquidity is None:
        return calculate_liquidation_distance(position, risk)
    if not position.current_price > 0:
        logger.warning(
            "No current price for %s, skipping spread adjustment",
            position.market or "position",
        )
        return calculate_liquidation_distance(position, risk)

    pair_index = position.pair_index
    if pair_index is None:
        pair_index = resolve_pair_index(position.market)

    spread = calculate_dynamic_spread(
        side=position.side,
        position_size=position.position_size,
        liquidity=position.liquidity,
        pair_index=pair_index,
        defaults=defaults,
    )

    if position.is_long:
        adjusted_entry = position.entry_price * (1 + spread.dynamic_spread)
    else:
        adjusted_entry = position.entry_price * (1 - spread.dynamic_spread)

    if not adjusted_entry > 0:
        logger.warning(
            "Spread %.6f leaves no positive entry price, ignoring it",
            spread.dynamic_spread,
        )
        return calculate_liquidation_distance(position, risk)

    logger.debug(
        "Spread %.6f moves entry %.6f -> %.6f",
        spread.dynamic_spread,
        position.entry_price,
        adjusted_entry,
    )

    result = calculate_liquidation_distance(
        replace(position, entry_price=adjusted_entry), risk
    )
    return replace(result, spread=spread.dynamic_spread * 100)
