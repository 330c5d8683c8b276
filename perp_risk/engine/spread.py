"""Dynamic spread model — pure functions, no I/O.

The spread charged on a fill is the pair's base spread plus two impact terms:

* price impact: ``exp(multiplier x size / one_percent_depth) - 1``, so large
  orders against thin books are penalised more than linearly;
* skew impact: how far the fill pushes the long/short open-interest split
  away from balance, measured through ``exp(share) + exp(1 - share)``.

Both terms are computed twice: with the primary multipliers for the entry
spread and with the PnL multipliers for the exit/valuation spread. Each sum
is clamped to its own ``[-neg_cap%, +pos_cap%]`` band.
"""
from __future__ import annotations

import math
from decimal import Decimal, localcontext

from ..config import SpreadDefaults
from ..models import LONG, MarketLiquidityParams, OpenInterest, SpreadResult

# Fixed-point scale used for the price-impact ratio.
WAD = Decimal(10) ** 18

DEFAULT_SPREAD = SpreadDefaults()


def _exp(value: float) -> float:
    try:
        return math.exp(value)
    except OverflowError:
        return math.inf


def _nan_to_zero(value: float) -> float:
    return 0.0 if math.isnan(value) else value


def price_impact_spread(
    side: str,
    one_percent_depth_above: float,
    one_percent_depth_below: float,
    position_size: float,
    multiplier: float,
) -> float:
    """Price impact of filling ``position_size`` against the book.

    Longs lift the asks so they consume depth above the price; shorts hit
    the bids below it. Zero depth means "no data" and yields zero impact.
    """
    depth = one_percent_depth_above if side == LONG else one_percent_depth_below
    if depth == 0:
        return 0.0
    if not all(math.isfinite(v) for v in (depth, position_size, multiplier)):
        return math.nan

    with localcontext() as ctx:
        ctx.prec = 60
        scaled_multiplier = Decimal(multiplier) * WAD
        scaled_size = Decimal(position_size) * WAD
        scaled_depth = Decimal(depth) * WAD
        param = scaled_multiplier * scaled_size / scaled_depth / WAD

    return _exp(float(param)) - 1


def skew_impact_spread(
    side: str,
    position_size: float,
    multiplier: float,
    open_interest: OpenInterest | None,
) -> float:
    """Cost of moving the open-interest skew further from balance."""
    if open_interest is None or open_interest.long == 0:
        return 0.0

    long_oi = open_interest.long
    short_oi = open_interest.short
    total = long_oi + short_oi
    if total == 0 or total + position_size == 0:
        return 0.0

    side_oi = long_oi if side == LONG else short_oi
    skew_p = side_oi / total
    skew_p_after = (side_oi + position_size) / (total + position_size)

    raw = (_exp(skew_p_after) - _exp(skew_p)) + (
        _exp(1 - skew_p_after) - _exp(1 - skew_p)
    )
    return multiplier * raw


def _clamp(value: float, pos_cap: float, neg_cap: float) -> float:
    positive_limit = pos_cap / 100
    negative_limit = -neg_cap / 100
    if value > positive_limit:
        return positive_limit
    if value < negative_limit:
        return negative_limit
    return value


def _or_default(value: float | None, default: float) -> float:
    return default if value is None else value


def _cap_or_default(value: float | None, default: float) -> float:
    # A non-finite cap would disable clamping.
    if value is None or not math.isfinite(value):
        return default
    return value


def calculate_dynamic_spread(
    side: str,
    position_size: float,
    liquidity: MarketLiquidityParams,
    pair_index: int = 0,
    defaults: SpreadDefaults = DEFAULT_SPREAD,
) -> SpreadResult:
    """Entry and PnL dynamic spreads for a fill of ``position_size``.

    Args:
        side: ``"long"`` or ``"short"``.
        position_size: Notional in quote currency (collateral x leverage).
        liquidity: Snapshot of the pair's liquidity parameters.
        pair_index: Selects the PnL multiplier fallback.
        defaults: Fallback multipliers and caps.
    """
    pnl_fallback = defaults.pnl_multiplier_for(pair_index)
    pnl_price_multiplier = _or_default(
        liquidity.pnl_price_impact_multiplier, pnl_fallback
    )
    pnl_skew_multiplier = _or_default(liquidity.pnl_skew_impact_multiplier, pnl_fallback)

    price_impact = price_impact_spread(
        side,
        liquidity.one_percent_depth_above,
        liquidity.one_percent_depth_below,
        position_size,
        liquidity.price_impact_multiplier,
    )
    pnl_price_impact = price_impact_spread(
        side,
        liquidity.one_percent_depth_above,
        liquidity.one_percent_depth_below,
        position_size,
        pnl_price_multiplier,
    )
    skew_impact = skew_impact_spread(
        side, position_size, liquidity.skew_impact_multiplier, liquidity.open_interest
    )
    pnl_skew_impact = skew_impact_spread(
        side, position_size, pnl_skew_multiplier, liquidity.open_interest
    )

    dynamic = _clamp(
        liquidity.base_spread + price_impact + skew_impact,
        _cap_or_default(liquidity.pos_spread_cap, defaults.pos_spread_cap),
        _cap_or_default(liquidity.neg_spread_cap, defaults.neg_spread_cap),
    )
    pnl_dynamic = _clamp(
        liquidity.pnl_spread + pnl_price_impact + pnl_skew_impact,
        _cap_or_default(liquidity.pnl_pos_spread_cap, defaults.pnl_pos_spread_cap),
        _cap_or_default(liquidity.pnl_neg_spread_cap, defaults.pnl_neg_spread_cap),
    )

    return SpreadResult(
        price_impact_spread=_nan_to_zero(price_impact),
        skew_impact_spread=_nan_to_zero(skew_impact),
        dynamic_spread=_nan_to_zero(dynamic),
        pnl_dynamic_spread=_nan_to_zero(pnl_dynamic),
    )


def entry_exit_multipliers(result: SpreadResult, side: str) -> tuple[float, float]:
    """Price multipliers for entering and exiting at the dynamic spread.

    A long pays more on entry and receives less on exit; a short the reverse.
    """
    spread = result.dynamic_spread
    if side == LONG:
        return 1 + spread, 1 - spread
    return 1 - spread, 1 + spread
