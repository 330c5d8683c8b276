"""Pure parsing functions for Avantis pair-info payloads — no I/O."""
from __future__ import annotations

import math
from typing import Any

from ...models import MarketLiquidityParams, OpenInterest

# Top-level keys of the flat payload that are not pair entries.
META_KEYS = frozenset(
    {"success", "pairCount", "maxTradesPerPair", "totalOi", "maxOpenInterest", "overrides"}
)


def as_float(value: Any, default: float | None = 0.0) -> float | None:
    """Coerce a payload number to float.

    Missing values give ``default``; values that are present but not numeric
    give NaN so the spread model treats them as "no effect".
    """
    if value is None:
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return math.nan


def extract_pair_infos(data: Any) -> dict[int, dict[str, Any]]:
    """Pull the per-pair records out of the three known payload shapes.

    Examples:
        {"pairInfos": {"0": {...}}}        → {0: {...}}
        {"success": true, "0": {...}, ...} → {0: {...}}  (meta keys dropped)
        {"0": {...}}                       → {0: {...}}
    """
    if not isinstance(data, dict):
        return {}

    if isinstance(data.get("pairInfos"), dict):
        raw = data["pairInfos"]
    else:
        raw = {k: v for k, v in data.items() if k not in META_KEYS}

    pairs: dict[int, dict[str, Any]] = {}
    for key, value in raw.items():
        try:
            index = int(key)
        except (TypeError, ValueError):
            continue
        if isinstance(value, dict):
            pairs[index] = value
    return pairs


def as_cap(value: Any) -> float | None:
    """Spread cap in percent, or None when missing or not a finite number."""
    cap = as_float(value, None)
    if cap is None or not math.isfinite(cap):
        return None
    return cap


def parse_open_interest(raw: Any) -> OpenInterest | None:
    if not isinstance(raw, dict):
        return None
    return OpenInterest(
        long=as_float(raw.get("long")),
        short=as_float(raw.get("short")),
    )


def parse_pair_info(raw: dict[str, Any]) -> MarketLiquidityParams:
    """Map one pair record onto MarketLiquidityParams.

    The feed's ``negSpreadCap``/``pnlNegSpreadCap`` bound the positive spread
    and ``posSpreadCap``/``pnlPosSpreadCap`` bound the negative one.
    """
    pair_params = raw.get("pairParams") or {}
    storage = raw.get("storagePairParams") or {}

    return MarketLiquidityParams(
        price_impact_multiplier=as_float(raw.get("priceImpactMultiplier")),
        skew_impact_multiplier=as_float(raw.get("skewImpactMultiplier")),
        base_spread=as_float(raw.get("spreadP")),
        one_percent_depth_above=as_float(pair_params.get("onePercentDepthAbove")),
        one_percent_depth_below=as_float(pair_params.get("onePercentDepthBelow")),
        open_interest=parse_open_interest(raw.get("openInterest")),
        pnl_spread=as_float(raw.get("pnlSpreadP")),
        pnl_price_impact_multiplier=as_float(
            storage.get("pnlPriceImpactMultiplier"), None
        ),
        pnl_skew_impact_multiplier=as_float(storage.get("pnlSkewImpactMultiplier"), None),
        pos_spread_cap=as_cap(storage.get("negSpreadCap")),
        neg_spread_cap=as_cap(storage.get("posSpreadCap")),
        pnl_pos_spread_cap=as_cap(storage.get("pnlNegSpreadCap")),
        pnl_neg_spread_cap=as_cap(storage.get("pnlPosSpreadCap")),
    )


def parse_pair_infos(data: Any) -> dict[int, MarketLiquidityParams]:
    """Parse a full pair-info payload into a snapshot keyed by pair index."""
    return {index: parse_pair_info(raw) for index, raw in extract_pair_infos(data).items()}
