"""Market symbol → pair index table."""
from __future__ import annotations

import logging
from typing import Mapping

from ..config import DEFAULT_MARKETS

logger = logging.getLogger(__name__)

PAIR_INDEX_BY_MARKET: dict[str, int] = {m.symbol: m.pair_index for m in DEFAULT_MARKETS}

# Markets missing from the table map to this pair.
FALLBACK_PAIR_INDEX = 0


def resolve_pair_index(
    market: str, markets: Mapping[str, int] = PAIR_INDEX_BY_MARKET
) -> int:
    """Pair index for a market symbol, e.g. ``"ETH/USD"`` → 1."""
    index = markets.get(market)
    if index is None:
        logger.debug(
            "Market '%s' not in pair table, using pair %d", market, FALLBACK_PAIR_INDEX
        )
        return FALLBACK_PAIR_INDEX
    return index
