"""Liquidity source protocol — per-pair spread parameters."""
from typing import Protocol

from ..models import MarketLiquidityParams


class LiquiditySource(Protocol):
    """Abstract interface for fetching liquidity parameters keyed by pair index."""

    async def fetch_pair_infos(self) -> dict[int, MarketLiquidityParams]: ...
