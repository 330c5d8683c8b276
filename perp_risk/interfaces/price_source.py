"""Price source protocol — one quote per market symbol."""
from typing import Protocol


class PriceSource(Protocol):
    """Abstract interface for fetching current market prices."""

    async def fetch_price(self, market: str) -> float | None: ...

    async def fetch_prices(self, markets: list[str]) -> dict[str, float]: ...
