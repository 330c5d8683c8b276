"""Binance futures price oracle."""
import asyncio
import logging
import math
import ssl

import aiohttp
import certifi

from ..config import BinanceConfig

logger = logging.getLogger(__name__)


class BinanceOracle:
    """Fetch last traded prices from the Binance USDⓈ-M futures ticker."""

    def __init__(self, config: BinanceConfig, price_symbols: dict[str, str]) -> None:
        self.ticker_url = config.ticker_url
        self.default_symbol = config.default_symbol
        self.timeout = config.timeout
        self.price_symbols = dict(price_symbols)

    def symbol_for(self, market: str) -> str:
        """Binance symbol for a market, e.g. ``"BTC/USD"`` → ``"BTCUSDT"``."""
        symbol = self.price_symbols.get(market)
        if not symbol:
            logger.warning(
                "No Binance symbol for market '%s', using %s",
                market,
                self.default_symbol,
            )
            return self.default_symbol
        return symbol

    async def fetch_price(self, market: str) -> float | None:
        """Fetch the current price for one market, or None if unavailable."""
        symbol = self.symbol_for(market)
        ssl_context = ssl.create_default_context(cafile=certifi.where())
        connector = aiohttp.TCPConnector(ssl=ssl_context)

        try:
            async with aiohttp.ClientSession(connector=connector) as session:
                async with session.get(
                    self.ticker_url,
                    params={"symbol": symbol},
                    timeout=aiohttp.ClientTimeout(total=self.timeout),
                ) as response:
                    if response.status != 200:
                        logger.error(
                            "Error fetching %s price from Binance: HTTP %s",
                            symbol,
                            response.status,
                        )
                        return None

                    data = await response.json()
                    raw_price = data.get("price")
                    if raw_price is None:
                        logger.error("Price not found in Binance response for %s", symbol)
                        return None

                    price = float(raw_price)
                    if not math.isfinite(price):
                        logger.error("Unusable Binance price for %s: %s", symbol, raw_price)
                        return None

                    logger.debug("Binance %s: $%.4f", symbol, price)
                    return price

        except Exception as e:
            logger.error("Error fetching %s price from Binance: %s", symbol, e)
            return None

    async def fetch_prices(self, markets: list[str]) -> dict[str, float]:
        """Fetch prices for several markets in parallel, omitting failures."""
        results = await asyncio.gather(*(self.fetch_price(m) for m in markets))

        prices: dict[str, float] = {}
        for market, price in zip(markets, results):
            if price is not None:
                prices[market] = price
        return prices
