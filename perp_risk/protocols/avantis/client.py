"""Avantis pair-info HTTP client."""
from __future__ import annotations

import logging
import ssl

import aiohttp
import certifi

from ...config import AvantisConfig
from ...models import MarketLiquidityParams
from . import parser

logger = logging.getLogger(__name__)


class AvantisPairInfoClient:
    """Fetch per-pair liquidity and skew parameters from the Avantis data API."""

    def __init__(self, config: AvantisConfig) -> None:
        self.url = config.pair_info_url
        self.timeout = config.timeout

    async def fetch_raw(self) -> dict:
        """Fetch the raw JSON payload. Raises RuntimeError on failure."""
        ssl_context = ssl.create_default_context(cafile=certifi.where())
        connector = aiohttp.TCPConnector(ssl=ssl_context)

        try:
            async with aiohttp.ClientSession(connector=connector) as session:
                async with session.get(
                    self.url, timeout=aiohttp.ClientTimeout(total=self.timeout)
                ) as response:
                    if response.status != 200:
                        raise RuntimeError(
                            f"Failed to fetch pair info: HTTP {response.status}"
                        )
                    return await response.json()
        except RuntimeError:
            raise
        except Exception as e:
            raise RuntimeError(f"Failed to fetch pair info: {e}") from e

    async def fetch_pair_infos(self) -> dict[int, MarketLiquidityParams]:
        """Fetch and parse the pair-info snapshot keyed by pair index."""
        data = await self.fetch_raw()
        snapshot = parser.parse_pair_infos(data)
        logger.info("Fetched liquidity parameters for %d pairs", len(snapshot))
        return snapshot
