"""TTL cache over a liquidity source with last-good-snapshot fallback."""
from __future__ import annotations

import logging
import time
from typing import Callable

from ..interfaces.liquidity_source import LiquiditySource
from ..models import MarketLiquidityParams

logger = logging.getLogger(__name__)

Snapshot = dict[int, MarketLiquidityParams]


class LiquiditySnapshotCache:
    """Serve liquidity snapshots, refreshing at most once per ``ttl_seconds``.

    A failed refresh returns the last good snapshot, however stale. Only when
    nothing was ever fetched does the failure propagate.
    """

    def __init__(
        self,
        source: LiquiditySource,
        ttl_seconds: float = 30.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._source = source
        self._ttl = ttl_seconds
        self._clock = clock
        self._snapshot: Snapshot | None = None
        self._fetched_at: float | None = None

    @property
    def last_good(self) -> Snapshot | None:
        return self._snapshot

    def is_fresh(self) -> bool:
        if self._snapshot is None or self._fetched_at is None:
            return False
        return self._clock() - self._fetched_at < self._ttl

    def invalidate(self) -> None:
        """Force the next ``get_snapshot`` call to refetch."""
        self._fetched_at = None

    async def get_snapshot(self) -> Snapshot:
        if self.is_fresh():
            return self._snapshot  # type: ignore[return-value]

        try:
            snapshot = await self._source.fetch_pair_infos()
        except Exception as e:
            if self._snapshot is None:
                raise
            logger.warning("Liquidity refresh failed, serving stale snapshot: %s", e)
            return self._snapshot

        self._snapshot = snapshot
        self._fetched_at = self._clock()
        return snapshot
