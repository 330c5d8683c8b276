"""Risk service — wires price and liquidity sources to the engine."""
from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone

from ..config import AppConfig
from ..engine import assess_position, leverage_profile
from ..interfaces.price_source import PriceSource
from ..models import Assessment, LeverageProfilePoint, Position
from ..oracles import BinanceOracle
from ..protocols.avantis import AvantisPairInfoClient
from .liquidity_cache import LiquiditySnapshotCache, Snapshot

logger = logging.getLogger(__name__)

_STATUS = {
    "critical": "🚨 CRITICAL",
    "at_risk": "⚠️ AT RISK",
    "safe": "✅ Safe",
}


class RiskService:
    """Fetches market inputs and evaluates positions against them."""

    def __init__(self, config: AppConfig) -> None:
        self._config = config
        self._pair_indices = config.pair_indices

        self._oracle: PriceSource = BinanceOracle(config.binance, config.price_symbols)
        self._liquidity = LiquiditySnapshotCache(
            AvantisPairInfoClient(config.avantis),
            ttl_seconds=config.avantis.cache_ttl_seconds,
        )

    # ------------------------------------------------------------------
    # Inputs
    # ------------------------------------------------------------------

    async def _liquidity_snapshot(self) -> Snapshot | None:
        try:
            return await self._liquidity.get_snapshot()
        except Exception as e:
            logger.warning("No liquidity parameters available, spread disabled: %s", e)
            return None

    async def _resolve_price(self, market: str, current_price: float | None) -> float | None:
        if current_price is not None:
            return current_price
        price = await self._oracle.fetch_price(market)
        if price is None or not price > 0:
            logger.error("No current price available for %s", market)
            return None
        return price

    # ------------------------------------------------------------------
    # Workflows
    # ------------------------------------------------------------------

    async def assess(
        self,
        market: str,
        side: str,
        collateral: float,
        leverage: float,
        entry_price: float | None = None,
        current_price: float | None = None,
        with_spread: bool = True,
    ) -> Assessment | None:
        """Evaluate one position at the latest market inputs.

        Without an explicit entry price the position is assumed to open at
        the current price. Returns None when no current price is available.
        """
        price = await self._resolve_price(market, current_price)
        if price is None:
            return None

        position = Position(
            side=side,
            collateral=collateral,
            leverage=leverage,
            entry_price=entry_price if entry_price is not None else price,
            current_price=price,
            market=market,
        )

        snapshot = await self._liquidity_snapshot() if with_spread else None
        result = assess_position(
            position,
            snapshot,
            markets=self._pair_indices,
            risk=self._config.risk,
            defaults=self._config.spread,
        )

        logger.info(
            "%s %s %.0fx · liq $%.4f · distance %.2f%% · %s",
            market,
            side,
            leverage,
            result.liquidation_price,
            result.distance_from_liquidation,
            result.risk_level,
        )
        return Assessment(position=position, result=result)

    def profile(
        self,
        side: str,
        collateral: float,
        entry_price: float,
        current_price: float | None = None,
        step: int = 5,
    ) -> list[LeverageProfilePoint]:
        """Leverage sweep for a position opened at ``entry_price``."""
        position = Position(
            side=side,
            collateral=collateral,
            leverage=1,
            entry_price=entry_price,
            current_price=current_price if current_price is not None else entry_price,
        )
        return leverage_profile(position, step=step, risk=self._config.risk)

    async def run_continuous(
        self,
        market: str,
        side: str,
        collateral: float,
        leverage: float,
        entry_price: float | None = None,
        interval_seconds: float | None = None,
        max_iterations: int | None = None,
    ) -> None:
        """Re-evaluate a position on every price refresh."""
        interval = interval_seconds or self._config.refresh.price_interval_seconds
        logger.info("Watching %s %s (refreshing every %.1f s)", market, side, interval)

        iterations = 0
        while max_iterations is None or iterations < max_iterations:
            iterations += 1
            try:
                assessment = await self.assess(
                    market, side, collateral, leverage, entry_price=entry_price
                )
                if assessment is not None:
                    logger.info("\n%s", self.format_result(assessment))
            except Exception as e:
                logger.error("Error evaluating position: %s", e)
            if max_iterations is None or iterations < max_iterations:
                await asyncio.sleep(interval)

    # ------------------------------------------------------------------
    # Formatting
    # ------------------------------------------------------------------

    @staticmethod
    def _now_str() -> str:
        return datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")

    @classmethod
    def format_result(cls, assessment: Assessment) -> str:
        position = assessment.position
        result = assessment.result
        spread_line = (
            f"Dynamic spread: {result.spread:+.4f}%\n"
            if result.spread is not None
            else "Dynamic spread: n/a\n"
        )
        return (
            f"📊 {position.market or 'position'} · {position.side.upper()} · "
            f"{position.leverage:g}x\n"
            f"\n"
            f"{_STATUS[result.risk_level]}\n"
            f"\n"
            f"Collateral: ${position.collateral:,.2f} · "
            f"Size: ${position.position_size:,.2f}\n"
            f"Entry: ${position.entry_price:,.4f} · "
            f"Current: ${position.current_price:,.4f}\n"
            f"Liquidation: ${result.liquidation_price:,.4f}\n"
            f"Distance: {result.distance_from_liquidation:.2f}% "
            f"(${result.distance_in_price:,.4f})\n"
            f"Margin ratio: {result.margin_ratio:.4f}\n"
            f"{spread_line}"
            f"\n"
            f"{cls._now_str()} UTC"
        )

    @staticmethod
    def format_profile(points: list[LeverageProfilePoint]) -> str:
        lines = [f"{'Leverage':>8}  {'Liquidation':>14}  {'Distance':>9}"]
        for p in points:
            lines.append(
                f"{p.leverage:>7g}x  {p.liquidation_price:>14,.4f}  "
                f"{p.distance_from_liquidation:>8.2f}%"
            )
        return "\n".join(lines)
