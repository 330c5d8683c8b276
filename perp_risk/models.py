"""Data models — all frozen (immutable)."""
from __future__ import annotations

from dataclasses import dataclass

LONG = "long"
SHORT = "short"
SIDES = (LONG, SHORT)

MIN_LEVERAGE = 1.0
MAX_LEVERAGE = 500.0


@dataclass(frozen=True)
class OpenInterest:
    """Open interest on each side of a market, in quote-currency units."""

    long: float
    short: float


@dataclass(frozen=True)
class MarketLiquidityParams:
    """Liquidity and skew parameters for a single pair.

    Optional multipliers and caps are ``None`` when the source omitted them;
    the spread model substitutes its defaults.
    """

    price_impact_multiplier: float = 0.0
    skew_impact_multiplier: float = 0.0
    base_spread: float = 0.0
    one_percent_depth_above: float = 0.0
    one_percent_depth_below: float = 0.0
    open_interest: OpenInterest | None = None
    pnl_spread: float = 0.0
    pnl_price_impact_multiplier: float | None = None
    pnl_skew_impact_multiplier: float | None = None
    pos_spread_cap: float | None = None
    neg_spread_cap: float | None = None
    pnl_pos_spread_cap: float | None = None
    pnl_neg_spread_cap: float | None = None


@dataclass(frozen=True)
class Position:
    """A leveraged position snapshot.

    Construction is the only validation boundary: every calculation downstream
    assumes a well-formed Position and degrades gracefully on odd numbers.
    A ``pair_index`` of None is resolved from ``market`` when spread defaults
    are needed.
    """

    side: str
    collateral: float
    leverage: float
    entry_price: float
    current_price: float
    market: str = ""
    pair_index: int | None = None
    liquidity: MarketLiquidityParams | None = None

    def __post_init__(self) -> None:
        if self.side not in SIDES:
            raise ValueError(f"Invalid side '{self.side}', expected one of {SIDES}")
        if not self.collateral > 0:
            raise ValueError(f"Collateral must be positive, got {self.collateral}")
        if not MIN_LEVERAGE <= self.leverage <= MAX_LEVERAGE:
            raise ValueError(
                f"Leverage must be within [{MIN_LEVERAGE:g}, {MAX_LEVERAGE:g}], "
                f"got {self.leverage}"
            )
        if not self.entry_price > 0:
            raise ValueError(f"Entry price must be positive, got {self.entry_price}")

    @property
    def is_long(self) -> bool:
        return self.side == LONG

    @property
    def position_size(self) -> float:
        """Notional size in quote currency (collateral x leverage)."""
        return self.collateral * self.leverage


@dataclass(frozen=True)
class LiquidationResult:
    """Derived risk metrics for one Position."""

    liquidation_price: float
    distance_from_liquidation: float
    distance_in_price: float
    margin_ratio: float
    is_at_risk: bool
    is_critical: bool
    spread: float | None = None

    @property
    def risk_level(self) -> str:
        if self.is_critical:
            return "critical"
        if self.is_at_risk:
            return "at_risk"
        return "safe"


@dataclass(frozen=True)
class SpreadResult:
    """Dynamic spread components as signed fractions (0.002 = 0.2%)."""

    price_impact_spread: float
    skew_impact_spread: float
    dynamic_spread: float
    pnl_dynamic_spread: float


@dataclass(frozen=True)
class LeverageProfilePoint:
    """Liquidation metrics for one leverage setting."""

    leverage: float
    liquidation_price: float
    distance_from_liquidation: float
    distance_in_price: float


@dataclass(frozen=True)
class Assessment:
    """A Position paired with the risk result computed for it."""

    position: Position
    result: LiquidationResult
