"""Configuration loader — reads config.yaml, interpolates env vars, validates."""
from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Frozen config dataclasses
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RiskConfig:
    # Fraction of collateral lost at which the venue liquidates.
    liquidation_threshold: float = 0.85
    at_risk_distance: float = 10.0
    critical_distance: float = 5.0


@dataclass(frozen=True)
class SpreadDefaults:
    """Fallbacks for multipliers and caps missing from a pair's parameters.

    Caps are percentages: ``pos_spread_cap=2.0`` clamps the spread at +2%.
    """

    pnl_impact_multiplier: float = 1.2
    pnl_impact_multiplier_overrides: dict[int, float] = field(
        default_factory=lambda: {1: 1.4}
    )
    pos_spread_cap: float = 2.0
    neg_spread_cap: float = 25.0
    pnl_pos_spread_cap: float = 5.0
    pnl_neg_spread_cap: float = 2.0

    def pnl_multiplier_for(self, pair_index: int) -> float:
        return self.pnl_impact_multiplier_overrides.get(
            pair_index, self.pnl_impact_multiplier
        )


@dataclass(frozen=True)
class MarketConfig:
    symbol: str = ""
    pair_index: int = 0
    price_symbol: str = ""


DEFAULT_MARKETS: tuple[MarketConfig, ...] = (
    MarketConfig("BTC/USD", 0, "BTCUSDT"),
    MarketConfig("ETH/USD", 1, "ETHUSDT"),
    MarketConfig("SOL/USD", 2, "SOLUSDT"),
    MarketConfig("AVAX/USD", 3, "AVAXUSDT"),
    MarketConfig("MATIC/USD", 4, "MATICUSDT"),
    MarketConfig("ARB/USD", 5, "ARBUSDT"),
    MarketConfig("OP/USD", 6, "OPUSDT"),
)


@dataclass(frozen=True)
class BinanceConfig:
    ticker_url: str = "https://fapi.binance.com/fapi/v1/ticker/price"
    default_symbol: str = "BTCUSDT"
    timeout: int = 10


@dataclass(frozen=True)
class AvantisConfig:
    pair_info_url: str = "https://socket-api.avantisfi.com/v1/data"
    timeout: int = 10
    cache_ttl_seconds: float = 30.0


@dataclass(frozen=True)
class RefreshConfig:
    price_interval_seconds: float = 5.0


@dataclass(frozen=True)
class AppConfig:
    risk: RiskConfig = field(default_factory=RiskConfig)
    spread: SpreadDefaults = field(default_factory=SpreadDefaults)
    markets: tuple[MarketConfig, ...] = DEFAULT_MARKETS
    binance: BinanceConfig = field(default_factory=BinanceConfig)
    avantis: AvantisConfig = field(default_factory=AvantisConfig)
    refresh: RefreshConfig = field(default_factory=RefreshConfig)

    @property
    def pair_indices(self) -> dict[str, int]:
        return {m.symbol: m.pair_index for m in self.markets}

    @property
    def price_symbols(self) -> dict[str, str]:
        return {m.symbol: m.price_symbol for m in self.markets}


# ---------------------------------------------------------------------------
# Env interpolation
# ---------------------------------------------------------------------------

_ENV_VAR_RE = re.compile(r"\$\{([^}]+)}")


def _interpolate_env(value: Any) -> Any:
    """Recursively replace ${VAR} references with environment variable values."""
    if isinstance(value, str):
        return _ENV_VAR_RE.sub(lambda m: os.environ.get(m.group(1), ""), value)
    if isinstance(value, dict):
        return {k: _interpolate_env(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_interpolate_env(item) for item in value]
    return value


# ---------------------------------------------------------------------------
# YAML → dataclass builders
# ---------------------------------------------------------------------------


def _build_risk(raw: dict[str, Any]) -> RiskConfig:
    return RiskConfig(
        liquidation_threshold=float(raw.get("liquidation_threshold", 0.85)),
        at_risk_distance=float(raw.get("at_risk_distance", 10.0)),
        critical_distance=float(raw.get("critical_distance", 5.0)),
    )


def _build_spread(raw: dict[str, Any]) -> SpreadDefaults:
    overrides = raw.get("pnl_impact_multiplier_overrides", {1: 1.4})
    return SpreadDefaults(
        pnl_impact_multiplier=float(raw.get("pnl_impact_multiplier", 1.2)),
        pnl_impact_multiplier_overrides={
            int(k): float(v) for k, v in overrides.items()
        },
        pos_spread_cap=float(raw.get("pos_spread_cap", 2.0)),
        neg_spread_cap=float(raw.get("neg_spread_cap", 25.0)),
        pnl_pos_spread_cap=float(raw.get("pnl_pos_spread_cap", 5.0)),
        pnl_neg_spread_cap=float(raw.get("pnl_neg_spread_cap", 2.0)),
    )


def _build_markets(raw: list[dict[str, Any]] | None) -> tuple[MarketConfig, ...]:
    if not raw:
        return DEFAULT_MARKETS
    markets: list[MarketConfig] = []
    for m in raw:
        markets.append(
            MarketConfig(
                symbol=m.get("symbol", ""),
                pair_index=int(m.get("pair_index", 0)),
                price_symbol=m.get("price_symbol", ""),
            )
        )
    return tuple(markets)


def _build_binance(raw: dict[str, Any]) -> BinanceConfig:
    return BinanceConfig(
        ticker_url=raw.get("ticker_url") or BinanceConfig.ticker_url,
        default_symbol=raw.get("default_symbol", BinanceConfig.default_symbol),
        timeout=int(raw.get("timeout", 10)),
    )


def _build_avantis(raw: dict[str, Any]) -> AvantisConfig:
    return AvantisConfig(
        pair_info_url=raw.get("pair_info_url") or AvantisConfig.pair_info_url,
        timeout=int(raw.get("timeout", 10)),
        cache_ttl_seconds=float(raw.get("cache_ttl_seconds", 30.0)),
    )


def _build_refresh(raw: dict[str, Any]) -> RefreshConfig:
    return RefreshConfig(
        price_interval_seconds=float(raw.get("price_interval_seconds", 5.0)),
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_config(config_path: str | Path | None = None) -> AppConfig:
    """Load and validate application configuration from YAML + .env.

    Args:
        config_path: Path to config.yaml. When omitted, ``config.yaml`` in the
            project root is used if present, otherwise the built-in defaults.
    """
    load_dotenv()

    explicit = config_path is not None
    if config_path is None:
        config_path = Path(__file__).resolve().parent.parent / "config.yaml"
    config_path = Path(config_path)

    if not config_path.exists():
        if explicit:
            raise FileNotFoundError(f"Config file not found: {config_path}")
        logger.info("No config.yaml found, using built-in defaults")
        cfg = AppConfig()
        _validate(cfg)
        return cfg

    with open(config_path) as f:
        raw = yaml.safe_load(f) or {}

    raw = _interpolate_env(raw)

    cfg = AppConfig(
        risk=_build_risk(raw.get("risk", {})),
        spread=_build_spread(raw.get("spread", {})),
        markets=_build_markets(raw.get("markets")),
        binance=_build_binance(raw.get("binance", {})),
        avantis=_build_avantis(raw.get("avantis", {})),
        refresh=_build_refresh(raw.get("refresh", {})),
    )

    _validate(cfg)
    logger.info("Configuration loaded from %s", config_path)
    return cfg


def _validate(cfg: AppConfig) -> None:
    """Raise on invalid configuration."""
    if not 0 < cfg.risk.liquidation_threshold <= 1:
        raise ValueError("liquidation_threshold must be within (0, 1]")
    if cfg.risk.critical_distance > cfg.risk.at_risk_distance:
        raise ValueError("critical_distance must not exceed at_risk_distance")

    for cap in (
        cfg.spread.pos_spread_cap,
        cfg.spread.neg_spread_cap,
        cfg.spread.pnl_pos_spread_cap,
        cfg.spread.pnl_neg_spread_cap,
    ):
        if cap < 0:
            raise ValueError("Spread caps must be non-negative percentages")

    seen: set[str] = set()
    for market in cfg.markets:
        if not market.symbol:
            raise ValueError("Every market needs a symbol")
        if market.symbol in seen:
            raise ValueError(f"Market '{market.symbol}' is configured twice")
        if not market.price_symbol:
            raise ValueError(f"Market '{market.symbol}' has no price_symbol")
        seen.add(market.symbol)

    if cfg.avantis.cache_ttl_seconds <= 0:
        raise ValueError("avantis.cache_ttl_seconds must be positive")
    if cfg.refresh.price_interval_seconds <= 0:
        raise ValueError("refresh.price_interval_seconds must be positive")
