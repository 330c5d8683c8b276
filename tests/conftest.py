"""Shared test fixtures and sample data."""
from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from perp_risk.config import (
    AppConfig,
    AvantisConfig,
    BinanceConfig,
    RefreshConfig,
    RiskConfig,
    SpreadDefaults,
)
from perp_risk.models import MarketLiquidityParams, OpenInterest, Position


# ---------------------------------------------------------------------------
# Config fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def sample_risk_config() -> RiskConfig:
    return RiskConfig(liquidation_threshold=0.85, at_risk_distance=10.0, critical_distance=5.0)


@pytest.fixture()
def sample_app_config(sample_risk_config: RiskConfig) -> AppConfig:
    return AppConfig(
        risk=sample_risk_config,
        spread=SpreadDefaults(),
        binance=BinanceConfig(ticker_url="https://binance.example.com/ticker", timeout=5),
        avantis=AvantisConfig(
            pair_info_url="https://avantis.example.com/v1/data",
            timeout=5,
            cache_ttl_seconds=30.0,
        ),
        refresh=RefreshConfig(price_interval_seconds=0.01),
    )


# ---------------------------------------------------------------------------
# Model fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def sample_position() -> Position:
    return Position(
        side="long",
        collateral=1000.0,
        leverage=10,
        entry_price=50000.0,
        current_price=51000.0,
        market="BTC/USD",
    )


@pytest.fixture()
def zero_liquidity() -> MarketLiquidityParams:
    """Parameters under which every spread term is zero."""
    return MarketLiquidityParams()


@pytest.fixture()
def sample_liquidity() -> MarketLiquidityParams:
    return MarketLiquidityParams(
        price_impact_multiplier=0.5,
        skew_impact_multiplier=0.01,
        base_spread=0.0005,
        one_percent_depth_above=5_000_000.0,
        one_percent_depth_below=4_000_000.0,
        open_interest=OpenInterest(long=6_000_000.0, short=4_000_000.0),
        pnl_spread=0.0004,
    )


# ---------------------------------------------------------------------------
# Avantis payload fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def sample_pair_info_raw() -> dict:
    return {
        "priceImpactMultiplier": 0.5,
        "skewImpactMultiplier": "0.01",
        "spreadP": 0.0005,
        "pnlSpreadP": 0.0004,
        "pairParams": {
            "onePercentDepthAbove": 5000000,
            "onePercentDepthBelow": 4000000,
        },
        "storagePairParams": {
            "pnlPriceImpactMultiplier": 1.3,
            "pnlSkewImpactMultiplier": 1.1,
            "pnlPosSpreadCap": 3,
            "pnlNegSpreadCap": 6,
            "negSpreadCap": 4,
            "posSpreadCap": 20,
        },
        "openInterest": {"long": 6000000, "short": 4000000},
    }


@pytest.fixture()
def sample_pair_info_payload(sample_pair_info_raw: dict) -> dict:
    """Flat payload shape: pair records under numeric keys plus meta keys."""
    return {
        "success": True,
        "pairCount": 2,
        "maxTradesPerPair": 40,
        "totalOi": 123,
        "0": sample_pair_info_raw,
        "1": {"priceImpactMultiplier": 0.2, "spreadP": 0.0003},
    }


# ---------------------------------------------------------------------------
# Config YAML fixture
# ---------------------------------------------------------------------------

SAMPLE_YAML = textwrap.dedent("""\
    risk:
      liquidation_threshold: 0.9
      at_risk_distance: 12.0
      critical_distance: 6.0
    spread:
      pnl_impact_multiplier: 1.25
      pnl_impact_multiplier_overrides: {1: 1.5}
      pos_spread_cap: 3.0
      neg_spread_cap: 20.0
    markets:
      - {symbol: BTC/USD, pair_index: 0, price_symbol: BTCUSDT}
      - {symbol: DOGE/USD, pair_index: 9, price_symbol: DOGEUSDT}
    binance:
      ticker_url: "https://binance.example.com/ticker"
      timeout: 3
    avantis:
      pair_info_url: "https://avantis.example.com/v1/data"
      cache_ttl_seconds: 15
    refresh:
      price_interval_seconds: 2
""")


@pytest.fixture()
def sample_yaml_path(tmp_path: Path) -> Path:
    cfg_file = tmp_path / "config.yaml"
    cfg_file.write_text(SAMPLE_YAML)
    return cfg_file
