"""Unit tests for the Binance oracle — response parsing and error handling."""
from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from perp_risk.config import BinanceConfig
from perp_risk.oracles.binance import BinanceOracle


@pytest.fixture()
def oracle() -> BinanceOracle:
    return BinanceOracle(
        BinanceConfig(ticker_url="https://binance.example.com/ticker"),
        {"BTC/USD": "BTCUSDT", "ETH/USD": "ETHUSDT"},
    )


def _mock_session(status: int = 200, payload: dict | None = None) -> AsyncMock:
    mock_response = AsyncMock()
    mock_response.status = status
    mock_response.json = AsyncMock(return_value=payload or {})
    mock_response.__aenter__ = AsyncMock(return_value=mock_response)
    mock_response.__aexit__ = AsyncMock(return_value=None)

    mock_session = AsyncMock()
    mock_session.get = MagicMock(return_value=mock_response)
    mock_session.__aenter__ = AsyncMock(return_value=mock_session)
    mock_session.__aexit__ = AsyncMock(return_value=None)
    return mock_session


class TestSymbolFor:
    def test_known_market(self, oracle: BinanceOracle) -> None:
        assert oracle.symbol_for("ETH/USD") == "ETHUSDT"

    def test_unknown_market_uses_default(self, oracle: BinanceOracle) -> None:
        assert oracle.symbol_for("PEPE/USD") == "BTCUSDT"


class TestFetchPrice:
    @pytest.mark.asyncio
    async def test_parses_price(self, oracle: BinanceOracle) -> None:
        session = _mock_session(payload={"symbol": "BTCUSDT", "price": "105824.50"})

        with patch("perp_risk.oracles.binance.aiohttp.ClientSession", return_value=session):
            with patch("perp_risk.oracles.binance.aiohttp.TCPConnector"):
                price = await oracle.fetch_price("BTC/USD")

        assert price == pytest.approx(105824.5)
        _, kwargs = session.get.call_args
        assert kwargs["params"] == {"symbol": "BTCUSDT"}

    @pytest.mark.asyncio
    async def test_handles_http_error(self, oracle: BinanceOracle) -> None:
        session = _mock_session(status=500)

        with patch("perp_risk.oracles.binance.aiohttp.ClientSession", return_value=session):
            with patch("perp_risk.oracles.binance.aiohttp.TCPConnector"):
                price = await oracle.fetch_price("BTC/USD")

        assert price is None

    @pytest.mark.asyncio
    async def test_handles_missing_price(self, oracle: BinanceOracle) -> None:
        session = _mock_session(payload={"symbol": "BTCUSDT"})

        with patch("perp_risk.oracles.binance.aiohttp.ClientSession", return_value=session):
            with patch("perp_risk.oracles.binance.aiohttp.TCPConnector"):
                price = await oracle.fetch_price("BTC/USD")

        assert price is None

    @pytest.mark.asyncio
    async def test_handles_network_error(self, oracle: BinanceOracle) -> None:
        session = AsyncMock()
        session.get = MagicMock(side_effect=ConnectionError("timeout"))
        session.__aenter__ = AsyncMock(return_value=session)
        session.__aexit__ = AsyncMock(return_value=None)

        with patch("perp_risk.oracles.binance.aiohttp.ClientSession", return_value=session):
            with patch("perp_risk.oracles.binance.aiohttp.TCPConnector"):
                price = await oracle.fetch_price("BTC/USD")

        assert price is None

    @pytest.mark.asyncio
    async def test_rejects_non_finite_price(self, oracle: BinanceOracle) -> None:
        session = _mock_session(payload={"symbol": "BTCUSDT", "price": "NaN"})

        with patch("perp_risk.oracles.binance.aiohttp.ClientSession", return_value=session):
            with patch("perp_risk.oracles.binance.aiohttp.TCPConnector"):
                price = await oracle.fetch_price("BTC/USD")

        assert price is None


class TestFetchPrices:
    @pytest.mark.asyncio
    async def test_omits_failures(self, oracle: BinanceOracle) -> None:
        async def fake_fetch(market: str) -> float | None:
            return {"BTC/USD": 100000.0}.get(market)

        with patch.object(oracle, "fetch_price", side_effect=fake_fetch):
            prices = await oracle.fetch_prices(["BTC/USD", "ETH/USD"])

        assert prices == {"BTC/USD": 100000.0}
