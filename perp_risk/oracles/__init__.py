"""Price oracles."""
from .binance import BinanceOracle

__all__ = ["BinanceOracle"]
