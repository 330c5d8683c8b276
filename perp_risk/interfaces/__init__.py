"""Protocol interfaces for the engine's data collaborators."""
from .liquidity_source import LiquiditySource
from .price_source import PriceSource

__all__ = ["LiquiditySource", "PriceSource"]
