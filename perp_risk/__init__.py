"""Liquidation price, margin and dynamic spread calculator for leveraged perps."""

__version__ = "0.1.0"
