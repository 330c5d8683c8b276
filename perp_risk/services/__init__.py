"""Service modules"""
from .liquidity_cache import LiquiditySnapshotCache
from .risk_service import RiskService

__all__ = ["LiquiditySnapshotCache", "RiskService"]
