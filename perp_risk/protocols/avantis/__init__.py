"""Avantis pair-info source."""
from .client import AvantisPairInfoClient

__all__ = ["AvantisPairInfoClient"]
