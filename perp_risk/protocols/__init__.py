"""Venue-specific liquidity parameter sources."""
