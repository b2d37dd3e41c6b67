"""
Marketplace engine: listing lifecycle, faceted search and auctions for a
design-licensing marketplace.
"""
from marketplace_engine.engine import Marketplace

__all__ = ["Marketplace"]
