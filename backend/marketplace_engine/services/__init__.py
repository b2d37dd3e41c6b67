"""Marketplace engine services."""
from marketplace_engine.services.auctions import AuctionService
from marketplace_engine.services.listings import ListingService
from marketplace_engine.services.reviews import PurchaseVerifier, ReviewService
from marketplace_engine.services.search import SearchService
from marketplace_engine.services.sellers import SellerService
from marketplace_engine.services.validation import validate_listing

__all__ = [
    "AuctionService",
    "ListingService",
    "PurchaseVerifier",
    "ReviewService",
    "SearchService",
    "SellerService",
    "validate_listing",
]
