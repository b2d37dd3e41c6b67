"""
Domain models for the marketplace engine.
"""
from marketplace_engine.models.listing import (
    BulkDiscount,
    Currency,
    DesignCategory,
    DesignPricing,
    ImageType,
    LicenseType,
    Listing,
    ListingImage,
    ListingStatus,
    PromotionalPrice,
    Season,
)
from marketplace_engine.models.auction import (
    Auction,
    AuctionStatus,
    Bid,
    TERMINAL_AUCTION_STATUSES,
)
from marketplace_engine.models.review import Review, ReviewAspects, SellerResponse

__all__ = [
    "BulkDiscount",
    "Currency",
    "DesignCategory",
    "DesignPricing",
    "ImageType",
    "LicenseType",
    "Listing",
    "ListingImage",
    "ListingStatus",
    "PromotionalPrice",
    "Season",
    "Auction",
    "AuctionStatus",
    "Bid",
    "TERMINAL_AUCTION_STATUSES",
    "Review",
    "ReviewAspects",
    "SellerResponse",
]
