"""Input and response schemas for the marketplace engine."""
from marketplace_engine.schemas.listing import ListingCreate, ListingUpdate, SellerStats
from marketplace_engine.schemas.auction import AuctionCreate, SettledAuction, SweepResult
from marketplace_engine.schemas.review import ReviewCreate, ReviewSort
from marketplace_engine.schemas.search import (
    FacetCount,
    PriceRange,
    PriceRangeFacet,
    SearchFacets,
    SearchParams,
    SearchResult,
    SortBy,
)

__all__ = [
    "ListingCreate",
    "ListingUpdate",
    "SellerStats",
    "AuctionCreate",
    "SettledAuction",
    "SweepResult",
    "ReviewCreate",
    "ReviewSort",
    "FacetCount",
    "PriceRange",
    "PriceRangeFacet",
    "SearchFacets",
    "SearchParams",
    "SearchResult",
    "SortBy",
]
