"""
Result ordering and discovery scores.

All sorts are stable: listings that tie keep their prior relative order.
"""
from datetime import datetime, timezone

from marketplace_engine.models.listing import Listing
from marketplace_engine.schemas.search import SortBy

FEATURED_WEIGHT = 100
PROMOTED_WEIGHT = 50
VIEW_WEIGHT = 0.1

TRENDING_LIKE_WEIGHT = 5
TRENDING_SALE_WEIGHT = 20

# Listings never published sort as the oldest
_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def relevance_score(listing: Listing) -> float:
    """Composite ranking: featured and promoted boosts plus a view signal."""
    return (
        (FEATURED_WEIGHT if listing.is_featured else 0)
        + (PROMOTED_WEIGHT if listing.is_promoted else 0)
        + listing.view_count * VIEW_WEIGHT
    )


def trending_score(listing: Listing) -> float:
    return (
        listing.view_count
        + listing.like_count * TRENDING_LIKE_WEIGHT
        + listing.sales_count * TRENDING_SALE_WEIGHT
    )


def _published_key(listing: Listing) -> datetime:
    published = listing.published_at
    if published is None:
        return _EPOCH
    if published.tzinfo is None:
        return published.replace(tzinfo=timezone.utc)
    return published


def sort_listings(listings: list[Listing], sort_by: SortBy = SortBy.RELEVANCE) -> list[Listing]:
    """
    Order listings for display.

    Args:
        listings: Filtered listings
        sort_by: Ordering to apply

    Returns:
        New sorted list
    """
    if sort_by == SortBy.PRICE_LOW:
        return sorted(listings, key=lambda l: l.pricing.base_price)
    if sort_by == SortBy.PRICE_HIGH:
        return sorted(listings, key=lambda l: l.pricing.base_price, reverse=True)
    if sort_by == SortBy.NEWEST:
        return sorted(listings, key=_published_key, reverse=True)
    if sort_by == SortBy.POPULAR:
        return sorted(listings, key=lambda l: l.sales_count, reverse=True)
    if sort_by == SortBy.RATING:
        return sorted(listings, key=lambda l: l.rating, reverse=True)
    return sorted(listings, key=relevance_score, reverse=True)
