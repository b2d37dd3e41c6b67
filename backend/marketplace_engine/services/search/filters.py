"""
Search filters for listing attributes.

Each filter narrows the candidate list independently; all requested
filters must hold (conjunction). Multi-valued filters match when the
listing carries ANY of the requested values.
"""
from typing import Optional

from marketplace_engine.models.listing import (
    DesignCategory,
    LicenseType,
    Listing,
    Season,
)
from marketplace_engine.schemas.search import PriceRange, SearchParams


def apply_listing_filters(
    listings: list[Listing],
    query: Optional[str] = None,
    categories: Optional[list[DesignCategory]] = None,
    price_range: Optional[PriceRange] = None,
    license_types: Optional[list[LicenseType]] = None,
    colors: Optional[list[str]] = None,
    styles: Optional[list[str]] = None,
    seasons: Optional[list[str]] = None,
    seller_id: Optional[str] = None,
    is_featured: Optional[bool] = None,
) -> list[Listing]:
    """
    Apply filters to a list of listings.

    Args:
        listings: Candidate listings
        query: Case-insensitive substring matched against title, description and tags
        categories: Keep listings in any of these categories
        price_range: Inclusive bounds on base price
        license_types: Keep listings offering any of these license types
        colors: Keep listings tagged with any of these colors
        styles: Keep listings tagged with any of these styles
        seasons: Keep listings for any of these seasons (``all`` matches every season)
        seller_id: Keep listings of this seller
        is_featured: Keep listings whose featured flag equals this value

    Returns:
        Filtered list of listings, input order preserved
    """
    result = listings

    if query:
        result = _filter_by_text(result, query)

    if categories:
        result = _filter_by_category(result, categories)

    if price_range is not None:
        result = _filter_by_price(result, price_range)

    if license_types:
        result = _filter_by_license(result, license_types)

    if colors:
        result = _filter_by_colors(result, colors)

    if styles:
        result = _filter_by_styles(result, styles)

    if seasons:
        result = _filter_by_season(result, seasons)

    if seller_id:
        result = [listing for listing in result if listing.seller_id == seller_id]

    if is_featured is not None:
        result = [listing for listing in result if listing.is_featured == is_featured]

    return result


def apply_search_params(listings: list[Listing], params: SearchParams) -> list[Listing]:
    """Apply every filter carried by ``params``."""
    return apply_listing_filters(
        listings,
        query=params.query,
        categories=params.categories,
        price_range=params.price_range,
        license_types=params.license_types,
        colors=params.colors,
        styles=params.styles,
        seasons=params.seasons,
        seller_id=params.seller_id,
        is_featured=params.is_featured,
    )


def _filter_by_text(listings: list[Listing], query: str) -> list[Listing]:
    """Match if title, description or any tag contains the query."""
    query_lower = query.lower()
    return [
        listing for listing in listings
        if query_lower in listing.title.lower()
        or query_lower in listing.description.lower()
        or any(query_lower in tag.lower() for tag in listing.tags)
    ]


def _filter_by_category(
    listings: list[Listing],
    categories: list[DesignCategory],
) -> list[Listing]:
    wanted = set(categories)
    return [listing for listing in listings if listing.category in wanted]


def _filter_by_price(listings: list[Listing], price_range: PriceRange) -> list[Listing]:
    return [
        listing for listing in listings
        if price_range.min <= listing.pricing.base_price <= price_range.max
    ]


def _filter_by_license(
    listings: list[Listing],
    license_types: list[LicenseType],
) -> list[Listing]:
    wanted = set(license_types)
    return [
        listing for listing in listings
        if any(lt in wanted for lt in listing.available_licenses)
    ]


def _filter_by_colors(listings: list[Listing], colors: list[str]) -> list[Listing]:
    wanted = set(colors)
    return [
        listing for listing in listings
        if any(c in wanted for c in listing.colors)
    ]


def _filter_by_styles(listings: list[Listing], styles: list[str]) -> list[Listing]:
    wanted = set(styles)
    return [
        listing for listing in listings
        if listing.style and any(s in wanted for s in listing.style)
    ]


def _filter_by_season(listings: list[Listing], seasons: list[str]) -> list[Listing]:
    """Listings without a season never match; ``all`` matches any request."""
    wanted = {str(getattr(s, "value", s)).lower() for s in seasons}
    return [
        listing for listing in listings
        if listing.season is not None
        and (listing.season == Season.ALL or listing.season.value in wanted)
    ]
