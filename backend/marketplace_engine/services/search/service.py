"""
Marketplace search and discovery.

Read-only queries over the currently active listings. Every query works on
a snapshot taken from the repository, so it can run alongside writes
without observing a half-updated listing.
"""
from typing import Any

import structlog

from marketplace_engine.core.config import Settings, settings as default_settings
from marketplace_engine.core.errors import ValidationError
from marketplace_engine.core.validation import validate_input
from marketplace_engine.models.listing import Listing
from marketplace_engine.schemas.search import SearchParams, SearchResult
from marketplace_engine.services.listings import ListingService
from marketplace_engine.services.search.facets import calculate_facets
from marketplace_engine.services.search.filters import apply_search_params
from marketplace_engine.services.search.pagination import paginate
from marketplace_engine.services.search.ranking import sort_listings, trending_score

logger = structlog.get_logger()


class SearchService:
    """
    Filter -> facet -> sort -> paginate pipeline over active listings.

    Usage:
        search = SearchService(listing_service)
        result = await search.search({"query": "floral", "sort_by": "price_low"})
    """

    def __init__(self, listing_service: ListingService, settings: Settings | None = None):
        self.listing_service = listing_service
        self.settings = settings or default_settings

    async def search(self, params: SearchParams | dict[str, Any]) -> SearchResult:
        """
        Run a faceted search.

        Args:
            params: Filters, sort order and paging

        Returns:
            The requested page, the post-filter total and facets over the
            whole filtered population

        Raises:
            ValidationError: Malformed parameters or an oversized page
        """
        params = validate_input(SearchParams, params, context="Invalid search")
        if params.limit > self.settings.max_page_size:
            raise ValidationError(
                f"limit must not exceed {self.settings.max_page_size}"
            )

        candidates = await self.listing_service.list_active()
        filtered = apply_search_params(candidates, params)
        facets = calculate_facets(filtered)
        ordered = sort_listings(filtered, params.sort_by)
        page_items, total, total_pages = paginate(ordered, params.page, params.limit)

        logger.debug(
            "marketplace_search",
            query=params.query,
            sort_by=params.sort_by.value,
            page=params.page,
            total=total,
        )

        return SearchResult(
            listings=page_items,
            total=total,
            page=params.page,
            limit=params.limit,
            total_pages=total_pages,
            facets=facets,
        )

    async def get_featured(self, limit: int | None = None) -> list[Listing]:
        """Featured active listings, most viewed first."""
        limit = limit if limit is not None else self.settings.featured_limit
        featured = [l for l in await self.listing_service.list_active() if l.is_featured]
        featured.sort(key=lambda l: l.view_count, reverse=True)
        return featured[:limit]

    async def get_trending(self, limit: int | None = None) -> list[Listing]:
        """Active listings ranked by views + 5 x likes + 20 x sales."""
        limit = limit if limit is not None else self.settings.trending_limit
        active = await self.listing_service.list_active()
        return sorted(active, key=trending_score, reverse=True)[:limit]

    async def get_similar(self, listing_id: str, limit: int | None = None) -> list[Listing]:
        """
        Active listings sharing a category, a tag or a style with the given one.

        Raises:
            NotFoundError: Unknown listing
        """
        limit = limit if limit is not None else self.settings.similar_limit
        source = await self.listing_service.require(listing_id)
        source_tags = set(source.tags)
        source_styles = set(source.style or [])

        similar = [
            listing for listing in await self.listing_service.list_active()
            if listing.id != listing_id
            and (
                listing.category == source.category
                or source_tags.intersection(listing.tags)
                or source_styles.intersection(listing.style or [])
            )
        ]
        return similar[:limit]
