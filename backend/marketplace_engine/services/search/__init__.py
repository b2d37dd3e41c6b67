"""Search and discovery over active listings."""
from marketplace_engine.services.search.facets import PRICE_BANDS, calculate_facets
from marketplace_engine.services.search.filters import apply_listing_filters, apply_search_params
from marketplace_engine.services.search.pagination import paginate
from marketplace_engine.services.search.ranking import relevance_score, sort_listings, trending_score
from marketplace_engine.services.search.service import SearchService

__all__ = [
    "PRICE_BANDS",
    "calculate_facets",
    "apply_listing_filters",
    "apply_search_params",
    "paginate",
    "relevance_score",
    "sort_listings",
    "trending_score",
    "SearchService",
]
