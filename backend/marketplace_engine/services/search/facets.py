"""
Facet computation.

Facets describe the filtered population before sorting and paging, so
the counts stay the same whichever page is being viewed.
"""
from collections import Counter
from typing import Optional

from marketplace_engine.models.listing import Listing
from marketplace_engine.schemas.search import FacetCount, PriceRangeFacet, SearchFacets

# Half-open [min, max) bands; None means unbounded above
PRICE_BANDS: list[tuple[float, Optional[float]]] = [
    (0, 50),
    (50, 100),
    (100, 500),
    (500, 1000),
    (1000, None),
]


def calculate_facets(listings: list[Listing]) -> SearchFacets:
    """Count listings per category, color, style and price band."""
    categories: Counter[str] = Counter()
    colors: Counter[str] = Counter()
    styles: Counter[str] = Counter()

    for listing in listings:
        categories[listing.category.value] += 1
        for color in listing.colors:
            colors[color] += 1
        for style in listing.style or []:
            styles[style] += 1

    return SearchFacets(
        categories=_to_counts(categories),
        price_ranges=[
            PriceRangeFacet(
                min=low,
                max=high,
                count=sum(1 for listing in listings if _in_band(listing.base_price, low, high)),
            )
            for low, high in PRICE_BANDS
        ],
        colors=_to_counts(colors),
        styles=_to_counts(styles),
    )


def _in_band(price: float, low: float, high: Optional[float]) -> bool:
    return price >= low and (high is None or price < high)


def _to_counts(counter: Counter) -> list[FacetCount]:
    # First-seen order, matching the order listings were scanned
    return [FacetCount(value=value, count=count) for value, count in counter.items()]
