"""Search request and response schemas."""
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from marketplace_engine.models.listing import DesignCategory, LicenseType, Listing


class SortBy(str, Enum):
    RELEVANCE = "relevance"
    PRICE_LOW = "price_low"
    PRICE_HIGH = "price_high"
    NEWEST = "newest"
    POPULAR = "popular"
    RATING = "rating"


class PriceRange(BaseModel):
    """Inclusive bounds on base price."""
    min: float = 0
    max: float

    @model_validator(mode="after")
    def check_bounds(self) -> "PriceRange":
        if self.min > self.max:
            raise ValueError("price range min must not exceed max")
        return self


class SearchParams(BaseModel):
    """Filters, sort and paging for a marketplace search."""
    query: Optional[str] = Field(None, description="Case-insensitive substring")
    categories: Optional[list[DesignCategory]] = None
    price_range: Optional[PriceRange] = None
    license_types: Optional[list[LicenseType]] = Field(None, description="Match any")
    colors: Optional[list[str]] = Field(None, description="Match any")
    styles: Optional[list[str]] = Field(None, description="Match any")
    seasons: Optional[list[str]] = Field(None, description="'all' listings match every season")
    seller_id: Optional[str] = None
    is_featured: Optional[bool] = None
    sort_by: SortBy = SortBy.RELEVANCE
    page: int = Field(1, ge=1)
    limit: int = Field(20, ge=1)


class FacetCount(BaseModel):
    value: str
    count: int


class PriceRangeFacet(BaseModel):
    min: float
    max: Optional[float] = None  # None means unbounded
    count: int


class SearchFacets(BaseModel):
    categories: list[FacetCount] = Field(default_factory=list)
    price_ranges: list[PriceRangeFacet] = Field(default_factory=list)
    colors: list[FacetCount] = Field(default_factory=list)
    styles: list[FacetCount] = Field(default_factory=list)


class SearchResult(BaseModel):
    """One page of results plus facets over the whole filtered population."""
    listings: list[Listing]
    total: int
    page: int
    limit: int
    total_pages: int
    facets: SearchFacets

    @property
    def has_more(self) -> bool:
        return self.page < self.total_pages
