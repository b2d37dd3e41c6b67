"""Listing input schemas."""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from marketplace_engine.core.clock import as_utc
from marketplace_engine.models.listing import (
    DesignCategory,
    DesignPricing,
    LicenseType,
    ListingImage,
    Season,
)


class ListingCreate(BaseModel):
    """
    Fields a seller supplies when creating a draft.

    Only the structural fields are required here; publication requirements
    (title length, images, licenses, price) are checked on submit.
    """
    design_id: str = Field(..., min_length=1)
    seller_id: str = Field(..., min_length=1)
    title: str
    description: str = ""
    pricing: DesignPricing
    available_licenses: list[LicenseType] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    category: DesignCategory
    subcategory: Optional[str] = None
    style: Optional[list[str]] = None
    season: Optional[Season] = None
    target_market: Optional[list[str]] = None
    colors: list[str] = Field(default_factory=list)
    materials: Optional[list[str]] = None
    images: list[ListingImage]
    expires_at: Optional[datetime] = None

    @field_validator("expires_at")
    @classmethod
    def expires_at_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return as_utc(v) if v is not None else v


class ListingUpdate(BaseModel):
    """Partial update; only fields that were explicitly set are applied."""
    title: Optional[str] = None
    description: Optional[str] = None
    pricing: Optional[DesignPricing] = None
    available_licenses: Optional[list[LicenseType]] = None
    tags: Optional[list[str]] = None
    category: Optional[DesignCategory] = None
    subcategory: Optional[str] = None
    style: Optional[list[str]] = None
    season: Optional[Season] = None
    target_market: Optional[list[str]] = None
    colors: Optional[list[str]] = None
    materials: Optional[list[str]] = None
    images: Optional[list[ListingImage]] = None
    expires_at: Optional[datetime] = None

    @field_validator("expires_at")
    @classmethod
    def expires_at_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return as_utc(v) if v is not None else v

    class Config:
        extra = "forbid"


class SellerStats(BaseModel):
    """Read-only engagement summary consumed by profile/analytics."""
    total_listings: int
    active_listings: int
    total_sales: int
    total_views: int
    average_rating: float
    total_reviews: int
