"""
Review models.

A review is buyer feedback tied to a completed license purchase.
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class ReviewAspects(BaseModel):
    """Sub-ratings, each on the same 1-5 scale as the overall rating."""
    design_quality: int = Field(..., ge=1, le=5)
    value_for_money: int = Field(..., ge=1, le=5)
    communication: int = Field(..., ge=1, le=5)
    tech_pack_accuracy: Optional[int] = Field(None, ge=1, le=5)
    manufacturability: Optional[int] = Field(None, ge=1, le=5)


class SellerResponse(BaseModel):
    content: str
    responded_at: datetime


class Review(BaseModel):
    id: str
    listing_id: str
    license_id: str
    reviewer_id: str
    seller_id: str
    rating: int
    title: Optional[str] = None
    content: str
    aspects: ReviewAspects
    images: list[str] = Field(default_factory=list)
    is_verified_purchase: bool = True
    helpful_count: int = 0
    report_count: int = 0
    seller_response: Optional[SellerResponse] = None
    created_at: datetime
    updated_at: datetime
    deleted_at: Optional[datetime] = None

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None
