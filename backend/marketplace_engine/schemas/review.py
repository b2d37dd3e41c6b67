"""Review input schemas."""
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from marketplace_engine.models.review import ReviewAspects


class ReviewSort(str, Enum):
    NEWEST = "newest"
    HELPFUL = "helpful"
    RATING_HIGH = "rating_high"
    RATING_LOW = "rating_low"


class ReviewCreate(BaseModel):
    listing_id: str
    license_id: str
    reviewer_id: str
    seller_id: str
    rating: int
    title: Optional[str] = None
    content: str
    aspects: ReviewAspects
    images: list[str] = Field(default_factory=list)
