"""
Listing models.

A listing is one sellable design offering. Its lifecycle:

    draft --submit--> pending_review --publish--> active --archive--> archived

Individual sales are recorded on the ``sales_count`` counter and leave the
listing ``active``; a listing can be licensed many times.
"""
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class ListingStatus(str, Enum):
    """Lifecycle status of a listing."""
    DRAFT = "draft"
    PENDING_REVIEW = "pending_review"
    ACTIVE = "active"
    SOLD = "sold"
    SUSPENDED = "suspended"
    EXPIRED = "expired"
    ARCHIVED = "archived"


class DesignCategory(str, Enum):
    TOPS = "tops"
    BOTTOMS = "bottoms"
    DRESSES = "dresses"
    OUTERWEAR = "outerwear"
    ACTIVEWEAR = "activewear"
    SWIMWEAR = "swimwear"
    INTIMATES = "intimates"
    ACCESSORIES = "accessories"
    FOOTWEAR = "footwear"
    PRINTS_PATTERNS = "prints_patterns"
    COLLECTIONS = "collections"


class LicenseType(str, Enum):
    """Kinds of license a buyer can acquire for a design."""
    EXCLUSIVE = "exclusive"        # Single buyer, full rights
    LIMITED = "limited"            # Limited production runs
    UNLIMITED = "unlimited"        # Full commercial, non-exclusive
    SUBSCRIPTION = "subscription"  # Catalog access
    ROYALTY = "royalty"            # Revenue share model
    CUSTOM = "custom"              # Negotiated terms


class Season(str, Enum):
    SPRING = "spring"
    SUMMER = "summer"
    FALL = "fall"
    WINTER = "winter"
    ALL = "all"  # Matches every requested season


class Currency(str, Enum):
    USD = "USD"
    EUR = "EUR"
    GBP = "GBP"
    JPY = "JPY"
    CAD = "CAD"
    AUD = "AUD"


class ImageType(str, Enum):
    MAIN = "main"
    DETAIL = "detail"
    FLAT = "flat"
    MODEL = "model"
    TECHNICAL = "technical"


class ListingImage(BaseModel):
    url: str
    type: ImageType = ImageType.MAIN
    order: int = 0


class BulkDiscount(BaseModel):
    """Percentage off once a buyer licenses at least ``min_quantity`` units."""
    min_quantity: int = Field(..., ge=1)
    discount_percent: float = Field(..., ge=0, le=100)


class PromotionalPrice(BaseModel):
    price: float
    valid_until: datetime


class DesignPricing(BaseModel):
    """Commercial terms of a listing."""
    base_price: float
    currency: Currency = Currency.USD
    license_prices: dict[LicenseType, float] = Field(default_factory=dict)
    bulk_discounts: list[BulkDiscount] = Field(default_factory=list)
    promotional_price: Optional[PromotionalPrice] = None

    def price_for(self, license_type: LicenseType, quantity: int = 1) -> float:
        """Unit price for a license type after the best applicable bulk tier."""
        price = self.license_prices.get(license_type, self.base_price)
        applicable = [
            tier.discount_percent
            for tier in self.bulk_discounts
            if quantity >= tier.min_quantity
        ]
        if applicable:
            price = price * (1 - max(applicable) / 100)
        return round(price, 2)


class Listing(BaseModel):
    """
    A published (or draft) offer to license a design.

    Engagement counters and rating fields are owned by the engine and are
    never written directly by clients.
    """
    id: str
    design_id: str
    seller_id: str
    title: str
    description: str = ""
    status: ListingStatus = ListingStatus.DRAFT
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
    images: list[ListingImage] = Field(default_factory=list)

    # Derived counters
    view_count: int = 0
    like_count: int = 0
    sales_count: int = 0
    rating: float = 0.0
    review_count: int = 0

    # Merchandising
    is_featured: bool = False
    is_promoted: bool = False
    promotion_end_date: Optional[datetime] = None

    # Timestamps
    created_at: datetime
    updated_at: datetime
    published_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None

    @property
    def base_price(self) -> float:
        return self.pricing.base_price

    @property
    def is_active(self) -> bool:
        return self.status == ListingStatus.ACTIVE
