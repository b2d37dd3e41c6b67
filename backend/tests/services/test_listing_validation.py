"""Tests for listing publication rules."""
from datetime import datetime, timezone

from marketplace_engine.models.listing import (
    DesignCategory,
    DesignPricing,
    LicenseType,
    Listing,
    ListingImage,
)
from marketplace_engine.services.validation import is_publishable, validate_listing

NOW = datetime(2025, 1, 1, tzinfo=timezone.utc)


def build_listing(**overrides) -> Listing:
    fields = {
        "id": "lst_1",
        "design_id": "design-1",
        "seller_id": "seller-1",
        "title": "Minimal Linen Shirt",
        "description": "Boxy linen shirt with a dropped shoulder and patch pocket.",
        "pricing": DesignPricing(base_price=80),
        "available_licenses": [LicenseType.UNLIMITED],
        "category": DesignCategory.TOPS,
        "images": [ListingImage(url="https://cdn.example.com/shirt.png")],
        "created_at": NOW,
        "updated_at": NOW,
    }
    fields.update(overrides)
    return Listing(**fields)


class TestListingValidator:

    def test_valid_listing_has_no_errors(self):
        assert validate_listing(build_listing()) == []
        assert is_publishable(build_listing())

    def test_title_boundary(self):
        assert validate_listing(build_listing(title="Shirt")) == []
        assert validate_listing(build_listing(title="Tee")) == [
            "Title must be at least 5 characters"
        ]

    def test_description_boundary(self):
        assert validate_listing(build_listing(description="x" * 20)) == []
        assert validate_listing(build_listing(description="x" * 19)) == [
            "Description must be at least 20 characters"
        ]

    def test_requires_image_and_license(self):
        errors = validate_listing(build_listing(images=[], available_licenses=[]))

        assert "At least one image is required" in errors
        assert "At least one license type must be available" in errors

    def test_requires_positive_price(self):
        errors = validate_listing(build_listing(pricing=DesignPricing(base_price=0)))

        assert errors == ["Base price must be greater than 0"]
        assert not is_publishable(build_listing(pricing=DesignPricing(base_price=0)))


class TestDesignPricing:

    def test_license_price_falls_back_to_base(self):
        pricing = DesignPricing(base_price=100, license_prices={LicenseType.EXCLUSIVE: 600})

        assert pricing.price_for(LicenseType.EXCLUSIVE) == 600
        assert pricing.price_for(LicenseType.LIMITED) == 100

    def test_best_bulk_tier_applies(self):
        pricing = DesignPricing(
            base_price=100,
            bulk_discounts=[
                {"min_quantity": 10, "discount_percent": 10},
                {"min_quantity": 50, "discount_percent": 25},
            ],
        )

        assert pricing.price_for(LicenseType.UNLIMITED, quantity=5) == 100
        assert pricing.price_for(LicenseType.UNLIMITED, quantity=10) == 90
        assert pricing.price_for(LicenseType.UNLIMITED, quantity=60) == 75
