"""
Publication requirements for listings.

Pure checks with no side effects; the listing service runs them before a
draft may enter review.
"""
from marketplace_engine.models.listing import Listing

MIN_TITLE_LENGTH = 5
MIN_DESCRIPTION_LENGTH = 20


def validate_listing(listing: Listing) -> list[str]:
    """
    Check a listing against every publication rule.

    Args:
        listing: Listing to check

    Returns:
        Every violated rule, empty when the listing may be submitted
    """
    errors = []

    if not listing.title or len(listing.title) < MIN_TITLE_LENGTH:
        errors.append(f"Title must be at least {MIN_TITLE_LENGTH} characters")

    if not listing.description or len(listing.description) < MIN_DESCRIPTION_LENGTH:
        errors.append(
            f"Description must be at least {MIN_DESCRIPTION_LENGTH} characters"
        )

    if not listing.images:
        errors.append("At least one image is required")

    if not listing.available_licenses:
        errors.append("At least one license type must be available")

    if listing.pricing.base_price <= 0:
        errors.append("Base price must be greater than 0")

    return errors


def is_publishable(listing: Listing) -> bool:
    return not validate_listing(listing)
