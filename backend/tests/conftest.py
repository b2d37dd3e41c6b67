"""
Pytest configuration and fixtures.

Provides fixtures for:
- A fresh marketplace per test with a manual clock and sequential ids
- Listing input data and helpers that build published listings
- Auctions already opened by the sweep
"""
from datetime import datetime, timezone

import pytest
import pytest_asyncio

from marketplace_engine.core.clock import ManualClock
from marketplace_engine.core.config import Settings
from marketplace_engine.core.ids import SequentialIdGenerator
from marketplace_engine.engine import Marketplace

START = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def clock() -> ManualClock:
    """Simulated time starting at START."""
    return ManualClock(START)


@pytest.fixture
def test_settings() -> Settings:
    return Settings(debug=False, log_level="INFO")


@pytest.fixture
def marketplace(clock, test_settings) -> Marketplace:
    """Fresh engine per test; no shared state between tests."""
    return Marketplace(
        clock=clock,
        ids=SequentialIdGenerator(),
        settings=test_settings,
    )


def make_listing_data(**overrides) -> dict:
    """Listing input that passes every publication rule."""
    data = {
        "design_id": "design-1",
        "seller_id": "seller-1",
        "title": "Floral Summer Dress",
        "description": "A lightweight wrap dress with a hand-painted floral print.",
        "pricing": {
            "base_price": 150.0,
            "currency": "USD",
            "license_prices": {"unlimited": 150.0, "exclusive": 900.0},
            "bulk_discounts": [{"min_quantity": 10, "discount_percent": 15}],
        },
        "available_licenses": ["unlimited", "exclusive"],
        "tags": ["floral", "summer"],
        "category": "dresses",
        "style": ["bohemian"],
        "season": "summer",
        "colors": ["red", "white"],
        "images": [{"url": "https://cdn.example.com/dress.png", "type": "main", "order": 0}],
    }
    data.update(overrides)
    return data


@pytest.fixture
def listing_data() -> dict:
    return make_listing_data()


@pytest.fixture
def listing_factory():
    """Builds listing input dicts; keyword arguments override defaults."""
    return make_listing_data


@pytest.fixture
def publish_listing(marketplace):
    """Factory creating and publishing a listing; each call needs a distinct design_id."""

    async def _publish(**overrides):
        listing = await marketplace.listings.create(make_listing_data(**overrides))
        return await marketplace.listings.publish(listing.id)

    return _publish


@pytest_asyncio.fixture
async def active_listing(publish_listing):
    return await publish_listing()


@pytest.fixture
def open_auction(marketplace, clock, active_listing):
    """Factory creating an auction that starts now and opening it via the sweep."""

    async def _open(**overrides):
        data = {
            "listing_id": active_listing.id,
            "seller_id": active_listing.seller_id,
            "title": "Floral dress exclusive rights",
            "starting_price": 100.0,
            "bid_increment": 10.0,
            "starts_at": clock.now(),
            "duration_days": 7,
        }
        data.update(overrides)
        auction = await marketplace.auctions.create_auction(data)
        await marketplace.auctions.process_auction_endings()
        return await marketplace.auctions.require_auction(auction.id)

    return _open
