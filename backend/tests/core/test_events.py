"""Tests for the engine event bus."""
from datetime import datetime, timezone

import pytest
from structlog.testing import capture_logs

from marketplace_engine.core.events import EventBus, ListingPublished, ReviewPosted

NOW = datetime(2025, 3, 1, tzinfo=timezone.utc)


def published(listing_id="lst_1"):
    return ListingPublished(listing_id=listing_id, occurred_at=NOW)


class TestEventBus:
    """Subscription and delivery."""

    def test_delivers_in_subscription_order(self):
        bus = EventBus()
        calls = []
        bus.subscribe(lambda e: calls.append(("first", e.listing_id)))
        bus.subscribe(lambda e: calls.append(("second", e.listing_id)))

        bus.publish(published())

        assert calls == [("first", "lst_1"), ("second", "lst_1")]

    def test_type_filter(self):
        bus = EventBus()
        reviews = []
        bus.subscribe(reviews.append, event_type="review_posted")

        bus.publish(published())
        bus.publish(ReviewPosted(review_id="rev_1", rating=5, occurred_at=NOW))

        assert [e.type for e in reviews] == ["review_posted"]

    def test_unsubscribe(self):
        bus = EventBus()
        calls = []
        unsubscribe = bus.subscribe(calls.append)

        unsubscribe()
        unsubscribe()
        bus.publish(published())

        assert calls == []
        assert bus.subscriber_count == 0

    def test_failing_handler_does_not_stop_delivery(self):
        bus = EventBus()
        calls = []

        def broken(event):
            raise RuntimeError("boom")

        bus.subscribe(broken)
        bus.subscribe(calls.append)

        with capture_logs() as logs:
            bus.publish(published())

        assert len(calls) == 1
        failures = [log for log in logs if log["event"] == "event_handler_failed"]
        assert failures[0]["handler"] == "broken"
        assert failures[0]["log_level"] == "error"


class TestMarketplaceEvents:
    """Events emitted by services."""

    @pytest.mark.asyncio
    async def test_publish_emits_listing_published(self, marketplace, listing_factory, clock):
        received = []
        marketplace.subscribe(received.append, event_type="listing_published")
        listing = await marketplace.listings.create(listing_factory())

        await marketplace.listings.publish(listing.id)

        assert [(e.listing_id, e.occurred_at) for e in received] == [(listing.id, clock.now())]

    @pytest.mark.asyncio
    async def test_marketplace_unsubscribe(self, marketplace, listing_factory):
        received = []
        unsubscribe = marketplace.subscribe(received.append)
        unsubscribe()

        listing = await marketplace.listings.create(listing_factory())
        await marketplace.listings.publish(listing.id)

        assert received == []
        assert marketplace.events.subscriber_count == 0
