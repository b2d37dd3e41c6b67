"""Tests for the listing lifecycle and engagement counters."""
from datetime import datetime, timedelta, timezone

import pytest

from marketplace_engine.core.errors import NotFoundError, StateConflictError, ValidationError
from marketplace_engine.models.listing import LicenseType, ListingStatus


class TestCreateListing:
    """Draft creation."""

    @pytest.mark.asyncio
    async def test_create_starts_in_draft(self, marketplace, listing_data, clock):
        """New listings start as drafts with zeroed counters."""
        listing = await marketplace.listings.create(listing_data)

        assert listing.id == "lst_1"
        assert listing.status == ListingStatus.DRAFT
        assert listing.view_count == 0
        assert listing.rating == 0.0
        assert listing.created_at == clock.now()
        assert listing.published_at is None

    @pytest.mark.asyncio
    async def test_create_allows_empty_images(self, marketplace, listing_factory):
        """Images may be empty at draft time; they are required only to submit."""
        listing = await marketplace.listings.create(listing_factory(images=[]))

        assert listing.images == []

    @pytest.mark.asyncio
    async def test_create_rejects_missing_structural_fields(self, marketplace, listing_data):
        """Every missing required field is reported."""
        del listing_data["design_id"]
        del listing_data["images"]

        with pytest.raises(ValidationError) as exc_info:
            await marketplace.listings.create(listing_data)

        message = str(exc_info.value)
        assert "design_id is required" in message
        assert "images is required" in message

    @pytest.mark.asyncio
    async def test_create_rejects_unknown_category(self, marketplace, listing_factory):
        with pytest.raises(ValidationError) as exc_info:
            await marketplace.listings.create(listing_factory(category="hats"))

        assert "category" in str(exc_info.value)


class TestSubmitForReview:
    """Submission gate."""

    @pytest.mark.asyncio
    async def test_submit_valid_draft(self, marketplace, listing_data):
        listing = await marketplace.listings.create(listing_data)

        submitted = await marketplace.listings.submit_for_review(listing.id)

        assert submitted.status == ListingStatus.PENDING_REVIEW

    @pytest.mark.asyncio
    async def test_submit_with_zero_price_mentions_price(self, marketplace, listing_factory):
        listing = await marketplace.listings.create(
            listing_factory(pricing={"base_price": 0})
        )

        with pytest.raises(ValidationError) as exc_info:
            await marketplace.listings.submit_for_review(listing.id)

        assert "price" in str(exc_info.value).lower()
        stored = await marketplace.listings.get(listing.id)
        assert stored.status == ListingStatus.DRAFT

    @pytest.mark.asyncio
    async def test_submit_reports_every_violation(self, marketplace, listing_factory):
        listing = await marketplace.listings.create(
            listing_factory(
                title="Tee",
                description="Too short",
                images=[],
                available_licenses=[],
                pricing={"base_price": -5},
            )
        )

        with pytest.raises(ValidationError) as exc_info:
            await marketplace.listings.submit_for_review(listing.id)

        assert len(exc_info.value.errors) == 5
        assert str(exc_info.value).startswith("Listing validation failed")

    @pytest.mark.asyncio
    async def test_submit_non_draft_conflicts(self, marketplace, listing_data):
        listing = await marketplace.listings.create(listing_data)
        await marketplace.listings.publish(listing.id)

        with pytest.raises(StateConflictError, match="Only draft"):
            await marketplace.listings.submit_for_review(listing.id)

    @pytest.mark.asyncio
    async def test_submit_unknown_listing(self, marketplace):
        with pytest.raises(NotFoundError):
            await marketplace.listings.submit_for_review("lst_missing")


class TestPublishAndArchive:
    """Publication, archival and events."""

    @pytest.mark.asyncio
    async def test_publish_sets_active_and_timestamp(self, marketplace, listing_data, clock):
        listing = await marketplace.listings.create(listing_data)
        await marketplace.listings.submit_for_review(listing.id)
        clock.advance(hours=2)

        published = await marketplace.listings.publish(listing.id)

        assert published.status == ListingStatus.ACTIVE
        assert published.published_at == clock.now()

    @pytest.mark.asyncio
    async def test_publish_emits_event(self, marketplace, listing_data):
        received = []
        marketplace.subscribe(received.append, event_type="listing_published")
        listing = await marketplace.listings.create(listing_data)

        await marketplace.listings.publish(listing.id)

        assert len(received) == 1
        assert received[0].listing_id == listing.id

    @pytest.mark.asyncio
    async def test_one_active_listing_per_design(self, marketplace, listing_data):
        first = await marketplace.listings.create(listing_data)
        second = await marketplace.listings.create(listing_data)
        await marketplace.listings.publish(first.id)

        with pytest.raises(StateConflictError, match="already has active listing"):
            await marketplace.listings.publish(second.id)

        # Archiving the first frees the design
        await marketplace.listings.archive(first.id)
        republished = await marketplace.listings.publish(second.id)
        assert republished.status == ListingStatus.ACTIVE

    @pytest.mark.asyncio
    async def test_archive(self, marketplace, active_listing):
        archived = await marketplace.listings.archive(active_listing.id)

        assert archived.status == ListingStatus.ARCHIVED
        # Never hard-deleted
        assert await marketplace.listings.get(active_listing.id) is not None

    @pytest.mark.asyncio
    async def test_get_by_design_id(self, marketplace, active_listing):
        found = await marketplace.listings.get_by_design_id("design-1")

        assert found.id == active_listing.id
        assert await marketplace.listings.get_by_design_id("unknown") is None

    @pytest.mark.asyncio
    async def test_expire_listings(self, marketplace, publish_listing, clock):
        expiring = await publish_listing(
            design_id="design-exp", expires_at=clock.now() + timedelta(days=1)
        )
        lasting = await publish_listing(design_id="design-keep")
        clock.advance(days=2)

        assert await marketplace.listings.expire_listings() == 1
        assert await marketplace.listings.expire_listings() == 0
        assert (await marketplace.listings.get(expiring.id)).status == ListingStatus.EXPIRED
        assert (await marketplace.listings.get(lasting.id)).status == ListingStatus.ACTIVE

    @pytest.mark.asyncio
    async def test_naive_expiry_is_read_as_utc(self, marketplace, publish_listing, clock):
        listing = await publish_listing(expires_at="2025-03-02T00:00:00")
        clock.advance(days=2)

        assert listing.expires_at == datetime(2025, 3, 2, tzinfo=timezone.utc)
        assert await marketplace.listings.expire_listings() == 1

    @pytest.mark.asyncio
    async def test_naive_expiry_on_update_is_read_as_utc(self, marketplace, active_listing, clock):
        updated = await marketplace.listings.update(
            active_listing.id, {"expires_at": "2025-03-02T00:00:00"}
        )
        clock.advance(days=2)

        assert updated.expires_at.tzinfo is not None
        assert await marketplace.listings.expire_listings() == 1

    @pytest.mark.asyncio
    async def test_naive_promotion_end_is_read_as_utc(self, marketplace, active_listing):
        promoted = await marketplace.listings.set_promoted(
            active_listing.id, until=datetime(2025, 4, 1)
        )

        assert promoted.promotion_end_date == datetime(2025, 4, 1, tzinfo=timezone.utc)

    @pytest.mark.asyncio
    async def test_suspend(self, marketplace, active_listing):
        suspended = await marketplace.listings.suspend(active_listing.id)

        assert suspended.status == ListingStatus.SUSPENDED


class TestUpdateListing:
    """Partial updates."""

    @pytest.mark.asyncio
    async def test_update_merges_fields(self, marketplace, listing_data, clock):
        listing = await marketplace.listings.create(listing_data)
        clock.advance(minutes=10)

        updated = await marketplace.listings.update(
            listing.id,
            {"title": "Floral Midi Dress", "available_licenses": ["limited"]},
        )

        assert updated.title == "Floral Midi Dress"
        assert updated.available_licenses == [LicenseType.LIMITED]
        assert updated.description == listing.description
        assert updated.updated_at == clock.now()

    @pytest.mark.asyncio
    async def test_update_rejects_counter_fields(self, marketplace, active_listing):
        with pytest.raises(ValidationError):
            await marketplace.listings.update(active_listing.id, {"view_count": 1000})

    @pytest.mark.asyncio
    async def test_update_cannot_clear_required_field(self, marketplace, active_listing):
        with pytest.raises(ValidationError, match="title cannot be cleared"):
            await marketplace.listings.update(active_listing.id, {"title": None})

    @pytest.mark.asyncio
    async def test_update_archived_conflicts(self, marketplace, active_listing):
        await marketplace.listings.archive(active_listing.id)

        with pytest.raises(StateConflictError):
            await marketplace.listings.update(active_listing.id, {"title": "New title here"})


class TestEngagementCounters:
    """Views, likes and sales."""

    @pytest.mark.asyncio
    async def test_record_view(self, marketplace, active_listing):
        await marketplace.listings.record_view(active_listing.id)
        listing = await marketplace.listings.record_view(active_listing.id)

        assert listing.view_count == 2

    @pytest.mark.asyncio
    async def test_like_and_unlike(self, marketplace, active_listing):
        await marketplace.listings.record_like(active_listing.id, "user-1")
        listing = await marketplace.listings.record_unlike(active_listing.id, "user-1")

        assert listing.like_count == 0

    @pytest.mark.asyncio
    async def test_unlike_clamps_at_zero(self, marketplace, active_listing):
        listing = await marketplace.listings.record_unlike(active_listing.id, "user-1")

        assert listing.like_count == 0

    @pytest.mark.asyncio
    async def test_sale_keeps_listing_active(self, marketplace, active_listing):
        await marketplace.listings.record_sale(active_listing.id)
        listing = await marketplace.listings.record_sale(active_listing.id)

        assert listing.sales_count == 2
        assert listing.status == ListingStatus.ACTIVE

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "operation", ["record_view", "record_like", "record_unlike", "record_sale"]
    )
    async def test_counters_on_unknown_listing(self, marketplace, operation):
        with pytest.raises(NotFoundError):
            await getattr(marketplace.listings, operation)("lst_missing")

    @pytest.mark.asyncio
    async def test_returned_listing_is_a_snapshot(self, marketplace, active_listing):
        """Mutating a returned listing does not change stored state."""
        active_listing.view_count = 999

        stored = await marketplace.listings.get(active_listing.id)
        assert stored.view_count == 0
