"""
Listing service managing the listing lifecycle.

Handles:
- Creating drafts and editing content
- The submit / publish / archive state machine with its validation gate
- Engagement counters (views, likes, sales) and rating fields
"""
from datetime import datetime
from typing import Any, Callable, Optional

from structlog import get_logger

from marketplace_engine.core.clock import Clock, SystemClock, as_utc
from marketplace_engine.core.config import Settings, settings as default_settings
from marketplace_engine.core.errors import NotFoundError, StateConflictError, ValidationError
from marketplace_engine.core.events import EventBus, ListingPublished
from marketplace_engine.core.ids import LISTING_PREFIX, IdGenerator, UuidIdGenerator
from marketplace_engine.core.locks import KeyedLocks
from marketplace_engine.core.validation import validate_input
from marketplace_engine.models.listing import Listing, ListingStatus
from marketplace_engine.repositories.base import Repository
from marketplace_engine.schemas.listing import ListingCreate, ListingUpdate
from marketplace_engine.services.validation import validate_listing

logger = get_logger()

# Fields an update may not clear
_NON_NULLABLE_FIELDS = frozenset({
    "title",
    "description",
    "pricing",
    "available_licenses",
    "tags",
    "category",
    "colors",
    "images",
})


class ListingService:
    """Service for managing marketplace listings."""

    def __init__(
        self,
        listings: Repository[Listing],
        events: EventBus,
        clock: Clock | None = None,
        ids: IdGenerator | None = None,
        settings: Settings | None = None,
    ):
        self.listings = listings
        self.events = events
        self.clock = clock or SystemClock()
        self.ids = ids or UuidIdGenerator()
        self.settings = settings or default_settings
        self.locks = KeyedLocks("listing")
        self._design_locks = KeyedLocks("design")

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get(self, listing_id: str) -> Listing | None:
        """Get a listing by ID."""
        return await self.listings.get(listing_id)

    async def require(self, listing_id: str) -> Listing:
        """Get a listing by ID or raise NotFoundError."""
        listing = await self.listings.get(listing_id)
        if listing is None:
            raise NotFoundError("listing", listing_id)
        return listing

    async def get_by_design_id(self, design_id: str) -> Listing | None:
        """
        Get the listing backing a design.

        Prefers the active listing when a design has several (for example an
        archived one and its replacement).
        """
        matches = await self.listings.list_by(lambda l: l.design_id == design_id)
        if not matches:
            return None
        for listing in matches:
            if listing.is_active:
                return listing
        return matches[0]

    async def list_active(self) -> list[Listing]:
        """Snapshot of every active listing, in creation order."""
        return await self.listings.list_by(lambda l: l.status == ListingStatus.ACTIVE)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def create(self, data: ListingCreate | dict[str, Any]) -> Listing:
        """
        Create a new listing in ``draft``.

        Args:
            data: Listing fields; images may still be empty at draft time

        Returns:
            The created listing

        Raises:
            ValidationError: If a required structural field is missing
        """
        payload = validate_input(ListingCreate, data, context="Invalid listing")
        now = self.clock.now()

        listing = Listing(
            id=self.ids.new_id(LISTING_PREFIX),
            status=ListingStatus.DRAFT,
            created_at=now,
            updated_at=now,
            **payload.model_dump(exclude={"pricing", "images"}),
            pricing=payload.pricing,
            images=payload.images,
        )
        await self.listings.put(listing)

        logger.info(
            "listing_created",
            listing_id=listing.id,
            seller_id=listing.seller_id,
            design_id=listing.design_id,
        )
        return listing

    async def submit_for_review(self, listing_id: str) -> Listing:
        """
        Move a draft into ``pending_review``.

        Raises:
            NotFoundError: Unknown listing
            StateConflictError: Listing is not a draft
            ValidationError: Listing fails publication rules (all are reported)
        """
        async with self.locks.hold(listing_id):
            listing = await self.require(listing_id)

            if listing.status != ListingStatus.DRAFT:
                raise StateConflictError(
                    "Only draft listings can be submitted for review"
                )

            errors = validate_listing(listing)
            if errors:
                logger.info(
                    "listing_validation_failed",
                    listing_id=listing_id,
                    errors=errors,
                )
                raise ValidationError(errors, prefix="Listing validation failed")

            listing.status = ListingStatus.PENDING_REVIEW
            listing.updated_at = self.clock.now()
            await self.listings.put(listing)

        logger.info("listing_submitted", listing_id=listing_id)
        return listing

    async def publish(self, listing_id: str) -> Listing:
        """
        Make a listing ``active`` and emit ``listing_published``.

        Publication itself has no status precondition (approval happens in the
        review collaborator), but a design can back at most one active listing.

        Raises:
            NotFoundError: Unknown listing
            StateConflictError: Another listing for the same design is active
        """
        listing = await self.require(listing_id)

        async with self._design_locks.hold(listing.design_id):
            async with self.locks.hold(listing_id):
                listing = await self.require(listing_id)

                competing = await self.listings.find_one_by(
                    lambda l: l.design_id == listing.design_id
                    and l.id != listing_id
                    and l.status == ListingStatus.ACTIVE
                )
                if competing is not None:
                    raise StateConflictError(
                        f"Design {listing.design_id} already has active listing {competing.id}"
                    )

                now = self.clock.now()
                listing.status = ListingStatus.ACTIVE
                listing.published_at = now
                listing.updated_at = now
                await self.listings.put(listing)

        logger.info("listing_published", listing_id=listing_id, seller_id=listing.seller_id)
        self.events.publish(ListingPublished(listing_id=listing_id, occurred_at=now))
        return listing

    async def update(
        self,
        listing_id: str,
        data: ListingUpdate | dict[str, Any],
    ) -> Listing:
        """
        Merge content/commercial fields into a listing.

        Raises:
            NotFoundError: Unknown listing
            StateConflictError: Listing is archived
            ValidationError: Unknown field, counter field, or cleared required field
        """
        changes = validate_input(ListingUpdate, data, context="Invalid listing update")
        cleared = sorted(
            field for field in changes.model_fields_set
            if field in _NON_NULLABLE_FIELDS and getattr(changes, field) is None
        )
        if cleared:
            raise ValidationError([f"{field} cannot be cleared" for field in cleared])

        async with self.locks.hold(listing_id):
            listing = await self.require(listing_id)
            if listing.status == ListingStatus.ARCHIVED:
                raise StateConflictError("Archived listings cannot be updated")

            for field in changes.model_fields_set:
                setattr(listing, field, getattr(changes, field))
            listing.updated_at = self.clock.now()
            await self.listings.put(listing)

        logger.info(
            "listing_updated",
            listing_id=listing_id,
            fields=sorted(changes.model_fields_set),
        )
        return listing

    async def archive(self, listing_id: str) -> Listing:
        """Retire a listing; listings are never hard-deleted."""
        listing = await self._set_status(listing_id, ListingStatus.ARCHIVED)
        logger.info("listing_archived", listing_id=listing_id)
        return listing

    async def suspend(self, listing_id: str) -> Listing:
        """Take a listing out of discovery, e.g. after a moderation verdict."""
        listing = await self._set_status(listing_id, ListingStatus.SUSPENDED)
        logger.warning("listing_suspended", listing_id=listing_id)
        return listing

    async def expire_listings(self) -> int:
        """
        Move active listings whose ``expires_at`` has passed to ``expired``.

        Safe to run repeatedly; already expired listings are skipped.

        Returns:
            Number of listings expired by this call
        """
        now = self.clock.now()
        candidates = await self.listings.list_by(
            lambda l: l.status == ListingStatus.ACTIVE
            and l.expires_at is not None
            and l.expires_at <= now
        )

        expired = 0
        for candidate in candidates:
            async with self.locks.hold(candidate.id):
                listing = await self.require(candidate.id)
                # Re-check under the lock; another caller may have moved it
                if listing.status != ListingStatus.ACTIVE:
                    continue
                listing.status = ListingStatus.EXPIRED
                listing.updated_at = now
                await self.listings.put(listing)
                expired += 1

        if expired:
            logger.info("listings_expired", count=expired)
        return expired

    async def _set_status(self, listing_id: str, status: ListingStatus) -> Listing:
        async with self.locks.hold(listing_id):
            listing = await self.require(listing_id)
            listing.status = status
            listing.updated_at = self.clock.now()
            await self.listings.put(listing)
        return listing

    # ------------------------------------------------------------------
    # Merchandising
    # ------------------------------------------------------------------

    async def set_featured(self, listing_id: str, featured: bool = True) -> Listing:
        def apply(listing: Listing) -> None:
            listing.is_featured = featured
            listing.updated_at = self.clock.now()

        return await self._mutate(listing_id, apply)

    async def set_promoted(
        self,
        listing_id: str,
        promoted: bool = True,
        until: Optional[datetime] = None,
    ) -> Listing:
        def apply(listing: Listing) -> None:
            listing.is_promoted = promoted
            listing.promotion_end_date = as_utc(until) if promoted and until else None
            listing.updated_at = self.clock.now()

        return await self._mutate(listing_id, apply)

    # ------------------------------------------------------------------
    # Engagement counters
    # ------------------------------------------------------------------

    async def record_view(self, listing_id: str) -> Listing:
        def apply(listing: Listing) -> None:
            listing.view_count += 1

        return await self._mutate(listing_id, apply)

    async def record_like(self, listing_id: str, user_id: str | None = None) -> Listing:
        def apply(listing: Listing) -> None:
            listing.like_count += 1

        listing = await self._mutate(listing_id, apply)
        logger.debug("listing_liked", listing_id=listing_id, user_id=user_id)
        return listing

    async def record_unlike(self, listing_id: str, user_id: str | None = None) -> Listing:
        """Decrement the like counter; clamped at zero."""
        def apply(listing: Listing) -> None:
            if listing.like_count > 0:
                listing.like_count -= 1

        listing = await self._mutate(listing_id, apply)
        logger.debug("listing_unliked", listing_id=listing_id, user_id=user_id)
        return listing

    async def record_sale(self, listing_id: str) -> Listing:
        """
        Count a sale.

        The listing stays ``active``: one design can be licensed many times.
        """
        def apply(listing: Listing) -> None:
            listing.sales_count += 1

        listing = await self._mutate(listing_id, apply)
        logger.info("listing_sale_recorded", listing_id=listing_id, sales_count=listing.sales_count)
        return listing

    async def set_rating(self, listing_id: str, rating: float, review_count: int) -> Listing:
        """Store a recomputed aggregate rating. Only the review service calls this."""
        def apply(listing: Listing) -> None:
            listing.rating = rating
            listing.review_count = review_count
            listing.updated_at = self.clock.now()

        return await self._mutate(listing_id, apply)

    async def _mutate(self, listing_id: str, apply: Callable[[Listing], None]) -> Listing:
        """Load, modify and store one listing while holding its lock."""
        async with self.locks.hold(listing_id):
            listing = await self.require(listing_id)
            apply(listing)
            await self.listings.put(listing)
        return listing
