"""
Review service for buyer feedback on listings.

Handles:
- Creating reviews and recomputing the listing's aggregate rating
- Helpful votes, reports and seller responses
- Soft deletion (the rating is recomputed without the deleted review)
"""
from typing import Any, Protocol

from structlog import get_logger

from marketplace_engine.core.clock import Clock, SystemClock
from marketplace_engine.core.errors import NotFoundError, StateConflictError, ValidationError
from marketplace_engine.core.events import EventBus, ReviewPosted
from marketplace_engine.core.ids import REVIEW_PREFIX, IdGenerator, UuidIdGenerator
from marketplace_engine.core.locks import KeyedLocks
from marketplace_engine.core.validation import validate_input
from marketplace_engine.models.review import Review, SellerResponse
from marketplace_engine.repositories.base import Repository
from marketplace_engine.schemas.review import ReviewCreate, ReviewSort
from marketplace_engine.services.listings import ListingService

logger = get_logger()


class PurchaseVerifier(Protocol):
    """Licensing collaborator's verdict on whether a reviewer bought the listing."""

    def is_verified_purchase(self, reviewer_id: str, listing_id: str, license_id: str) -> bool:
        ...


def average_rating(ratings: list[int]) -> float:
    """Arithmetic mean rounded to one decimal; 0.0 for no ratings."""
    if not ratings:
        return 0.0
    return round(sum(ratings) / len(ratings), 1)


class ReviewService:
    """Service for managing listing reviews."""

    def __init__(
        self,
        reviews: Repository[Review],
        listing_service: ListingService,
        events: EventBus,
        clock: Clock | None = None,
        ids: IdGenerator | None = None,
        purchase_verifier: PurchaseVerifier | None = None,
    ):
        self.reviews = reviews
        self.listing_service = listing_service
        self.events = events
        self.clock = clock or SystemClock()
        self.ids = ids or UuidIdGenerator()
        self.purchase_verifier = purchase_verifier
        self.locks = KeyedLocks("review")
        # Serializes review writes per listing so recomputation sees every review
        self._listing_locks = KeyedLocks("review_listing")

    async def create_review(self, data: ReviewCreate | dict[str, Any]) -> Review:
        """
        Create a review and refresh the listing's rating.

        Purchase proof is pre-validated by the licensing collaborator; when a
        verifier is configured its verdict is checked here as well.

        Returns:
            The created review

        Raises:
            ValidationError: Rating outside 1-5, bad aspects, or unverified purchase
            NotFoundError: Unknown listing
            StateConflictError: Reviewer already reviewed this listing
        """
        payload = validate_input(ReviewCreate, data, context="Invalid review")

        if payload.rating < 1 or payload.rating > 5:
            raise ValidationError("Rating must be between 1 and 5")

        if self.purchase_verifier is not None and not self.purchase_verifier.is_verified_purchase(
            payload.reviewer_id, payload.listing_id, payload.license_id
        ):
            raise ValidationError("Review requires a verified purchase")

        async with self._listing_locks.hold(payload.listing_id):
            await self.listing_service.require(payload.listing_id)

            existing = await self.reviews.find_one_by(
                lambda r: r.listing_id == payload.listing_id
                and r.reviewer_id == payload.reviewer_id
                and not r.is_deleted
            )
            if existing is not None:
                raise StateConflictError("Reviewer has already reviewed this listing")

            now = self.clock.now()
            review = Review(
                id=self.ids.new_id(REVIEW_PREFIX),
                listing_id=payload.listing_id,
                license_id=payload.license_id,
                reviewer_id=payload.reviewer_id,
                seller_id=payload.seller_id,
                rating=payload.rating,
                title=payload.title,
                content=payload.content,
                aspects=payload.aspects,
                images=payload.images,
                is_verified_purchase=True,
                created_at=now,
                updated_at=now,
            )
            await self.reviews.put(review)
            await self._recalculate_listing_rating(payload.listing_id)

        logger.info(
            "review_created",
            review_id=review.id,
            listing_id=review.listing_id,
            rating=review.rating,
        )
        self.events.publish(
            ReviewPosted(review_id=review.id, rating=review.rating, occurred_at=now)
        )
        return review

    async def get_review(self, review_id: str) -> Review | None:
        return await self.reviews.get(review_id)

    async def require_review(self, review_id: str) -> Review:
        review = await self.reviews.get(review_id)
        if review is None or review.is_deleted:
            raise NotFoundError("review", review_id)
        return review

    async def get_listing_reviews(
        self,
        listing_id: str,
        sort_by: ReviewSort | str = ReviewSort.NEWEST,
        limit: int | None = None,
    ) -> list[Review]:
        """
        Get reviews of a listing.

        Args:
            listing_id: Listing ID
            sort_by: newest, helpful, rating_high or rating_low
            limit: Max results

        Returns:
            Non-deleted reviews in the requested order
        """
        sort_by = ReviewSort(sort_by)
        results = await self.reviews.list_by(
            lambda r: r.listing_id == listing_id and not r.is_deleted
        )

        if sort_by == ReviewSort.HELPFUL:
            results.sort(key=lambda r: r.helpful_count, reverse=True)
        elif sort_by == ReviewSort.RATING_HIGH:
            results.sort(key=lambda r: r.rating, reverse=True)
        elif sort_by == ReviewSort.RATING_LOW:
            results.sort(key=lambda r: r.rating)
        else:
            results.sort(key=lambda r: r.created_at, reverse=True)

        if limit:
            results = results[:limit]
        return results

    async def mark_helpful(self, review_id: str) -> Review:
        async with self.locks.hold(review_id):
            review = await self.require_review(review_id)
            review.helpful_count += 1
            await self.reviews.put(review)
        return review

    async def report_review(self, review_id: str) -> Review:
        async with self.locks.hold(review_id):
            review = await self.require_review(review_id)
            review.report_count += 1
            await self.reviews.put(review)

        logger.warning("review_reported", review_id=review_id, report_count=review.report_count)
        return review

    async def respond_to_review(self, review_id: str, content: str) -> Review:
        """
        Attach the seller's response; a later call replaces the earlier one.

        The rating is unaffected.
        """
        if not content or not content.strip():
            raise ValidationError("Response content is required")

        async with self.locks.hold(review_id):
            review = await self.require_review(review_id)
            now = self.clock.now()
            review.seller_response = SellerResponse(content=content, responded_at=now)
            review.updated_at = now
            await self.reviews.put(review)

        logger.info("review_responded", review_id=review_id)
        return review

    async def delete_review(self, review_id: str) -> Review:
        """Soft-delete a review and recompute the listing's rating without it."""
        review = await self.require_review(review_id)

        async with self._listing_locks.hold(review.listing_id):
            async with self.locks.hold(review_id):
                review = await self.require_review(review_id)
                now = self.clock.now()
                review.deleted_at = now
                review.updated_at = now
                await self.reviews.put(review)
            await self._recalculate_listing_rating(review.listing_id)

        logger.info("review_deleted", review_id=review_id, listing_id=review.listing_id)
        return review

    async def _recalculate_listing_rating(self, listing_id: str) -> None:
        reviews = await self.reviews.list_by(
            lambda r: r.listing_id == listing_id and not r.is_deleted
        )
        ratings = [r.rating for r in reviews]
        listing = await self.listing_service.set_rating(
            listing_id,
            rating=average_rating(ratings),
            review_count=len(ratings),
        )

        logger.info(
            "listing_rating_recalculated",
            listing_id=listing_id,
            rating=listing.rating,
            review_count=listing.review_count,
        )
