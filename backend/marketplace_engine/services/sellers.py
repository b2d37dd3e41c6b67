"""
Seller views over listing counters.

Read-only; consumed by the profile/analytics collaborator.
"""
from structlog import get_logger

from marketplace_engine.models.listing import Listing, ListingStatus
from marketplace_engine.schemas.listing import SellerStats
from marketplace_engine.services.listings import ListingService

logger = get_logger()


class SellerService:
    """Seller listings and engagement statistics."""

    def __init__(self, listing_service: ListingService):
        self.listing_service = listing_service

    async def get_seller_listings(
        self,
        seller_id: str,
        status: ListingStatus | None = None,
        limit: int | None = None,
    ) -> list[Listing]:
        """
        Get a seller's listings, newest first.

        Args:
            seller_id: Seller ID
            status: Only listings in this status
            limit: Max results
        """
        results = await self.listing_service.listings.list_by(
            lambda l: l.seller_id == seller_id
            and (status is None or l.status == status)
        )
        results.sort(key=lambda l: l.created_at, reverse=True)

        if limit:
            results = results[:limit]
        return results

    async def get_seller_stats(self, seller_id: str) -> SellerStats:
        """
        Aggregate a seller's listing counters.

        The average rating weights each listing's rating by its review count.
        """
        listings = await self.get_seller_listings(seller_id)

        total_reviews = sum(l.review_count for l in listings)
        ratings_sum = sum(l.rating * l.review_count for l in listings if l.review_count > 0)
        average = ratings_sum / total_reviews if total_reviews > 0 else 0.0

        stats = SellerStats(
            total_listings=len(listings),
            active_listings=sum(1 for l in listings if l.status == ListingStatus.ACTIVE),
            total_sales=sum(l.sales_count for l in listings),
            total_views=sum(l.view_count for l in listings),
            average_rating=round(average, 1),
            total_reviews=total_reviews,
        )
        logger.debug("seller_stats_computed", seller_id=seller_id, **stats.model_dump())
        return stats
