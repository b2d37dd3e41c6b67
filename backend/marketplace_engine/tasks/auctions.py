"""
Periodic auction sweep.

The engine never schedules itself; an external scheduler (cron, Celery
beat, an asyncio loop) calls ``run_auction_sweep`` every 30-60 seconds.
"""
import structlog

from marketplace_engine.engine import Marketplace
from marketplace_engine.schemas.auction import SweepResult

logger = structlog.get_logger()

SWEEP_INTERVAL_SECONDS = 60


async def run_auction_sweep(marketplace: Marketplace) -> SweepResult:
    """
    Advance time-dependent state: start and settle auctions, expire listings.

    A failure while expiring listings is logged and does not prevent the
    auction result from being returned.

    Returns:
        The auction sweep result; ``settled`` lists sold auctions for the
        payment collaborator
    """
    result = await marketplace.auctions.process_auction_endings()

    # Settled auctions must reach the caller even if expiry fails
    try:
        expired = await marketplace.listings.expire_listings()
    except Exception as e:
        logger.error("listing_expiry_failed", error=str(e), exc_info=True)
        expired = 0

    if result.total_transitions or expired:
        logger.info(
            "marketplace_sweep_completed",
            started=result.started,
            sold=result.sold,
            ended=result.ended,
            no_bids=result.no_bids,
            listings_expired=expired,
        )
    return result
