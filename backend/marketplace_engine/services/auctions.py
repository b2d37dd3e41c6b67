"""
Auction service for time-boxed competitive sales.

Handles:
- Creating auctions for active listings
- Bid validation and winning-bid bookkeeping
- Anti-sniping extension of the end time
- The periodic sweep that starts scheduled auctions and settles ended ones

Settlement itself (payment capture, license issuance) happens outside the
engine: a ``sold`` auction and the sweep's ``settled`` entries are the
signal for the payment collaborator.
"""
from datetime import datetime, timedelta
from typing import Any, Optional

from structlog import get_logger

from marketplace_engine.core.clock import Clock, SystemClock, as_utc
from marketplace_engine.core.config import Settings, settings as default_settings
from marketplace_engine.core.errors import (
    ExpiredError,
    NotFoundError,
    StateConflictError,
    ValidationError,
)
from marketplace_engine.core.ids import AUCTION_PREFIX, BID_PREFIX, IdGenerator, UuidIdGenerator
from marketplace_engine.core.locks import KeyedLocks
from marketplace_engine.core.validation import validate_input
from marketplace_engine.models.auction import Auction, AuctionStatus, Bid
from marketplace_engine.models.listing import ListingStatus
from marketplace_engine.repositories.base import Repository
from marketplace_engine.schemas.auction import AuctionCreate, SettledAuction, SweepResult
from marketplace_engine.services.listings import ListingService

logger = get_logger()


def format_amount(amount: float) -> str:
    """Render a money amount without a trailing ``.0`` for whole values."""
    if float(amount).is_integer():
        return str(int(amount))
    return f"{amount:.2f}"


class AuctionService:
    """Service for managing auctions and bids."""

    def __init__(
        self,
        auctions: Repository[Auction],
        bids: Repository[Bid],
        listing_service: ListingService,
        clock: Clock | None = None,
        ids: IdGenerator | None = None,
        settings: Settings | None = None,
    ):
        self.auctions = auctions
        self.bids = bids
        self.listing_service = listing_service
        self.clock = clock or SystemClock()
        self.ids = ids or UuidIdGenerator()
        self.settings = settings or default_settings
        self.locks = KeyedLocks("auction")
        self._listing_locks = KeyedLocks("auction_listing")

    # ------------------------------------------------------------------
    # Creation and reads
    # ------------------------------------------------------------------

    async def create_auction(self, data: AuctionCreate | dict[str, Any]) -> Auction:
        """
        Create a ``scheduled`` auction for an active listing.

        ``ends_at`` is ``starts_at + duration_days``; bid increment and
        extension window fall back to the configured defaults.

        Raises:
            NotFoundError: Unknown listing
            StateConflictError: Listing not active, or it already has a live auction
            ValidationError: Invalid prices or duration (all problems reported)
        """
        payload = validate_input(AuctionCreate, data, context="Invalid auction")
        bid_increment = (
            payload.bid_increment
            if payload.bid_increment is not None
            else self.settings.default_bid_increment
        )
        extension_minutes = (
            payload.extension_minutes
            if payload.extension_minutes is not None
            else self.settings.default_extension_minutes
        )

        errors = []
        if payload.starting_price <= 0:
            errors.append("Starting price must be greater than 0")
        if payload.duration_days <= 0:
            errors.append("Duration must be greater than 0 days")
        if bid_increment <= 0:
            errors.append("Bid increment must be greater than 0")
        if extension_minutes < 0:
            errors.append("Extension minutes must not be negative")
        if payload.reserve_price is not None and payload.reserve_price < payload.starting_price:
            errors.append("Reserve price must be at least the starting price")
        if payload.buy_now_price is not None and payload.buy_now_price <= payload.starting_price:
            errors.append("Buy now price must be greater than the starting price")
        if errors:
            raise ValidationError(errors, prefix="Auction validation failed")

        async with self._listing_locks.hold(payload.listing_id):
            listing = await self.listing_service.require(payload.listing_id)
            if listing.status != ListingStatus.ACTIVE:
                raise StateConflictError("Auctions can only be created for active listings")
            if listing.seller_id != payload.seller_id:
                raise ValidationError("Only the listing's seller can auction it")

            live = await self.auctions.find_one_by(
                lambda a: a.listing_id == payload.listing_id and not a.is_terminal
            )
            if live is not None:
                raise StateConflictError(
                    f"Listing {payload.listing_id} already has auction {live.id}"
                )

            now = self.clock.now()
            starts_at = as_utc(payload.starts_at)
            auction = Auction(
                id=self.ids.new_id(AUCTION_PREFIX),
                listing_id=payload.listing_id,
                seller_id=payload.seller_id,
                title=payload.title,
                description=payload.description,
                starting_price=payload.starting_price,
                reserve_price=payload.reserve_price,
                buy_now_price=payload.buy_now_price,
                bid_increment=bid_increment,
                currency=payload.currency,
                starts_at=starts_at,
                ends_at=starts_at + timedelta(days=payload.duration_days),
                extension_minutes=extension_minutes,
                status=AuctionStatus.SCHEDULED,
                created_at=now,
                updated_at=now,
            )
            await self.auctions.put(auction)

        logger.info(
            "auction_created",
            auction_id=auction.id,
            listing_id=auction.listing_id,
            starts_at=auction.starts_at.isoformat(),
            ends_at=auction.ends_at.isoformat(),
        )
        return auction

    async def get_auction(self, auction_id: str) -> Auction | None:
        return await self.auctions.get(auction_id)

    async def require_auction(self, auction_id: str) -> Auction:
        auction = await self.auctions.get(auction_id)
        if auction is None:
            raise NotFoundError("auction", auction_id)
        return auction

    async def get_auction_bids(self, auction_id: str) -> list[Bid]:
        """All accepted bids for an auction, highest first."""
        bids = await self.bids.list_by(lambda b: b.auction_id == auction_id)
        return sorted(bids, key=lambda b: b.amount, reverse=True)

    async def get_winning_bid(self, auction_id: str) -> Bid | None:
        return await self.bids.find_one_by(
            lambda b: b.auction_id == auction_id and b.is_winning
        )

    async def get_active_auctions(self, limit: int | None = None) -> list[Auction]:
        """Active auctions ending soonest first."""
        limit = limit if limit is not None else self.settings.active_auctions_limit
        active = await self.auctions.list_by(lambda a: a.status == AuctionStatus.ACTIVE)
        return sorted(active, key=lambda a: a.ends_at)[:limit]

    # ------------------------------------------------------------------
    # Bidding
    # ------------------------------------------------------------------

    async def place_bid(
        self,
        auction_id: str,
        bidder_id: str,
        amount: float,
        max_bid: Optional[float] = None,
    ) -> Bid:
        """
        Place a bid.

        The read-validate-write sequence runs under the auction's lock, so two
        bidders racing on the same auction are serialized and the loser gets
        the regular minimum-bid error.

        Args:
            auction_id: Auction to bid on
            bidder_id: Bidding user
            amount: Bid amount; at least ``current_bid + bid_increment``, or the
                starting price for the first bid
            max_bid: Optional proxy-bid ceiling, at least ``amount``

        Returns:
            The recorded, winning bid

        Raises:
            NotFoundError: Unknown auction
            StateConflictError: Auction is not active
            ExpiredError: Auction window has lapsed but the sweep has not closed it yet
            ValidationError: Amount below the minimum or max_bid below amount
        """
        async with self.locks.hold(auction_id):
            auction = await self.require_auction(auction_id)

            if auction.status != AuctionStatus.ACTIVE:
                raise StateConflictError("Auction is not active")

            now = self.clock.now()
            if auction.ends_at <= now:
                raise ExpiredError(
                    f"Auction {auction_id} ended at {auction.ends_at.isoformat()}"
                )

            minimum = auction.minimum_bid()
            if amount < minimum:
                raise ValidationError(f"Minimum bid is {format_amount(minimum)}")

            if max_bid is not None and max_bid < amount:
                raise ValidationError("Max bid must be greater than or equal to bid amount")

            previous = await self.bids.list_by(
                lambda b: b.auction_id == auction_id and b.is_winning
            )
            for superseded in previous:
                superseded.is_winning = False
                await self.bids.put(superseded)

            bid = Bid(
                id=self.ids.new_id(BID_PREFIX),
                auction_id=auction_id,
                bidder_id=bidder_id,
                amount=amount,
                max_bid=max_bid,
                is_winning=True,
                created_at=now,
            )
            await self.bids.put(bid)

            auction.current_bid = amount
            auction.current_bidder_id = bidder_id
            auction.bid_count += 1
            auction.updated_at = now

            # Anti-sniping: a late bid pushes the end out to a full window from now
            window = auction.extension_window()
            if auction.ends_at - now < window:
                previous_end = auction.ends_at
                auction.ends_at = now + window
                logger.info(
                    "auction_extended",
                    auction_id=auction_id,
                    previous_ends_at=previous_end.isoformat(),
                    ends_at=auction.ends_at.isoformat(),
                )

            await self.auctions.put(auction)

        logger.info(
            "bid_placed",
            auction_id=auction_id,
            bid_id=bid.id,
            bidder_id=bidder_id,
            amount=amount,
            bid_count=auction.bid_count,
        )
        return bid

    async def cancel_auction(self, auction_id: str) -> Auction:
        """
        Withdraw an auction that has not received any bid.

        Raises:
            NotFoundError: Unknown auction
            StateConflictError: Auction already closed or has bids
        """
        async with self.locks.hold(auction_id):
            auction = await self.require_auction(auction_id)
            if auction.status not in (AuctionStatus.SCHEDULED, AuctionStatus.ACTIVE):
                raise StateConflictError(
                    f"Cannot cancel auction in status {auction.status.value}"
                )
            if auction.has_bids:
                raise StateConflictError("Cannot cancel an auction that has bids")

            auction.status = AuctionStatus.CANCELED
            auction.updated_at = self.clock.now()
            await self.auctions.put(auction)

        logger.info("auction_canceled", auction_id=auction_id)
        return auction

    # ------------------------------------------------------------------
    # Sweep
    # ------------------------------------------------------------------

    async def process_auction_endings(self) -> SweepResult:
        """
        Start due auctions and settle finished ones.

        Meant to be called on a fixed interval by an external scheduler.
        Idempotent: auctions already in a terminal state are never touched,
        so re-running with nothing due reports zero transitions.

        Outcomes for an active auction whose end time has passed:
        - bid present and reserve met (or no reserve): ``sold``
        - bid present but reserve not met: ``ended``
        - no bid: ``no_bids``

        Returns:
            Counts per outcome plus the sold auctions for settlement
        """
        now = self.clock.now()
        result = SweepResult()

        due = await self.auctions.list_by(
            lambda a: (a.status == AuctionStatus.SCHEDULED and a.starts_at <= now)
            or (a.status == AuctionStatus.ACTIVE and a.ends_at <= now)
        )

        for candidate in due:
            async with self.locks.hold(candidate.id):
                auction = await self.require_auction(candidate.id)
                changed = False

                if auction.status == AuctionStatus.SCHEDULED and auction.starts_at <= now:
                    auction.status = AuctionStatus.ACTIVE
                    result.started += 1
                    changed = True
                    logger.info("auction_started", auction_id=auction.id)

                # A window that fully elapsed between sweeps closes in the same pass
                if auction.status == AuctionStatus.ACTIVE and auction.ends_at <= now:
                    self._settle(auction, result)
                    changed = True

                if changed:
                    auction.updated_at = now
                    await self.auctions.put(auction)

        logger.info(
            "auction_sweep_completed",
            started=result.started,
            sold=result.sold,
            ended=result.ended,
            no_bids=result.no_bids,
        )
        return result

    def _settle(self, auction: Auction, result: SweepResult) -> None:
        if not auction.has_bids:
            auction.status = AuctionStatus.NO_BIDS
            result.no_bids += 1
        elif auction.reserve_met:
            auction.status = AuctionStatus.SOLD
            result.sold += 1
            result.settled.append(
                SettledAuction(
                    auction_id=auction.id,
                    listing_id=auction.listing_id,
                    seller_id=auction.seller_id,
                    winner_id=auction.current_bidder_id,
                    amount=auction.current_bid,
                    currency=auction.currency,
                )
            )
        else:
            auction.status = AuctionStatus.ENDED
            result.ended += 1

        logger.info(
            "auction_settled",
            auction_id=auction.id,
            status=auction.status.value,
            current_bid=auction.current_bid,
            reserve_price=auction.reserve_price,
        )
