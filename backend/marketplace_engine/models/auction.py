"""
Auction and bid models.

Auction lifecycle (one-directional):

    scheduled --(starts_at reached)--> active --(ends_at reached)--> sold | ended | no_bids

``canceled`` is reachable from scheduled or active while no bid exists.
"""
from datetime import datetime, timedelta
from enum import Enum
from typing import Optional

from pydantic import BaseModel

from marketplace_engine.models.listing import Currency


class AuctionStatus(str, Enum):
    """Status of an auction."""
    SCHEDULED = "scheduled"  # Waiting for starts_at
    ACTIVE = "active"        # Accepting bids
    ENDED = "ended"          # Closed, reserve not met
    SOLD = "sold"            # Closed with a winning bid
    CANCELED = "canceled"    # Withdrawn by the seller
    NO_BIDS = "no_bids"      # Closed without any bid


TERMINAL_AUCTION_STATUSES = frozenset({
    AuctionStatus.ENDED,
    AuctionStatus.SOLD,
    AuctionStatus.CANCELED,
    AuctionStatus.NO_BIDS,
})


class Auction(BaseModel):
    """Time-boxed competitive sale bound 1:1 to an active listing."""
    id: str
    listing_id: str
    seller_id: str
    title: str
    description: str = ""

    starting_price: float
    reserve_price: Optional[float] = None
    buy_now_price: Optional[float] = None
    bid_increment: float
    currency: Currency = Currency.USD

    starts_at: datetime
    ends_at: datetime
    extension_minutes: int

    current_bid: Optional[float] = None
    current_bidder_id: Optional[str] = None
    bid_count: int = 0
    watcher_count: int = 0
    status: AuctionStatus = AuctionStatus.SCHEDULED

    created_at: datetime
    updated_at: datetime

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_AUCTION_STATUSES

    @property
    def has_bids(self) -> bool:
        return self.current_bid is not None

    @property
    def reserve_met(self) -> bool:
        if self.current_bid is None:
            return False
        return self.reserve_price is None or self.current_bid >= self.reserve_price

    def minimum_bid(self) -> float:
        """Smallest amount the next bid may carry."""
        if self.current_bid is not None:
            return round(self.current_bid + self.bid_increment, 2)
        return self.starting_price

    def extension_window(self) -> timedelta:
        return timedelta(minutes=self.extension_minutes)


class Bid(BaseModel):
    """
    One accepted bid.

    Immutable once recorded, except for ``is_winning`` which flips to False
    when a higher bid supersedes it.
    """
    id: str
    auction_id: str
    bidder_id: str
    amount: float
    max_bid: Optional[float] = None  # Proxy-bid ceiling
    is_winning: bool = True
    is_auto_bid: bool = False
    created_at: datetime
