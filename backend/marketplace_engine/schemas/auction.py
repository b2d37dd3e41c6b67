"""Auction input and sweep result schemas."""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from marketplace_engine.models.listing import Currency


class AuctionCreate(BaseModel):
    listing_id: str
    seller_id: str
    title: str
    description: str = ""
    starting_price: float
    reserve_price: Optional[float] = None
    buy_now_price: Optional[float] = None
    currency: Currency = Currency.USD
    starts_at: datetime
    duration_days: float
    bid_increment: Optional[float] = None
    extension_minutes: Optional[int] = None


class SettledAuction(BaseModel):
    """A sold auction, as handed to the payment collaborator."""
    auction_id: str
    listing_id: str
    seller_id: str
    winner_id: str
    amount: float
    currency: Currency


class SweepResult(BaseModel):
    """Counts of the transitions one sweep performed."""
    started: int = 0
    sold: int = 0
    ended: int = 0     # Closed with bids but reserve not met
    no_bids: int = 0
    settled: list[SettledAuction] = Field(default_factory=list)

    @property
    def total_transitions(self) -> int:
        return self.started + self.sold + self.ended + self.no_bids
