"""
Composition root for the marketplace engine.

Build one ``Marketplace`` per process (or per test) and pass it to whatever
needs the engine; nothing is kept in module-level state.
"""
from typing import Callable

from marketplace_engine.core.clock import Clock, SystemClock
from marketplace_engine.core.config import Settings, settings as default_settings
from marketplace_engine.core.events import EventBus, EventHandler
from marketplace_engine.core.ids import IdGenerator, UuidIdGenerator
from marketplace_engine.models.auction import Auction, Bid
from marketplace_engine.models.listing import Listing
from marketplace_engine.models.review import Review
from marketplace_engine.repositories.base import Repository
from marketplace_engine.repositories.memory import InMemoryRepository
from marketplace_engine.services.auctions import AuctionService
from marketplace_engine.services.listings import ListingService
from marketplace_engine.services.reviews import PurchaseVerifier, ReviewService
from marketplace_engine.services.search import SearchService
from marketplace_engine.services.sellers import SellerService


class Marketplace:
    """
    Wires repositories, clock, id generation and events into the services.

    Usage:
        marketplace = Marketplace(clock=ManualClock(), ids=SequentialIdGenerator())
        listing = await marketplace.listings.create({...})
        await marketplace.listings.publish(listing.id)
        result = await marketplace.search.search({"query": "floral"})
    """

    def __init__(
        self,
        *,
        clock: Clock | None = None,
        ids: IdGenerator | None = None,
        settings: Settings | None = None,
        events: EventBus | None = None,
        purchase_verifier: PurchaseVerifier | None = None,
        listing_repository: Repository[Listing] | None = None,
        auction_repository: Repository[Auction] | None = None,
        bid_repository: Repository[Bid] | None = None,
        review_repository: Repository[Review] | None = None,
    ):
        self.clock = clock or SystemClock()
        self.ids = ids or UuidIdGenerator()
        self.settings = settings or default_settings
        self.events = events or EventBus()

        self.listings = ListingService(
            listing_repository or InMemoryRepository[Listing](),
            self.events,
            clock=self.clock,
            ids=self.ids,
            settings=self.settings,
        )
        self.search = SearchService(self.listings, settings=self.settings)
        self.auctions = AuctionService(
            auction_repository or InMemoryRepository[Auction](),
            bid_repository or InMemoryRepository[Bid](),
            self.listings,
            clock=self.clock,
            ids=self.ids,
            settings=self.settings,
        )
        self.reviews = ReviewService(
            review_repository or InMemoryRepository[Review](),
            self.listings,
            self.events,
            clock=self.clock,
            ids=self.ids,
            purchase_verifier=purchase_verifier,
        )
        self.sellers = SellerService(self.listings)

    def subscribe(
        self,
        handler: EventHandler,
        event_type: str | None = None,
    ) -> Callable[[], None]:
        """Shortcut for ``self.events.subscribe``; returns the unsubscribe handle."""
        return self.events.subscribe(handler, event_type=event_type)
