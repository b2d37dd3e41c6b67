"""
In-process publish/subscribe for engine events.

Delivery is synchronous and follows subscription order. Subscribers are
fire-and-forget from the publisher's point of view: a failing subscriber
is logged and the remaining subscribers still receive the event.
"""
from datetime import datetime
from typing import Callable, Literal, Optional, Union

import structlog
from pydantic import BaseModel

logger = structlog.get_logger()


class ListingPublished(BaseModel):
    """Emitted when a listing becomes active."""
    type: Literal["listing_published"] = "listing_published"
    listing_id: str
    occurred_at: datetime


class ReviewPosted(BaseModel):
    """Emitted after a review is stored and the listing rating recomputed."""
    type: Literal["review_posted"] = "review_posted"
    review_id: str
    rating: int
    occurred_at: datetime


MarketplaceEvent = Union[ListingPublished, ReviewPosted]
EventHandler = Callable[[MarketplaceEvent], None]


class EventBus:
    """
    Typed event bus.

    Usage:
        bus = EventBus()
        unsubscribe = bus.subscribe(handler, event_type="listing_published")
        ...
        unsubscribe()
    """

    def __init__(self):
        self._subscriptions: list[tuple[EventHandler, Optional[str]]] = []

    def subscribe(
        self,
        handler: EventHandler,
        event_type: Optional[str] = None,
    ) -> Callable[[], None]:
        """
        Register a handler.

        Args:
            handler: Callable receiving each matching event
            event_type: Only deliver events of this type (all types if None)

        Returns:
            Callable that removes this subscription; calling it twice is harmless
        """
        subscription = (handler, event_type)
        self._subscriptions.append(subscription)

        def unsubscribe() -> None:
            if subscription in self._subscriptions:
                self._subscriptions.remove(subscription)

        return unsubscribe

    def publish(self, event: MarketplaceEvent) -> None:
        for handler, event_type in list(self._subscriptions):
            if event_type is not None and event_type != event.type:
                continue
            try:
                handler(event)
            except Exception as e:
                logger.error(
                    "event_handler_failed",
                    event_type=event.type,
                    handler=getattr(handler, "__name__", repr(handler)),
                    error=str(e),
                    exc_info=True,
                )

    @property
    def subscriber_count(self) -> int:
        return len(self._subscriptions)
