"""
Core module containing configuration and shared utilities.
"""
from marketplace_engine.core.config import Settings, settings, get_settings
from marketplace_engine.core.clock import Clock, ManualClock, SystemClock
from marketplace_engine.core.errors import (
    ExpiredError,
    MarketplaceError,
    NotFoundError,
    StateConflictError,
    ValidationError,
)
from marketplace_engine.core.events import (
    EventBus,
    ListingPublished,
    MarketplaceEvent,
    ReviewPosted,
)
from marketplace_engine.core.ids import IdGenerator, SequentialIdGenerator, UuidIdGenerator
from marketplace_engine.core.locks import KeyedLocks

__all__ = [
    "Settings",
    "settings",
    "get_settings",
    "Clock",
    "ManualClock",
    "SystemClock",
    "MarketplaceError",
    "NotFoundError",
    "ValidationError",
    "StateConflictError",
    "ExpiredError",
    "EventBus",
    "ListingPublished",
    "ReviewPosted",
    "MarketplaceEvent",
    "IdGenerator",
    "SequentialIdGenerator",
    "UuidIdGenerator",
    "KeyedLocks",
]
