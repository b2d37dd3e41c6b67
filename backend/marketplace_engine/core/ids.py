"""
Identifier generation.

Entity ids look like ``lst_<token>``; the prefix names the entity type.
"""
import itertools
import uuid
from collections import defaultdict
from typing import Protocol

LISTING_PREFIX = "lst"
AUCTION_PREFIX = "auc"
BID_PREFIX = "bid"
REVIEW_PREFIX = "rev"


class IdGenerator(Protocol):
    def new_id(self, prefix: str) -> str:
        ...


class UuidIdGenerator:
    """Random ids backed by uuid4."""

    def new_id(self, prefix: str) -> str:
        return f"{prefix}_{uuid.uuid4().hex}"


class SequentialIdGenerator:
    """Deterministic ids (``lst_1``, ``lst_2``, ...) counted per prefix."""

    def __init__(self):
        self._counters: dict[str, itertools.count] = defaultdict(
            lambda: itertools.count(1)
        )

    def new_id(self, prefix: str) -> str:
        return f"{prefix}_{next(self._counters[prefix])}"
