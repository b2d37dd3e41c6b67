"""
Offset pagination over an in-memory result list.
"""
import math
from typing import Sequence, TypeVar

T = TypeVar("T")


def paginate(items: Sequence[T], page: int, limit: int) -> tuple[list[T], int, int]:
    """
    Slice one page out of ``items``.

    Args:
        items: Full, already ordered result list
        page: 1-indexed page number
        limit: Page size

    Returns:
        Tuple of (page_items, total, total_pages)
    """
    total = len(items)
    total_pages = math.ceil(total / limit) if limit else 0
    start = (page - 1) * limit
    return list(items[start:start + limit]), total, total_pages
