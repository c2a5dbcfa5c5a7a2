"""
Core components: data models, the bookmark store, the page fetcher,
the archive availability client and the add/list operations.
"""

from .availability import AvailabilityChecker
from .bookmarker import Bookmarker
from .data_models import (
    ArchivedSnapshots,
    BookmarkEntry,
    ClosestSnapshot,
    FetchResult,
    FetchState,
)
from .fetcher import PageFetcher, next_state, parse_retry_after
from .store import BookmarkStore

__all__ = [
    "ArchivedSnapshots",
    "AvailabilityChecker",
    "BookmarkEntry",
    "Bookmarker",
    "BookmarkStore",
    "ClosestSnapshot",
    "FetchResult",
    "FetchState",
    "PageFetcher",
    "next_state",
    "parse_retry_after",
]
