"""
Bookmark add/list operations.

Bookmarker ties an explicitly constructed store to a page fetcher. Adding
a URL normalizes it, rejects duplicates, fetches the page and only then
appends it, so a failed fetch never leaves anything in the backing file.
"""

import logging
from typing import List, Optional

from ..utils.error_handler import DuplicateBookmarkError
from ..utils.url_normalizer import normalize_url
from .data_models import BookmarkEntry
from .fetcher import PageFetcher
from .store import BookmarkStore

logger = logging.getLogger(__name__)


class Bookmarker:
    """Add and list bookmarks held in a BookmarkStore."""

    def __init__(self, store: BookmarkStore, fetcher: Optional[PageFetcher] = None):
        self.store = store
        self.fetcher = fetcher

    def add(self, url: str) -> BookmarkEntry:
        """
        Save a URL.

        Raises:
            URLParseError: If the URL does not parse
            DuplicateBookmarkError: If the normalized URL is already stored
            FetchError: If the page cannot be retrieved
            StoreError: If the backing file cannot be appended to
        """
        if self.fetcher is None:
            raise RuntimeError("Bookmarker was created without a fetcher")

        normalized = normalize_url(url)
        if self.store.contains(normalized):
            raise DuplicateBookmarkError(normalized)

        result = self.fetcher.fetch(normalized)
        logger.info(
            f"Fetched {normalized}: HTTP {result.status_code} after "
            f"{result.attempts} attempt(s)"
        )

        return self.store.append(normalized)

    def list(self) -> List[str]:
        """Stored URLs in sorted order."""
        return self.store.sorted_urls()
