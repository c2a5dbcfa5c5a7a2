"""
Append-only flat-file bookmark store.

The backing file holds one normalized URL per line. It is read once into
memory when the store is loaded and only ever grows: each append opens the
file, writes a single line and closes it again. The file is not locked, so
concurrent invocations against the same file may interleave or duplicate
lines.
"""

import logging
import os
from pathlib import Path
from typing import Dict, Iterator, List, Union

from ..utils.error_handler import StoreError
from .data_models import BookmarkEntry

logger = logging.getLogger(__name__)

FILE_MODE = 0o600
ENCODING = "utf-8"
# Lets arbitrary bytes survive a load/append round trip
ENCODING_ERRORS = "surrogateescape"


class BookmarkStore:
    """In-memory view of the backing file, keyed by normalized URL."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self.entries: Dict[str, BookmarkEntry] = {}

    @classmethod
    def load(cls, path: Union[str, Path]) -> "BookmarkStore":
        """
        Read the backing file into a new store.

        A missing file yields an empty store.

        Raises:
            StoreError: If the file exists but cannot be read
        """
        store = cls(path)
        try:
            with open(
                store.path, "r", encoding=ENCODING, errors=ENCODING_ERRORS, newline=""
            ) as f:
                data = f.read()
        except FileNotFoundError:
            logger.debug(f"No bookmark file at {store.path}, starting empty")
            return store
        except OSError as e:
            raise StoreError(f"reading bookmark db: {e}") from e

        for line in data.split("\n"):
            if not line:
                continue
            store.entries[line] = BookmarkEntry(url=line)

        logger.debug(f"Loaded {len(store.entries)} bookmarks from {store.path}")
        return store

    def contains(self, url: str) -> bool:
        """Exact-string membership test."""
        return url in self.entries

    def append(self, url: str) -> BookmarkEntry:
        """
        Append one URL to the backing file and record it in memory.

        Raises:
            StoreError: If the file cannot be opened, written or closed
        """
        entry = BookmarkEntry(url=url)
        try:
            fd = os.open(self.path, os.O_CREAT | os.O_WRONLY | os.O_APPEND, FILE_MODE)
        except OSError as e:
            raise StoreError(f"opening bookmark db: {e}") from e

        try:
            with os.fdopen(
                fd, "w", encoding=ENCODING, errors=ENCODING_ERRORS, newline=""
            ) as f:
                f.write(entry.to_line())
        except OSError as e:
            raise StoreError(f"adding bookmark: {e}") from e

        self.entries[url] = entry
        logger.info(f"Saved bookmark {url}")
        return entry

    def sorted_urls(self) -> List[str]:
        """All stored URLs in ascending order."""
        return sorted(self.entries)

    def __contains__(self, url: object) -> bool:
        return url in self.entries

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self.sorted_urls())
