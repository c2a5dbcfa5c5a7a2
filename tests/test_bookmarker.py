"""
Unit tests for the add/list operations.
"""

from unittest.mock import Mock

import pytest

from bookmark_archiver.core.bookmarker import Bookmarker
from bookmark_archiver.core.data_models import FetchResult
from bookmark_archiver.core.fetcher import PageFetcher
from bookmark_archiver.core.store import BookmarkStore
from bookmark_archiver.utils.error_handler import (
    DuplicateBookmarkError,
    MaxRetriesExceededError,
    ResourceNotFoundError,
    URLParseError,
)


@pytest.fixture
def fetcher():
    fetcher = Mock(spec=PageFetcher)
    fetcher.fetch.side_effect = lambda url: FetchResult(
        url=url, final_url=url, status_code=200
    )
    return fetcher


@pytest.fixture
def bookmarker(store_path, fetcher):
    return Bookmarker(BookmarkStore.load(store_path), fetcher)


class TestAdd:
    def test_fetches_then_appends_normalized_url(self, bookmarker, fetcher, store_path):
        entry = bookmarker.add("HTTP://example.com")

        assert entry.url == "http://example.com"
        fetcher.fetch.assert_called_once_with("http://example.com")
        assert store_path.read_text() == "http://example.com\n"

    def test_duplicate_is_rejected_before_fetch(self, write_store, fetcher):
        path = write_store("http://example.com\n")
        bookmarker = Bookmarker(BookmarkStore.load(path), fetcher)

        with pytest.raises(DuplicateBookmarkError, match="duplicate: http://example.com"):
            bookmarker.add("http://example.com")

        fetcher.fetch.assert_not_called()
        assert path.read_text() == "http://example.com\n"

    def test_duplicate_after_normalization(self, bookmarker):
        bookmarker.add("https://example.com/a")
        with pytest.raises(DuplicateBookmarkError):
            bookmarker.add("HTTPS://example.com/a")

    def test_unparseable_url(self, bookmarker, fetcher, store_path):
        with pytest.raises(URLParseError):
            bookmarker.add("http://example.com/%zz")
        fetcher.fetch.assert_not_called()
        assert not store_path.exists()

    @pytest.mark.parametrize(
        "error",
        [ResourceNotFoundError("http://example.com"), MaxRetriesExceededError()],
    )
    def test_failed_fetch_leaves_store_untouched(
        self, bookmarker, fetcher, store_path, error
    ):
        fetcher.fetch.side_effect = error

        with pytest.raises(type(error)):
            bookmarker.add("http://example.com")

        assert not store_path.exists()
        assert not bookmarker.store.contains("http://example.com")

    def test_requires_fetcher(self, store_path):
        with pytest.raises(RuntimeError):
            Bookmarker(BookmarkStore.load(store_path)).add("http://example.com")


class TestList:
    def test_empty(self, bookmarker):
        assert bookmarker.list() == []

    def test_sorted_normalized_urls(self, bookmarker):
        for url in ["https://b.example", "HTTP://a.example", "https://a.example/z"]:
            bookmarker.add(url)

        assert bookmarker.list() == [
            "http://a.example",
            "https://a.example/z",
            "https://b.example",
        ]
