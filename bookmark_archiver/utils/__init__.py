"""
Utility modules for the bookmark archiver.

This package contains the exception hierarchy, logging setup and URL
normalization helpers.
"""

from .error_handler import (
    AvailabilityError,
    BookmarkArchiverError,
    ConfigurationError,
    DuplicateBookmarkError,
    FetchError,
    FetchTimeoutError,
    MaxRetriesExceededError,
    RedirectError,
    ResourceNotFoundError,
    StoreError,
    URLParseError,
    UsageError,
    ValidationError,
)
from .logging_setup import setup_logging
from .url_normalizer import normalize_url

__all__ = [
    "AvailabilityError",
    "BookmarkArchiverError",
    "ConfigurationError",
    "DuplicateBookmarkError",
    "FetchError",
    "FetchTimeoutError",
    "MaxRetriesExceededError",
    "RedirectError",
    "ResourceNotFoundError",
    "StoreError",
    "URLParseError",
    "UsageError",
    "ValidationError",
    "normalize_url",
    "setup_logging",
]
