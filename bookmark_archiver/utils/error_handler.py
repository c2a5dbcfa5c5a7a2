"""
Exception hierarchy for the bookmark archiver.

Every failure that should end an invocation is raised as a subclass of
BookmarkArchiverError and handled once, in the CLI, which decides the
message and the exit status.
"""


class BookmarkArchiverError(Exception):
    """Base exception for all bookmark archiver errors."""

    pass


# ============================================================================
# Validation Errors
# ============================================================================


class ValidationError(BookmarkArchiverError):
    """User input that cannot be accepted."""

    pass


class URLParseError(ValidationError):
    """A URL (or snapshot timestamp) that does not parse."""

    pass


class DuplicateBookmarkError(ValidationError):
    """The normalized URL is already in the store."""

    def __init__(self, url: str):
        super().__init__(f"duplicate: {url}")
        self.url = url


class UsageError(BookmarkArchiverError):
    """Invalid combination of command-line arguments."""

    pass


# ============================================================================
# Configuration Errors
# ============================================================================


class ConfigurationError(BookmarkArchiverError):
    """Configuration-related errors."""

    pass


# ============================================================================
# Storage Errors
# ============================================================================


class StoreError(BookmarkArchiverError):
    """Reading or appending to the backing file failed."""

    pass


# ============================================================================
# Network Errors
# ============================================================================


class FetchError(BookmarkArchiverError):
    """The page could not be retrieved."""

    def __init__(self, message: str, url: str = "", status_code=None):
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class ResourceNotFoundError(FetchError):
    """The server answered 404."""

    def __init__(self, url: str):
        super().__init__(f"resource not found: {url}", url=url, status_code=404)


class RedirectError(FetchError):
    """A redirect could not be resolved or followed."""

    pass


class MaxRetriesExceededError(FetchError):
    """The retry budget ran out on a retryable status."""

    def __init__(self, url: str = "", status_code=None):
        super().__init__("max retries exceeded", url=url, status_code=status_code)


class FetchTimeoutError(FetchError):
    """An attempt ran past its total deadline."""

    pass


class AvailabilityError(BookmarkArchiverError):
    """The archive availability endpoint failed or returned garbage."""

    pass
