"""
Data models for the bookmark archiver.

This module defines the stored bookmark entry, the outcome of a page
fetch, and the response shape of the Wayback availability API.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


@dataclass(frozen=True)
class BookmarkEntry:
    """A single saved bookmark: one normalized absolute URL."""

    url: str

    def to_line(self) -> str:
        """Serialize as a line of the backing file."""
        return self.url + "\n"


class FetchState(Enum):
    """States of the page fetch state machine."""

    ATTEMPT = "attempt"
    BACKOFF = "backoff"
    REDIRECT_FOLLOW = "redirect_follow"
    FATAL = "fatal"
    SUCCESS = "success"


@dataclass
class FetchResult:
    """Outcome of a successful page fetch."""

    url: str
    final_url: str
    status_code: int
    attempts: int = 1
    retries: int = 0
    redirects: int = 0
    states: List[FetchState] = field(default_factory=list)

    @property
    def redirected(self) -> bool:
        return self.final_url != self.url


class ClosestSnapshot(BaseModel):
    """The snapshot closest to the requested timestamp."""

    available: bool = False
    url: str = ""
    timestamp: str = ""
    status: str = ""


class ArchivedSnapshots(BaseModel):
    """Body of the Wayback availability API, archived_snapshots section."""

    closest: Optional[ClosestSnapshot] = None

    @property
    def available(self) -> bool:
        return self.closest is not None and self.closest.available


class AvailabilityResponse(BaseModel):
    """Top-level JSON document returned by the availability endpoint."""

    url: Optional[str] = None
    archived_snapshots: ArchivedSnapshots = Field(default_factory=ArchivedSnapshots)
    timestamp: Optional[str] = None
