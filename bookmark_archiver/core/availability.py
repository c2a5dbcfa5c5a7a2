"""
Wayback Machine availability check.

Asks the Wayback availability JSON API whether an archived snapshot of a
URL exists. By default the most recent snapshot is returned; when a
timestamp in the form YYYYMMDDhhmmss (1-14 digits) is given, the closest
snapshot to that instant is returned instead.

See https://archive.org/help/wayback_api.php
"""

import logging
import re
from typing import Optional

import requests
from pydantic import ValidationError as PydanticValidationError

from ..utils.error_handler import AvailabilityError, URLParseError
from .data_models import ArchivedSnapshots, AvailabilityResponse

logger = logging.getLogger(__name__)

DEFAULT_AVAILABILITY_URL = "http://archive.org/wayback/available"
DEFAULT_TIMEOUT = 20

_TIMESTAMP = re.compile(r"^[0-9]{1,14}$")


def validate_timestamp(timestamp: str) -> str:
    """Check that a snapshot timestamp is 1-14 digits."""
    if not _TIMESTAMP.match(timestamp):
        raise URLParseError(
            f"invalid timestamp: {timestamp} (expected 1-14 digits, YYYYMMDDhhmmss)"
        )
    return timestamp


class AvailabilityChecker:
    """Client for the Wayback availability endpoint"""

    def __init__(
        self,
        endpoint: str = DEFAULT_AVAILABILITY_URL,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        self.endpoint = endpoint
        self.timeout = timeout
        self.session = session or requests.Session()

    def check(self, url: str, timestamp: Optional[str] = None) -> ArchivedSnapshots:
        """
        Look up the closest archived snapshot of a URL.

        Args:
            url: URL to look up
            timestamp: Optional YYYYMMDDhhmmss prefix to search near

        Returns:
            ArchivedSnapshots; its ``closest`` is None when nothing is archived

        Raises:
            URLParseError: If the timestamp is malformed
            AvailabilityError: On network, HTTP or decoding failures
        """
        params = {"url": url}
        if timestamp is not None:
            params["timestamp"] = validate_timestamp(timestamp)

        logger.debug(f"Checking archive availability for {url}")
        try:
            response = self.session.get(
                self.endpoint, params=params, timeout=self.timeout
            )
            response.raise_for_status()
            payload = response.json()
        except requests.exceptions.RequestException as e:
            raise AvailabilityError(f"checking availability of {url}: {e}") from e
        except ValueError as e:
            raise AvailabilityError(
                f"decoding availability response for {url}: {e}"
            ) from e

        try:
            parsed = AvailabilityResponse.model_validate(payload)
        except PydanticValidationError as e:
            raise AvailabilityError(
                f"unexpected availability response for {url}: {e}"
            ) from e

        return parsed.archived_snapshots


def format_snapshots(snapshots: ArchivedSnapshots) -> str:
    """Render an availability result for the terminal."""
    closest = snapshots.closest
    if closest is None or not closest.available:
        return "no snapshot available"
    return "\n".join(
        [
            f"available: {str(closest.available).lower()}",
            f"url: {closest.url}",
            f"timestamp: {closest.timestamp}",
            f"status: {closest.status}",
        ]
    )
