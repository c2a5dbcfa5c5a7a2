"""
Page Fetcher

Retrieves a page once to confirm it is reachable, with a bounded retry
loop for transient failures. The body is read in full and discarded.

The loop is a small state machine:

    ATTEMPT --404------------------------------------> FATAL
    ATTEMPT --429/503 + Retry-After--> BACKOFF ------> ATTEMPT  (one retry)
    ATTEMPT --3xx + Location--> REDIRECT_FOLLOW -----> ATTEMPT  (free)
    ATTEMPT --500--> BACKOFF (no delay) -------------> ATTEMPT  (one retry)
    ATTEMPT --anything else--------------------------> SUCCESS

BACKOFF with no retries left becomes FATAL. Note that 429/503 without a
usable Retry-After, any 4xx other than 404, and 5xx other than 500 all end
in SUCCESS: having received some HTTP response is what counts.
"""

import logging
import re
import time
from typing import Callable, Mapping, Optional, Tuple
from urllib.parse import urljoin

import requests

from ..utils.error_handler import (
    FetchError,
    FetchTimeoutError,
    MaxRetriesExceededError,
    RedirectError,
    ResourceNotFoundError,
)
from .data_models import FetchResult, FetchState

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 20
DEFAULT_MAX_RETRIES = 3
DEFAULT_RETRY_AFTER_GRACE = 60
DEFAULT_MAX_REDIRECTS = 10
DEFAULT_USER_AGENT = "bookmark-archiver/1.0.0"

RETRY_AFTER_STATUSES = {429, 503}
CHUNK_SIZE = 64 * 1024

_INTEGER = re.compile(r"^[+-]?[0-9]+$")


def parse_retry_after(value: Optional[str]) -> Optional[int]:
    """
    Interpret a Retry-After header as a Unix timestamp.

    Only a positive integer is accepted; HTTP dates, delta-seconds in
    any other syntax, zero and negative values yield None.
    """
    if value is None or not _INTEGER.match(value):
        return None
    timestamp = int(value)
    return timestamp if timestamp > 0 else None


def next_state(
    status_code: int,
    headers: Mapping[str, str],
    now: float,
    retry_after_grace: float = DEFAULT_RETRY_AFTER_GRACE,
) -> Tuple[FetchState, float]:
    """
    Decide the transition that follows a completed attempt.

    Args:
        status_code: HTTP status of the response
        headers: Response headers
        now: Current Unix time, used to turn Retry-After into a delay
        retry_after_grace: Seconds added after the Retry-After instant

    Returns:
        Tuple of (next state, seconds to wait before the next attempt)
    """
    if status_code >= 400:
        if status_code == 404:
            return FetchState.FATAL, 0.0

        if status_code in RETRY_AFTER_STATUSES:
            timestamp = parse_retry_after(headers.get("Retry-After"))
            if timestamp is not None:
                delay = timestamp - now + retry_after_grace
                return FetchState.BACKOFF, max(0.0, delay)

    if 300 <= status_code < 400:
        return FetchState.REDIRECT_FOLLOW, 0.0

    # Only 500 itself is retried, not the whole 5xx range
    if status_code == 500:
        return FetchState.BACKOFF, 0.0

    return FetchState.SUCCESS, 0.0


class PageFetcher:
    """Fetch a URL with bounded retry and redirect handling"""

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        max_retries: int = DEFAULT_MAX_RETRIES,
        retry_after_grace: float = DEFAULT_RETRY_AFTER_GRACE,
        max_redirects: int = DEFAULT_MAX_REDIRECTS,
        user_agent: str = DEFAULT_USER_AGENT,
        session: Optional[requests.Session] = None,
        sleep: Optional[Callable[[float], None]] = None,
        clock: Optional[Callable[[], float]] = None,
    ):
        """
        Initialize page fetcher.

        Args:
            timeout: Total seconds allowed per attempt, body included
            max_retries: Retries allowed after the initial attempt
            retry_after_grace: Seconds to wait past a Retry-After instant
            max_redirects: Redirect hops followed by the loop itself
            user_agent: User-Agent header sent with every request
            session: Optional pre-built requests session
            sleep: Function used to wait during backoff (time.sleep)
            clock: Function returning the current Unix time (time.time)
        """
        self.timeout = timeout
        self.max_retries = max_retries
        self.retry_after_grace = retry_after_grace
        self.max_redirects = max_redirects
        self._sleep = sleep or time.sleep
        self._clock = clock or time.time

        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": user_agent})

        logger.debug(
            f"Initialized page fetcher (timeout={timeout}s, "
            f"max_retries={max_retries}, max_redirects={max_redirects})"
        )

    def fetch(self, url: str) -> FetchResult:
        """
        Retrieve a URL, retrying transient failures.

        Args:
            url: Absolute URL to retrieve

        Returns:
            FetchResult describing the final attempt

        Raises:
            ResourceNotFoundError: On HTTP 404
            RedirectError: If a redirect has no Location or loops too long
            MaxRetriesExceededError: If the retry budget runs out
            FetchError: On network-level failures, without retrying
        """
        target = url
        attempts = 0
        retries = 0
        redirects = 0
        states = []

        while True:
            states.append(FetchState.ATTEMPT)
            attempts += 1
            status_code, headers = self._attempt(target)

            state, delay = next_state(
                status_code, headers, self._clock(), self.retry_after_grace
            )
            states.append(state)
            logger.debug(f"{target}: HTTP {status_code} -> {state.value}")

            if state is FetchState.SUCCESS:
                return FetchResult(
                    url=url,
                    final_url=target,
                    status_code=status_code,
                    attempts=attempts,
                    retries=retries,
                    redirects=redirects,
                    states=states,
                )

            if state is FetchState.FATAL:
                raise ResourceNotFoundError(target)

            if state is FetchState.REDIRECT_FOLLOW:
                redirects += 1
                if redirects > self.max_redirects:
                    raise RedirectError(
                        f"too many redirects: {url}", url=url, status_code=status_code
                    )
                target = self._resolve_redirect(target, headers, status_code)
                logger.info(f"Following redirect to {target}")
                continue

            # FetchState.BACKOFF
            if retries >= self.max_retries:
                states.append(FetchState.FATAL)
                raise MaxRetriesExceededError(target, status_code)
            retries += 1
            if delay > 0:
                logger.info(
                    f"HTTP {status_code} from {target}, waiting {delay:.0f}s "
                    f"(retry {retries}/{self.max_retries})"
                )
                self._sleep(delay)
            else:
                logger.info(
                    f"HTTP {status_code} from {target}, retrying "
                    f"({retries}/{self.max_retries})"
                )

    def _attempt(self, url: str) -> Tuple[int, Mapping[str, str]]:
        """Perform one GET and drain the body within the deadline."""
        deadline = time.monotonic() + self.timeout

        try:
            response = self.session.get(
                url, timeout=self.timeout, stream=True, allow_redirects=True
            )
        except requests.exceptions.Timeout as e:
            raise FetchTimeoutError(str(e), url=url) from e
        except requests.exceptions.RequestException as e:
            raise FetchError(str(e), url=url) from e

        try:
            self._drain(response, deadline, url)
        finally:
            response.close()

        return response.status_code, response.headers

    def _drain(self, response: requests.Response, deadline: float, url: str) -> None:
        """Read and discard the response body."""
        try:
            for _ in response.iter_content(chunk_size=CHUNK_SIZE):
                if time.monotonic() > deadline:
                    raise FetchTimeoutError(
                        f"reading response body: deadline of {self.timeout}s "
                        f"exceeded for {url}",
                        url=url,
                    )
        except requests.exceptions.RequestException as e:
            raise FetchError(f"reading response body: {e}", url=url) from e

    @staticmethod
    def _resolve_redirect(
        url: str, headers: Mapping[str, str], status_code: int
    ) -> str:
        """Resolve a Location header against the current URL."""
        location = headers.get("Location")
        if not location:
            raise RedirectError(
                f"resolving redirect: {url}", url=url, status_code=status_code
            )
        return urljoin(url, location)

    def close(self) -> None:
        self.session.close()
