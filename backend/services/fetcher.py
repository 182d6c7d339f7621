"""Job page fetching with exponential backoff."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

import httpx
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from services.errors import FetchError, InvalidUrlError

logger = logging.getLogger(__name__)

BROWSER_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml",
    "Accept-Language": "en-US,en",
}

Sleep = Callable[[float], Awaitable[None]]


@dataclass(frozen=True)
class RetryPolicy:
    """How many times to try and how long to wait in between."""
    max_attempts: int = 3
    base_delay: float = 2.0

    def backoff(self, attempt: int) -> float:
        """Delay in seconds after failed attempt ``attempt`` (1-based): 2s, 4s, 8s..."""
        return self.base_delay * 2 ** (attempt - 1)

    def wait(self) -> wait_exponential:
        """tenacity wait strategy producing the ``backoff`` schedule."""
        return wait_exponential(multiplier=self.base_delay)


class _AttemptFailed(Exception):
    """A single fetch attempt did not yield usable HTML."""

    def __init__(self, reason: str, timed_out: bool = False) -> None:
        super().__init__(reason)
        self.timed_out = timed_out


def build_http_client(timeout: float = 45.0, max_redirects: int = 5) -> httpx.AsyncClient:
    """Client used for every page fetch. Closed by the owning resources."""
    return httpx.AsyncClient(
        headers=BROWSER_HEADERS,
        timeout=httpx.Timeout(timeout),
        follow_redirects=True,
        max_redirects=max_redirects,
    )


def _check_url(url: str) -> None:
    if not url or not url.startswith("http"):
        raise InvalidUrlError("Invalid or missing URL provided.")
    try:
        parsed = httpx.URL(url)
    except (httpx.InvalidURL, ValueError) as e:
        raise InvalidUrlError(f"Invalid URL provided: {e}") from e
    if parsed.scheme not in ("http", "https") or not parsed.host:
        raise InvalidUrlError("Invalid or missing URL provided.")


def _log_retry(retry_state: RetryCallState) -> None:
    logger.warning(
        "Attempt %d failed: %s. Retrying in %.1fs",
        retry_state.attempt_number,
        retry_state.outcome.exception(),
        retry_state.next_action.sleep,
    )


async def _fetch_once(client: httpx.AsyncClient, url: str) -> str:
    try:
        response = await client.get(url)
    except httpx.TimeoutException as e:
        raise _AttemptFailed(f"timeout ({type(e).__name__})", timed_out=True) from e
    except httpx.HTTPError as e:
        raise _AttemptFailed(f"{type(e).__name__}: {e}") from e

    if response.status_code != 200:
        raise _AttemptFailed(f"Status {response.status_code}")

    body = response.text
    if not isinstance(body, str) or "<html" not in body.lower():
        raise _AttemptFailed("Invalid HTML content received")
    return body


async def fetch_html(
    url: str,
    client: httpx.AsyncClient,
    policy: RetryPolicy | None = None,
    sleep: Sleep = asyncio.sleep,
) -> str:
    """Fetch the raw HTML of a job posting.

    Retries failed attempts with exponential backoff. The body is returned
    unchanged on the first 200 response that looks like an HTML document.

    Raises:
        InvalidUrlError: ``url`` is not a well-formed http(s) URL.
        FetchError: every attempt failed.
    """
    _check_url(url)

    policy = policy or RetryPolicy()
    retrying = AsyncRetrying(
        stop=stop_after_attempt(policy.max_attempts),
        wait=policy.wait(),
        retry=retry_if_exception_type(_AttemptFailed),
        before_sleep=_log_retry,
        sleep=sleep,
        reraise=True,
    )

    try:
        async for attempt in retrying:
            with attempt:
                logger.info(
                    "Fetching job page (attempt %d/%d): %s",
                    attempt.retry_state.attempt_number, policy.max_attempts, url,
                )
                html = await _fetch_once(client, url)
    except _AttemptFailed as e:
        if e.timed_out:
            reason = "Request timeout: the website may be slow or unresponsive."
        else:
            reason = str(e)
        logger.error("Giving up on %s after %d attempts: %s", url, policy.max_attempts, reason)
        raise FetchError(
            f"Could not fetch content from URL after {policy.max_attempts} attempts. {reason}",
            attempts=policy.max_attempts,
            timed_out=e.timed_out,
        ) from e

    logger.info("Fetched job page (%d chars): %s", len(html), url)
    return html
