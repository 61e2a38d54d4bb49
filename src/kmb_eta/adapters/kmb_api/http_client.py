"""Retrying HTTP client for KMB API requests.

The upstream edge proxy drops requests fairly often, so every GET is retried a
fixed number of times with a fixed pause between attempts.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import aiohttp

from kmb_eta.adapters.api_request_logger import log_api_request
from kmb_eta.adapters.kmb_api.constants import DEFAULT_HEADERS
from kmb_eta.domain.models.data_unavailable import DataUnavailable
from kmb_eta.domain.models.error_details import ErrorDetails

if TYPE_CHECKING:
    from aiohttp import ClientResponse, ClientSession

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RetryPolicy:
    """Attempt ceiling and fixed pause for one class of endpoint."""

    max_attempts: int
    delay_seconds: float


# Route catalog and stop sequence lookups
CATALOG_RETRY_POLICY = RetryPolicy(max_attempts=3, delay_seconds=2.0)
# Stop names and arrival estimates fail more often
LOOKUP_RETRY_POLICY = RetryPolicy(max_attempts=5, delay_seconds=3.0)


def _reason_for_status(status: int | None) -> str:
    """Describe an HTTP status in a few words."""
    if status == 429:
        return "Rate limit exceeded"
    if status == 502:
        return "Bad gateway (server error)"
    if status == 503:
        return "Service unavailable"
    if status == 504:
        return "Gateway timeout"
    if status is not None:
        return f"HTTP {status}"
    return "Network error"


class FetchError(Exception):
    """A request that did not produce a usable JSON payload."""

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status
        self.message = message

    def to_error_details(self) -> ErrorDetails:
        """Convert to the domain's error details."""
        return ErrorDetails(status_code=self.status, reason=_reason_for_status(self.status))

    def to_unavailable(self) -> DataUnavailable:
        """Wrap as the sentinel returned across component boundaries."""
        return DataUnavailable(error=self.to_error_details())


class RetryingFetcher:
    """GETs JSON with a bounded number of attempts."""

    def __init__(
        self,
        session: ClientSession,
        timeout_seconds: float = 10,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        """Initialize with an aiohttp session.

        Args:
            session: Shared aiohttp session.
            timeout_seconds: Total timeout for a single attempt.
            sleep: Coroutine used for the pause between attempts.
        """
        self._session = session
        self._timeout = aiohttp.ClientTimeout(total=timeout_seconds)
        self._sleep = sleep

    async def _read_response(self, response: ClientResponse, url: str) -> Any:
        """Return parsed JSON for a successful response or raise FetchError."""
        if not 200 <= response.status < 300:
            body = await response.text(errors="replace")
            body = body[:200] if body else "(empty response body)"
            raise FetchError(f"status {response.status} for {url}: {body}", status=response.status)
        try:
            return await response.json(content_type=None)
        except ValueError as e:
            raise FetchError(f"invalid JSON from {url}: {e}", status=response.status) from e

    async def _attempt(self, url: str) -> Any:
        log_api_request("GET", url, headers=DEFAULT_HEADERS)
        try:
            async with self._session.get(
                url, headers=DEFAULT_HEADERS, timeout=self._timeout
            ) as response:
                return await self._read_response(response, url)
        except (aiohttp.ClientError, asyncio.TimeoutError, UnicodeDecodeError) as e:
            raise FetchError(f"request to {url} failed: {e!r}") from e

    async def fetch(self, url: str, max_attempts: int, delay_seconds: float) -> Any:
        """GET ``url`` and return its parsed JSON body.

        Args:
            url: Absolute URL to request.
            max_attempts: Number of attempts before giving up (at least 1).
            delay_seconds: Pause between a failed attempt and the next one.

        Returns:
            The decoded JSON value.

        Raises:
            FetchError: Every attempt failed; carries the last failure.
        """
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")

        last_error: FetchError | None = None
        for attempt in range(1, max_attempts + 1):
            try:
                return await self._attempt(url)
            except FetchError as e:
                last_error = e
                logger.warning(f"Attempt {attempt}/{max_attempts} failed: {e.message}")
            if attempt < max_attempts:
                await self._sleep(delay_seconds)

        logger.error(f"Giving up on {url} after {max_attempts} attempt(s)")
        assert last_error is not None
        raise last_error

    async def fetch_with_policy(self, url: str, policy: RetryPolicy) -> Any:
        """GET ``url`` using the attempt ceiling and delay of ``policy``."""
        return await self.fetch(url, policy.max_attempts, policy.delay_seconds)


def extract_data(payload: Any) -> Any:
    """Return the ``data`` member of a payload, or ``None`` when it is missing."""
    if isinstance(payload, dict):
        return payload.get("data")
    return None
