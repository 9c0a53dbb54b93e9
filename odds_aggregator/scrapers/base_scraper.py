import asyncio
from abc import ABC
from typing import Any, Awaitable, Callable, Dict, Optional

import httpx
from loguru import logger
from pydantic import BaseModel, Field
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from odds_aggregator.config.settings import AppSettings
from odds_aggregator.storage.ttl_cache import TTLCache
from odds_aggregator.utils.clock import Clock, utc_now

# Define common HTTP status codes that warrant a retry
RETRYABLE_STATUS_CODES = {408, 429, 500, 502, 503, 504}

DEFAULT_USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/124.0 Safari/537.36"


class ScraperError(Exception):
    """Custom exception for provider-related errors."""

    pass


class AuthenticationError(ScraperError):
    """Exception raised for authentication failures (401, 403) or missing credentials."""

    pass


class RateLimitError(ScraperError):
    """Exception raised for rate limit errors (429) or an exhausted request quota."""

    pass


class RetryPolicy(BaseModel):
    """How often, and how patiently, a failed provider request is retried."""

    max_attempts: int = Field(4, ge=1)
    backoff_multiplier: float = Field(1.0, ge=0)
    backoff_min: float = Field(1.0, ge=0)
    backoff_max: float = Field(10.0, ge=0)

    @classmethod
    def from_settings(cls, app_settings: AppSettings) -> "RetryPolicy":
        return cls(
            max_attempts=app_settings.retry_max_attempts,
            backoff_multiplier=app_settings.retry_backoff_multiplier,
            backoff_min=app_settings.retry_backoff_min,
            backoff_max=app_settings.retry_backoff_max,
        )

    def retrying(self) -> AsyncRetrying:
        return AsyncRetrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(
                multiplier=self.backoff_multiplier,
                min=self.backoff_min,
                max=self.backoff_max,
            ),
            retry=retry_if_exception_type(
                (httpx.RequestError, httpx.HTTPStatusError, RateLimitError)
            ),
            reraise=True,  # Reraise the exception after max attempts
        )


class BaseScraper(ABC):
    """Shared HTTP plumbing for upstream odds providers.

    Owns the HTTP client, the retry policy, the minimum interval between
    requests and a response cache. One instance is meant to live for the
    whole process and be handed to whatever needs it.
    """

    source_name: str = "Unknown"

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        retry_policy: Optional[RetryPolicy] = None,
        min_request_interval: float = 0.0,
        cache_ttl: float = 0.0,
        cache: Optional[TTLCache] = None,
        clock: Clock = utc_now,
        timeout: float = 30.0,
    ):
        self.client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(timeout),
            follow_redirects=True,
            headers={"User-Agent": DEFAULT_USER_AGENT},
        )
        self.retry_policy = retry_policy or RetryPolicy()
        self.min_request_interval = min_request_interval
        self.cache_ttl = cache_ttl
        self.clock = clock
        self.cache = cache or TTLCache(clock=clock)
        self._last_request_at = None
        self._throttle_lock = asyncio.Lock()

    async def _throttle(self) -> None:
        """Waits until at least ``min_request_interval`` has passed since the last request."""
        async with self._throttle_lock:
            if self._last_request_at is not None and self.min_request_interval > 0:
                elapsed = (self.clock() - self._last_request_at).total_seconds()
                remaining = self.min_request_interval - elapsed
                if remaining > 0:
                    logger.debug(
                        f"Throttling {self.source_name} request for {remaining:.2f}s"
                    )
                    await asyncio.sleep(remaining)
            self._last_request_at = self.clock()

    def _on_response(self, response: httpx.Response) -> None:
        """Hook for subclasses that read metadata (quota headers) off every response."""
        pass

    async def _make_request(
        self,
        method: str,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        params: Optional[Dict[str, Any]] = None,
        **kwargs,
    ) -> httpx.Response:
        """Makes a single HTTP request and classifies the failure, if any."""
        logger.debug(f"Making {method} request to {url}", params=params)
        try:
            response = await self.client.request(
                method, url, headers=headers, params=params, **kwargs
            )
            self._on_response(response)

            if response.status_code in {401, 403}:
                logger.warning(
                    f"Authentication error ({response.status_code}) for {self.source_name} at {url}. Check credentials."
                )
                # Don't retry auth errors further, raise specific exception
                raise AuthenticationError(
                    f"Authentication failed ({response.status_code}) for {self.source_name}"
                )

            if response.status_code == 429:
                retry_after = response.headers.get("Retry-After")
                logger.warning(
                    f"Rate limit hit (429) for {self.source_name} at {url}. Retry-After: {retry_after}"
                )
                raise RateLimitError(f"Rate limited by {self.source_name}")

            response.raise_for_status()  # Raises HTTPStatusError for 4xx/5xx
            logger.debug(f"Request successful: {response.status_code} for {url}")
            return response

        except httpx.HTTPStatusError as e:
            if e.response.status_code in RETRYABLE_STATUS_CODES:
                logger.warning(
                    f"Retrying request for {self.source_name} due to status {e.response.status_code}"
                )
                raise  # Re-raise to trigger tenacity retry
            logger.error(
                f"HTTP error during request for {self.source_name}: {e.response.status_code}"
            )
            raise ScraperError(f"HTTP error: {e.response.status_code}") from e
        except httpx.RequestError as e:
            # Network errors, timeouts etc. - these are retryable
            logger.warning(f"Request error for {self.source_name}, retrying: {e}")
            raise

    async def _request(self, method: str, url: str, **kwargs) -> httpx.Response:
        """Makes a request under the retry policy, wrapping exhausted HTTP failures."""
        try:
            async for attempt in self.retry_policy.retrying():
                with attempt:
                    return await self._make_request(method, url, **kwargs)
        except (httpx.RequestError, httpx.HTTPStatusError) as e:
            logger.error(
                f"Max retries exceeded for {self.source_name} request to {url}. Last exception: {e}"
            )
            raise ScraperError(
                f"Failed request to {self.source_name} after {self.retry_policy.max_attempts} attempts"
            ) from e
        raise ScraperError(f"No request attempt was made to {self.source_name}")

    async def _cached(self, key: str, loader: Callable[[], Awaitable[Any]]) -> Any:
        """Returns the cached snapshot for ``key`` or throttles and loads a fresh one."""

        async def throttled_loader() -> Any:
            await self._throttle()
            return await loader()

        return await self.cache.get_or_load(key, throttled_loader, self.cache_ttl)

    async def close(self):
        """Closes the underlying HTTP client."""
        await self.client.aclose()
        logger.info(f"Closed HTTP client for {self.source_name}")
