# odds_aggregator/scrapers/odds_api_client.py

from datetime import timedelta
from typing import Any, Dict, List, Optional
from urllib.parse import urlencode

import httpx
from loguru import logger
from pydantic import TypeAdapter, ValidationError

from odds_aggregator.config.settings import AppSettings
from odds_aggregator.models.raw import OddsApiSport
from odds_aggregator.models.responses import RateLimitInfo
from odds_aggregator.normalization.mappings import ODDS_API_SPORTS
from odds_aggregator.storage.ttl_cache import TTLCache
from odds_aggregator.utils.clock import Clock, utc_now
from .base_scraper import (
    AuthenticationError,
    BaseScraper,
    RateLimitError,
    RetryPolicy,
    ScraperError,
)

ODDS_API_BASE_URL = "https://api.the-odds-api.com/v4"

# Free tier allowance, until the API reports otherwise
DEFAULT_REQUEST_QUOTA = 500

ODDS_PARAMS = {
    "markets": "h2h,spreads,totals",
    "oddsFormat": "decimal",
    "dateFormat": "iso",
}

SPORTS_ADAPTER = TypeAdapter(List[OddsApiSport])


class OddsApiClient(BaseScraper):
    """Client for The Odds API (https://the-odds-api.com/)."""

    source_name = "The Odds API"

    def __init__(
        self,
        api_key: Optional[str],
        base_url: str = ODDS_API_BASE_URL,
        regions: str = "us",
        *args,
        **kwargs,
    ):
        super().__init__(*args, **kwargs)
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.regions = regions
        self.rate_limit_remaining: Optional[int] = DEFAULT_REQUEST_QUOTA
        if not api_key:
            logger.warning(
                "The Odds API key is not configured; requests to it will fail."
            )

    @classmethod
    def from_settings(
        cls,
        app_settings: AppSettings,
        cache: Optional[TTLCache] = None,
        clock: Clock = utc_now,
    ) -> "OddsApiClient":
        return cls(
            api_key=app_settings.odds_api_key,
            base_url=app_settings.odds_api_base_url,
            regions=app_settings.odds_api_regions,
            retry_policy=RetryPolicy.from_settings(app_settings),
            min_request_interval=app_settings.odds_api_min_request_interval,
            cache_ttl=app_settings.odds_api_cache_ttl,
            cache=cache,
            clock=clock,
            timeout=app_settings.request_timeout,
        )

    def _on_response(self, response: httpx.Response) -> None:
        remaining = response.headers.get("x-requests-remaining")
        if remaining is None:
            return
        try:
            self.rate_limit_remaining = int(float(remaining))
        except ValueError:
            logger.debug(f"Ignoring unparseable x-requests-remaining: {remaining}")

    async def _get_json(self, endpoint: str, params: Dict[str, str]) -> Any:
        if not self.api_key:
            raise AuthenticationError("Missing The Odds API key configuration.")

        cache_key = f"{self.source_name}:{endpoint}?{urlencode(sorted(params.items()))}"

        async def load() -> Any:
            if self.rate_limit_remaining is not None and self.rate_limit_remaining <= 0:
                raise RateLimitError("The Odds API request quota is exhausted.")
            response = await self._request(
                "GET",
                f"{self.base_url}{endpoint}",
                params={**params, "apiKey": self.api_key},
            )
            try:
                return response.json()
            except ValueError as e:
                raise ScraperError(f"Invalid JSON from {self.source_name}: {e}") from e

        return await self._cached(cache_key, load)

    async def fetch_odds(self, sport_code: str) -> List[Dict[str, Any]]:
        """Fetches the raw event list (with bookmaker prices) for one sport key."""
        logger.info(f"Fetching odds for {sport_code} from {self.source_name}")
        payload = await self._get_json(
            f"/sports/{sport_code}/odds", {"regions": self.regions, **ODDS_PARAMS}
        )
        if not isinstance(payload, list):
            raise ScraperError(
                f"Unexpected {self.source_name} payload for {sport_code}: {type(payload).__name__}"
            )
        logger.info(
            f"Fetched {len(payload)} raw events for {sport_code} from {self.source_name}"
        )
        return payload

    async def list_sports(self) -> List[str]:
        """Sport keys offered upstream that we know how to label."""
        try:
            payload = await self._get_json("/sports", {"all": "false"})
            sports = SPORTS_ADAPTER.validate_python(payload)
            return [sport.key for sport in sports if sport.key in ODDS_API_SPORTS]
        except (ScraperError, ValidationError) as e:
            logger.error(f"Failed to fetch sports from {self.source_name}: {e}")
            return list(ODDS_API_SPORTS.keys())

    def get_rate_limit_info(self) -> RateLimitInfo:
        # Quota resets daily
        return RateLimitInfo(
            remaining=self.rate_limit_remaining,
            reset_time=self.clock() + timedelta(hours=24),
        )
