from typing import Optional

from loguru import logger

from odds_aggregator.config.settings import AppSettings
from odds_aggregator.normalization.mappings import SPORTSBET_SPORT_URLS
from odds_aggregator.storage.ttl_cache import TTLCache
from odds_aggregator.utils.clock import Clock, utc_now
from .base_scraper import BaseScraper, RetryPolicy, ScraperError

SPORTSBET_BASE_URL = "https://www.sportsbet.com.au"

BASE_HEADERS = {
    "Accept": "text/html,application/xhtml+xml,text/markdown;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-AU,en;q=0.7",
    "Referer": "https://www.sportsbet.com.au/",
    "DNT": "1",
}


class SportsbetScraper(BaseScraper):
    """Fetches rendered Sportsbet listing pages."""

    source_name = "Sportsbet"

    def __init__(self, base_url: str = SPORTSBET_BASE_URL, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.base_url = base_url.rstrip("/")
        self.client.headers.update(BASE_HEADERS)
        logger.debug("SportsbetScraper initialized.")

    @classmethod
    def from_settings(
        cls,
        app_settings: AppSettings,
        cache: Optional[TTLCache] = None,
        clock: Clock = utc_now,
    ) -> "SportsbetScraper":
        return cls(
            base_url=app_settings.sportsbet_base_url,
            retry_policy=RetryPolicy.from_settings(app_settings),
            min_request_interval=app_settings.sportsbet_min_scrape_interval,
            cache_ttl=app_settings.sportsbet_cache_ttl,
            cache=cache,
            clock=clock,
            timeout=app_settings.request_timeout,
        )

    def url_for(self, sport: str) -> Optional[str]:
        """Maps a Sportsbet sport key to its listing page URL."""
        path = SPORTSBET_SPORT_URLS.get(sport)
        if not path:
            logger.warning(f"Unsupported sport for Sportsbet URL mapping: {sport}")
            return None
        return f"{self.base_url}{path}"

    async def fetch_rendered_page(self, url: str) -> str:
        """Returns the text of a rendered page, served from cache while fresh."""

        async def load() -> str:
            logger.info(f"Scraping Sportsbet: {url}")
            response = await self._request("GET", url)
            if not response.text:
                raise ScraperError(f"Empty page returned by {self.source_name} for {url}")
            return response.text

        return await self._cached(f"{self.source_name}:{url}", load)
