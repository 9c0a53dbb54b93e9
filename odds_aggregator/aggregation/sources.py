from abc import ABC, abstractmethod
from typing import List, Optional, Sequence, Tuple

from loguru import logger

from odds_aggregator.models.bookmaker import Bookmaker
from odds_aggregator.models.event import Event
from odds_aggregator.models.responses import (
    DataSourceInfo,
    SourceDiagnostic,
    SourceResult,
)
from odds_aggregator.normalization.mappings import (
    ODDS_API_BOOKMAKERS,
    SPORTSBET_BOOKMAKER,
)
from odds_aggregator.normalization.odds_api_transformer import OddsApiTransformer
from odds_aggregator.normalization.sportsbet_transformer import SportsbetTransformer
from odds_aggregator.scrapers.base_scraper import AuthenticationError, ScraperError
from odds_aggregator.scrapers.odds_api_client import OddsApiClient
from odds_aggregator.scrapers.sportsbet_scraper import SportsbetScraper


class OddsSource(ABC):
    """A provider taking part in aggregation: client + transformer + switches."""

    name: str = "Unknown"

    def __init__(self, sports: Sequence[str], priority: int, enabled: bool = True):
        self.sports = list(sports)
        self.priority = priority
        self.enabled = enabled

    @property
    @abstractmethod
    def bookmakers(self) -> List[Bookmaker]:
        pass

    @abstractmethod
    async def fetch_sport(self, sport_code: str) -> SourceResult:
        """Fetches and transforms events for one provider-specific sport code."""
        pass

    @abstractmethod
    async def _probe(self) -> Tuple[str, int, int]:
        """Runs the raw fetch once; returns (target, raw item count, event count)."""
        pass

    async def fetch_all(self) -> SourceResult:
        """Fetches every configured sport, skipping the ones that fail.

        Raises the last provider error if every sport failed.
        """
        events: List[Event] = []
        last_error: Optional[ScraperError] = None
        succeeded = 0
        result: Optional[SourceResult] = None

        for sport_code in self.sports:
            try:
                result = await self.fetch_sport(sport_code)
            except AuthenticationError:
                # Credentials won't get better for the next sport
                raise
            except ScraperError as e:
                logger.error(f"{self.name}: failed to fetch {sport_code}: {e}")
                last_error = e
                continue
            succeeded += 1
            events.extend(result.events)

        if not succeeded and last_error is not None:
            raise last_error

        return SourceResult(
            source=self.name,
            events=events,
            rate_limit_remaining=result.rate_limit_remaining if result else None,
        )

    async def test(self) -> SourceDiagnostic:
        try:
            target, raw_count, event_count = await self._probe()
        except Exception as e:
            logger.warning(f"Source test failed for {self.name}: {e}")
            return SourceDiagnostic(source=self.name, success=False, error=str(e))
        return SourceDiagnostic(
            source=self.name,
            success=True,
            target=target,
            raw_count=raw_count,
            event_count=event_count,
        )

    def info(self) -> DataSourceInfo:
        return DataSourceInfo(
            name=self.name,
            enabled=self.enabled,
            priority=self.priority,
            bookmakers=[b.id for b in self.bookmakers],
        )

    async def close(self) -> None:
        pass


class OddsApiSource(OddsSource):
    name = "The Odds API"

    def __init__(
        self,
        client: OddsApiClient,
        transformer: Optional[OddsApiTransformer] = None,
        sports: Sequence[str] = ("americanfootball_nfl", "basketball_nba", "icehockey_nhl"),
        priority: int = 1,
        enabled: bool = True,
    ):
        super().__init__(sports, priority, enabled)
        self.client = client
        self.transformer = transformer or OddsApiTransformer()

    @property
    def bookmakers(self) -> List[Bookmaker]:
        return list(ODDS_API_BOOKMAKERS.values())

    async def fetch_sport(self, sport_code: str) -> SourceResult:
        raw_events = await self.client.fetch_odds(sport_code)
        return SourceResult(
            source=self.name,
            events=self.transformer.transform(raw_events),
            rate_limit_remaining=self.client.rate_limit_remaining,
        )

    async def _probe(self) -> Tuple[str, int, int]:
        raw_count = 0
        event_count = 0
        for sport_code in self.sports:
            raw_events = await self.client.fetch_odds(sport_code)
            raw_count += len(raw_events)
            event_count += len(self.transformer.transform(raw_events))
        return ",".join(self.sports), raw_count, event_count

    async def test(self) -> SourceDiagnostic:
        diagnostic = await super().test()
        return diagnostic.model_copy(
            update={"rate_limit_remaining": self.client.rate_limit_remaining}
        )

    async def close(self) -> None:
        await self.client.close()


class SportsbetSource(OddsSource):
    name = "Sportsbet"

    def __init__(
        self,
        scraper: SportsbetScraper,
        transformer: Optional[SportsbetTransformer] = None,
        sports: Sequence[str] = ("afl", "nrl", "nba"),
        priority: int = 2,
        enabled: bool = True,
    ):
        super().__init__(sports, priority, enabled)
        self.scraper = scraper
        self.transformer = transformer or SportsbetTransformer(clock=scraper.clock)

    @property
    def bookmakers(self) -> List[Bookmaker]:
        return [SPORTSBET_BOOKMAKER]

    def _url(self, sport_code: str) -> str:
        url = self.scraper.url_for(sport_code)
        if not url:
            raise ScraperError(f"Sportsbet scraping not implemented for {sport_code}")
        return url

    async def fetch_sport(self, sport_code: str) -> SourceResult:
        page = await self.scraper.fetch_rendered_page(self._url(sport_code))
        return SourceResult(
            source=self.name,
            events=self.transformer.transform_page(page, sport_code),
        )

    async def _probe(self) -> Tuple[str, int, int]:
        sport_code = self.sports[0] if self.sports else "afl"
        url = self._url(sport_code)
        page = await self.scraper.fetch_rendered_page(url)
        extracted = self.transformer.extract_events(page, sport_code)
        return url, len(extracted), len(self.transformer.transform(extracted))

    async def close(self) -> None:
        await self.scraper.close()
