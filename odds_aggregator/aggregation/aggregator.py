import asyncio
from datetime import timedelta
from typing import Awaitable, Callable, Dict, List, Optional, Sequence, Tuple

from loguru import logger

from odds_aggregator.config.settings import AppSettings, settings as default_settings
from odds_aggregator.models.bookmaker import Bookmaker
from odds_aggregator.models.event import Event
from odds_aggregator.models.responses import (
    DEMO_SOURCE_NAME,
    AggregatedOdds,
    DataSourceInfo,
    SourceDiagnostic,
    SourceResult,
)
from odds_aggregator.normalization.mappings import sport_codes_for
from odds_aggregator.normalization.sportsbet_transformer import SportsbetTransformer
from odds_aggregator.scrapers.odds_api_client import OddsApiClient
from odds_aggregator.scrapers.sportsbet_scraper import SportsbetScraper
from odds_aggregator.storage.ttl_cache import TTLCache
from odds_aggregator.utils.clock import Clock, utc_now
from odds_aggregator.utils.misc_utils import normalize_name
from .demo_data import demo_events
from .merge import finalize_best_prices, merge_event_lists
from .sources import OddsApiSource, OddsSource, SportsbetSource

DEFAULT_UPDATE_INTERVAL = timedelta(minutes=2)

SourceFetch = Callable[[OddsSource], Awaitable[SourceResult]]


class UnsupportedSportError(ValueError):
    """Raised when a sport key has no provider mapping."""

    pass


class OddsAggregator:
    """Combines odds from every enabled provider into one event list."""

    def __init__(
        self,
        sources: Sequence[OddsSource],
        clock: Clock = utc_now,
        update_interval: timedelta = DEFAULT_UPDATE_INTERVAL,
        source_timeout: Optional[float] = None,
        demo_data: Callable[[Clock], List[Event]] = demo_events,
    ):
        # Priority order fixes the merge order: lower number forms the base list
        self.sources: List[OddsSource] = sorted(sources, key=lambda s: s.priority)
        self.clock = clock
        self.update_interval = update_interval
        self.source_timeout = source_timeout
        self.demo_data = demo_data
        logger.info(
            f"Odds aggregator initialized with sources: {[s.name for s in self.sources]}"
        )

    @classmethod
    def from_settings(
        cls, app_settings: Optional[AppSettings] = None, clock: Clock = utc_now
    ) -> "OddsAggregator":
        """Builds the providers once, sharing one response cache between them."""
        app_settings = app_settings or default_settings
        cache = TTLCache(clock=clock)
        odds_api = OddsApiSource(
            OddsApiClient.from_settings(app_settings, cache=cache, clock=clock),
            sports=app_settings.odds_api_sports,
        )
        sportsbet = SportsbetSource(
            SportsbetScraper.from_settings(app_settings, cache=cache, clock=clock),
            transformer=SportsbetTransformer(
                clock=clock,
                placeholder_fallback=app_settings.sportsbet_placeholder_fallback,
            ),
            sports=app_settings.sportsbet_sports,
        )
        return cls(
            [odds_api, sportsbet],
            clock=clock,
            update_interval=timedelta(seconds=app_settings.update_interval_seconds),
            source_timeout=app_settings.source_timeout,
        )

    # --- Public operations ---

    async def get_all_odds(self) -> AggregatedOdds:
        """Odds for every configured sport from every enabled provider."""
        logger.info("Aggregating odds from all enabled sources...")
        calls = [(source, self._fetch_all) for source in self._enabled_sources()]
        events, sources, errors, rate_limit = await self._collect(calls)

        if not events:
            logger.warning("No data from any source, using demo data")
            events = self.demo_data(self.clock)
            sources.append(DEMO_SOURCE_NAME)
            errors.append("No live odds available, showing demo data.")

        return self._response(events, sources, errors, rate_limit)

    async def get_odds_by_sport(self, sport: str) -> AggregatedOdds:
        """Odds for one unified sport key (``afl``, ``nba``, ...)."""
        try:
            calls = self._sport_calls(sport)
        except UnsupportedSportError as e:
            logger.error(f"Failed to fetch odds for {sport}: {e}")
            return self._response([], [], [str(e)], None)

        logger.info(f"Aggregating {sport} odds from {[s.name for s, _ in calls]}")
        events, sources, errors, rate_limit = await self._collect(calls)

        if not events:
            fallback = [
                event
                for event in self.demo_data(self.clock)
                if normalize_name(event.sport) == normalize_name(sport)
            ]
            if fallback:
                logger.warning(f"No {sport} data from any source, using demo data")
                events = fallback
                sources.append(DEMO_SOURCE_NAME)
                errors.append(f"No live {sport} odds available, showing demo data.")

        return self._response(events, sources, errors, rate_limit)

    def get_all_bookmakers(self) -> List[Bookmaker]:
        bookmakers: List[Bookmaker] = []
        for source in self.sources:
            bookmakers.extend(b for b in source.bookmakers if b not in bookmakers)
        return bookmakers

    def get_data_sources(self) -> List[DataSourceInfo]:
        return [source.info() for source in self.sources]

    def enable_source(self, name: str) -> bool:
        return self._set_enabled(name, True)

    def disable_source(self, name: str) -> bool:
        return self._set_enabled(name, False)

    async def test_sources(self) -> Dict[str, SourceDiagnostic]:
        """Probes every provider independently; never touches aggregated results."""
        diagnostics = await asyncio.gather(*(source.test() for source in self.sources))
        return {d.source: d for d in diagnostics}

    async def close(self) -> None:
        for source in self.sources:
            await source.close()

    # --- Internals ---

    def _enabled_sources(self) -> List[OddsSource]:
        return [source for source in self.sources if source.enabled]

    def _find_source(self, name: str) -> Optional[OddsSource]:
        wanted = normalize_name(name)
        return next(
            (s for s in self.sources if normalize_name(s.name) == wanted), None
        )

    def _set_enabled(self, name: str, enabled: bool) -> bool:
        source = self._find_source(name)
        if not source:
            logger.warning(f"Unknown data source: {name}")
            return False
        source.enabled = enabled
        logger.info(f"Data source {source.name} {'enabled' if enabled else 'disabled'}")
        return True

    @staticmethod
    async def _fetch_all(source: OddsSource) -> SourceResult:
        return await source.fetch_all()

    def _sport_calls(self, sport: str) -> List[Tuple[OddsSource, SourceFetch]]:
        codes = sport_codes_for(sport)
        if codes is None:
            raise UnsupportedSportError(f"Unsupported sport: {sport}")

        calls: List[Tuple[OddsSource, SourceFetch]] = []
        for source in self._enabled_sources():
            code = codes.get(source.name)
            if code:
                calls.append(
                    (source, lambda s, code=code: s.fetch_sport(code))
                )
        if not calls:
            raise UnsupportedSportError(
                f"Unsupported sport: {sport} (no enabled source covers it)"
            )
        return calls

    async def _run_source(
        self, source: OddsSource, fetch: SourceFetch
    ) -> Tuple[Optional[SourceResult], Optional[str]]:
        try:
            if self.source_timeout:
                result = await asyncio.wait_for(fetch(source), self.source_timeout)
            else:
                result = await fetch(source)
        except asyncio.TimeoutError:
            logger.error(f"{source.name} timed out after {self.source_timeout}s")
            return None, f"{source.name} timed out."
        except Exception as e:
            logger.error(f"{source.name} failed: {e}")
            return None, f"{source.name} failed: {e}"
        return result, None

    async def _collect(
        self, calls: List[Tuple[OddsSource, SourceFetch]]
    ) -> Tuple[List[Event], List[str], List[str], Optional[int]]:
        """Runs provider calls concurrently, then merges in priority order."""
        outcomes = await asyncio.gather(
            *(self._run_source(source, fetch) for source, fetch in calls)
        )

        events: List[Event] = []
        sources: List[str] = []
        errors: List[str] = []
        rate_limit: Optional[int] = None

        for (source, _), (result, error) in zip(calls, outcomes):
            if error:
                errors.append(error)
                continue
            if result.rate_limit_remaining is not None and rate_limit is None:
                rate_limit = result.rate_limit_remaining
            if not result.events:
                logger.info(f"{source.name} returned no events")
                continue
            events = (
                merge_event_lists(events, result.events) if events else list(result.events)
            )
            sources.append(source.name)
            logger.info(
                f"Merged {len(result.events)} events from {source.name}; {len(events)} total"
            )

        return finalize_best_prices(events), sources, errors, rate_limit

    def _response(
        self,
        events: List[Event],
        sources: List[str],
        errors: List[str],
        rate_limit: Optional[int],
    ) -> AggregatedOdds:
        now = self.clock()
        return AggregatedOdds(
            data=events,
            sources=sources,
            error=" ".join(errors) if errors else None,
            last_updated=now,
            next_update=now + self.update_interval,
            rate_limit_remaining=rate_limit,
        )
