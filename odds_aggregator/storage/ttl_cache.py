# odds_aggregator/storage/ttl_cache.py
import asyncio
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Awaitable, Callable, Dict, Optional

from loguru import logger

from odds_aggregator.utils.clock import Clock, utc_now


@dataclass(frozen=True)
class CacheEntry:
    value: Any
    stored_at: datetime
    ttl: float  # seconds

    def is_fresh(self, now: datetime) -> bool:
        return now - self.stored_at < timedelta(seconds=self.ttl)


class TTLCache:
    """In-memory cache of immutable snapshots, each with its own time-to-live.

    Loads for the same key are serialized, so overlapping requests wait for
    the first load instead of all hitting the provider.
    """

    def __init__(self, clock: Clock = utc_now):
        self.clock = clock
        self._entries: Dict[str, CacheEntry] = {}
        self._locks: Dict[str, asyncio.Lock] = {}

    def get(self, key: str) -> Optional[Any]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if not entry.is_fresh(self.clock()):
            del self._entries[key]
            return None
        return entry.value

    def set(self, key: str, value: Any, ttl: float) -> None:
        if ttl <= 0:
            return
        self._entries[key] = CacheEntry(value=value, stored_at=self.clock(), ttl=ttl)

    def invalidate(self, key: Optional[str] = None) -> None:
        if key is None:
            self._entries.clear()
        else:
            self._entries.pop(key, None)

    async def get_or_load(
        self, key: str, loader: Callable[[], Awaitable[Any]], ttl: float
    ) -> Any:
        cached = self.get(key)
        if cached is not None:
            logger.debug(f"Cache hit for {key}")
            return cached

        lock = self._locks.setdefault(key, asyncio.Lock())
        async with lock:
            # Another request may have filled the entry while we waited
            cached = self.get(key)
            if cached is not None:
                logger.debug(f"Cache hit for {key} after waiting on load")
                return cached
            value = await loader()
            self.set(key, value, ttl)
            return value

    def __len__(self) -> int:
        return len(self._entries)
