from datetime import datetime, timezone
from typing import Callable

# Source of "now" for freshness stamps, cache TTLs and throttling
Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)
