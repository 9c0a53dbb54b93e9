from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field

from .event import Event

DEMO_SOURCE_NAME = "Demo Data"


class AggregatedOdds(BaseModel):
    """Result of an aggregation request, always renderable by the caller."""

    model_config = ConfigDict(frozen=True)

    data: List[Event] = []
    sources: List[str] = []
    error: Optional[str] = None
    last_updated: datetime
    next_update: datetime
    rate_limit_remaining: Optional[int] = None

    @computed_field  # type: ignore[misc]
    @property
    def is_demo(self) -> bool:
        """True when the data is the demonstration fallback rather than live odds."""
        return DEMO_SOURCE_NAME in self.sources


class SourceResult(BaseModel):
    """Events produced by one provider for one request."""

    source: str
    events: List[Event] = []
    rate_limit_remaining: Optional[int] = None


class SourceDiagnostic(BaseModel):
    """Outcome of probing one provider in isolation."""

    source: str
    success: bool
    target: Optional[str] = None  # URL or sport key that was probed
    raw_count: int = 0
    event_count: int = 0
    error: Optional[str] = None
    rate_limit_remaining: Optional[int] = None


class DataSourceInfo(BaseModel):
    name: str
    enabled: bool
    priority: int
    bookmakers: List[str] = Field(default_factory=list)


class RateLimitInfo(BaseModel):
    remaining: Optional[int] = None
    reset_time: datetime
