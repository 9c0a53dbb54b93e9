import pytest

from odds_aggregator.scrapers.base_scraper import RetryPolicy
from tests.factories import FakeClock


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def no_wait_retry():
    return RetryPolicy(max_attempts=3, backoff_multiplier=0, backoff_min=0, backoff_max=0)
