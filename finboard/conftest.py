import pytest
from django.core.cache import cache
from rest_framework.test import APIClient

from finboard.portfolio.service import get_portfolio_service
from finboard.widgets.cache import ResponseCache
from finboard.widgets.service import get_binding_service


class FakeClock:
    """Manually advanced replacement for time.monotonic."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


@pytest.fixture(autouse=True)
def clear_caches():
    """Each test starts with an empty dashboard and fresh process-wide services."""
    cache.clear()
    get_binding_service.cache_clear()
    get_portfolio_service.cache_clear()
    yield
    cache.clear()
    get_binding_service.cache_clear()
    get_portfolio_service.cache_clear()


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def response_cache(clock) -> ResponseCache:
    return ResponseCache(ttl_seconds=60, max_entries=10, clock=clock)
