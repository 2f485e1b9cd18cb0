"""
Widget binding service.

Orchestrates fetching widget APIs through the proxy, caching the raw
responses and running schema inference for the "test endpoint" flow.

Both operations share one cache but use separate keys (``test:<url>`` and
``live:<url>``). A fresh entry is served without a network call; on a miss
or expiry the API is fetched again, and a failed fetch is reported, never
papered over with the expired entry.
"""

import dataclasses
import logging
from collections.abc import Callable
from functools import cache
from typing import Any

from django.conf import settings

from finboard.widgets.cache import DEFAULT_MAX_ENTRIES, DEFAULT_TTL_SECONDS, ResponseCache
from finboard.widgets.proxy import TIMEOUT_MESSAGE, ProxyError, WidgetProxy
from finboard.widgets.schema import infer_fields
from finboard.widgets.types import EndpointTestResult

logger = logging.getLogger(__name__)

TEST_KEY_PREFIX = "test"
LIVE_KEY_PREFIX = "live"


class ErrorCategory:
    rate_limited = "rate_limited"
    forbidden = "forbidden"
    unauthorized = "unauthorized"
    server_error = "server_error"
    timeout = "timeout"
    generic = "generic"


ERROR_MESSAGES = {
    ErrorCategory.rate_limited: "API rate limit exceeded. Please try again later or reduce refresh interval.",
    ErrorCategory.forbidden: "API access forbidden. Please check your API key or permissions.",
    ErrorCategory.unauthorized: "API authentication failed. Please check your API key.",
    ErrorCategory.server_error: "API server error. Please try again later.",
    ErrorCategory.timeout: TIMEOUT_MESSAGE,
}


@dataclasses.dataclass
class ClassifiedError:
    category: str
    message: str


class WidgetFetchError(Exception):
    """A widget API call failed; ``category`` is one of ErrorCategory."""

    def __init__(self, message: str, category: str = ErrorCategory.generic, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.category = category
        self.status_code = status_code


def classify_status(status_code: int | None, fallback_message: str | None = None) -> ClassifiedError:
    """Map an upstream HTTP status to the error category shown to users."""
    if status_code == 429:
        category = ErrorCategory.rate_limited
    elif status_code == 403:
        category = ErrorCategory.forbidden
    elif status_code == 401:
        category = ErrorCategory.unauthorized
    elif status_code == 408:
        category = ErrorCategory.timeout
    elif status_code is not None and status_code >= 500:
        category = ErrorCategory.server_error
    else:
        if status_code is not None:
            message = f"API request failed: {status_code}"
        elif fallback_message:
            message = fallback_message
        else:
            message = "Failed to fetch data from API"
        return ClassifiedError(ErrorCategory.generic, message)
    return ClassifiedError(category, ERROR_MESSAGES[category])


class WidgetBindingService:
    def __init__(self, fetcher: Callable[[str], Any] | None = None, response_cache: ResponseCache | None = None):
        """
        Args:
            fetcher: Callable taking a URL and returning parsed JSON, raising
                ProxyError on failure. Defaults to WidgetProxy.
            response_cache: Shared response cache. Defaults to a cache built
                from the WIDGET_CACHE_* settings.
        """
        self.fetcher = fetcher or WidgetProxy()
        if response_cache is None:
            response_cache = ResponseCache(
                ttl_seconds=getattr(settings, "WIDGET_CACHE_TTL", DEFAULT_TTL_SECONDS),
                max_entries=getattr(settings, "WIDGET_CACHE_MAX_ENTRIES", DEFAULT_MAX_ENTRIES),
            )
        self.cache = response_cache

    def test_endpoint(self, url: str) -> EndpointTestResult:
        """Fetch a candidate API and discover its fields. Never raises."""
        try:
            data = self._cached_fetch(f"{TEST_KEY_PREFIX}:{url}", url)
        except WidgetFetchError as e:
            return EndpointTestResult(success=False, error=e.message, category=e.category)

        fields = infer_fields(data)
        logger.info(f"Tested widget API {url}: {len(fields)} fields discovered")
        return EndpointTestResult(success=True, data=data, fields=fields)

    def fetch_widget_data(self, url: str) -> Any:
        """
        Fetch live data for a configured widget.

        Raises:
            WidgetFetchError: with the classified category and message
        """
        return self._cached_fetch(f"{LIVE_KEY_PREFIX}:{url}", url)

    def clear_cache(self) -> None:
        self.cache.clear()

    def _cached_fetch(self, key: str, url: str) -> Any:
        entry = self.cache.get(key)
        if entry is not None:
            logger.debug(f"Cache HIT for {key}")
            return entry.value

        logger.debug(f"Cache MISS for {key}")
        try:
            data = self.fetcher(url)
        except ProxyError as e:
            classified = classify_status(e.status_code, fallback_message=e.message)
            logger.warning(f"Widget API fetch failed for {url}: {classified.category} ({e.message})")
            raise WidgetFetchError(classified.message, classified.category, e.status_code) from e

        self.cache.set(key, data)
        return data


@cache
def get_binding_service() -> WidgetBindingService:
    """Process-wide service used by the API views and the refresh command."""
    return WidgetBindingService()
