"""
Outbound HTTP fetch for widget APIs.

Widgets point at arbitrary third-party URLs, so every call goes through this
proxy: it restricts schemes (https, or plain http to loopback for
development), bounds the request with a timeout and turns every failure into
a ProxyError carrying an HTTP-style status code.
"""

import logging
from typing import Any
from urllib.parse import urlsplit

import httpx
import sentry_sdk
from django.conf import settings

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10
DEFAULT_USER_AGENT = "Finance-Dashboard/1.0"
LOOPBACK_HOSTS = ("localhost", "127.0.0.1")

TIMEOUT_MESSAGE = "Request timeout - API took too long to respond"


class ProxyError(Exception):
    """Raised when a widget API cannot be fetched."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def validate_url(url: Any) -> str:
    if not url or not isinstance(url, str):
        raise ProxyError("Invalid URL provided", 400)

    try:
        parts = urlsplit(url)
        hostname = parts.hostname
    except ValueError:
        raise ProxyError("Invalid URL format", 400)
    if not parts.scheme or not hostname:
        raise ProxyError("Invalid URL format", 400)

    is_loopback = hostname in LOOPBACK_HOSTS or hostname.startswith("127.")
    if parts.scheme != "https" and not (parts.scheme == "http" and is_loopback):
        raise ProxyError("Only HTTPS URLs are allowed (or localhost for development)", 400)
    return url


class WidgetProxy:
    def __init__(self, timeout: float | None = None, user_agent: str | None = None):
        self.timeout = timeout if timeout is not None else getattr(settings, "WIDGET_PROXY_TIMEOUT", DEFAULT_TIMEOUT)
        self.user_agent = user_agent or getattr(settings, "WIDGET_PROXY_USER_AGENT", DEFAULT_USER_AGENT)

    def __call__(self, url: str) -> Any:
        return self.get_json(url)

    def get_json(self, url: str) -> Any:
        """
        GET a URL and return its parsed JSON body.

        Raises:
            ProxyError: invalid URL (400), non-2xx response (upstream status),
                timeout (408), transport failure or non-JSON body (502)
        """
        validate_url(url)
        headers = {"Accept": "application/json", "User-Agent": self.user_agent}

        try:
            response = httpx.get(url, headers=headers, timeout=self.timeout, follow_redirects=True)
            response.raise_for_status()
        except httpx.TimeoutException as e:
            logger.warning(f"Widget proxy timeout after {self.timeout}s for {url}")
            raise ProxyError(TIMEOUT_MESSAGE, 408) from e
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.info(f"Widget API returned {status} for {url}")
            raise ProxyError(f"API returned {status}: {e.response.reason_phrase}", status) from e
        except httpx.HTTPError as e:
            logger.error(f"Widget proxy error for {url}: {e}", exc_info=True)
            sentry_sdk.capture_exception(e)
            raise ProxyError(str(e) or "Failed to fetch data from API", 502) from e

        try:
            return response.json()
        except ValueError as e:
            logger.warning(f"Widget API at {url} did not return JSON")
            raise ProxyError("API did not return valid JSON", 502) from e
