"""
Market data for portfolio holdings.

No live quote source is wired in; ``MockMarketDataProvider`` serves prices
from a fixed table with a small random fluctuation so the dashboard behaves
like a live one. Quotes go through the same TTL cache the widget pipeline
uses.
"""

import datetime
import logging
import random
from zoneinfo import ZoneInfo

from django.conf import settings

from finboard.portfolio.types import FinancialData
from finboard.widgets.cache import ResponseCache

logger = logging.getLogger(__name__)

MARKET_TIMEZONE = ZoneInfo("Asia/Kolkata")
MARKET_OPEN = datetime.time(9, 15)
MARKET_CLOSE = datetime.time(15, 30)

PRICE_FLUCTUATION = 0.01

# symbol: (cmp, P/E, latest earnings)
BASE_QUOTES = {
    "KPIT TECH": (1250.75, 45.2, 28.50),
    "TATA TECH": (850.25, 38.5, 22.75),
    "INFY": (1450.50, 22.8, 78.25),
    "HAPPIEST MINDS": (650.00, 35.2, 18.50),
    "EASEMYTRIP": (420.75, 28.5, 15.25),
    "DMART": (3800.00, 65.8, 58.90),
    "TATA CONSUMER": (1250.50, 42.3, 29.75),
    "PIDILITE": (2850.75, 55.2, 52.50),
    "TATA POWER": (320.50, 18.5, 17.25),
    "KPI GREEN": (1850.00, 28.7, 65.50),
    "SUZLON": (45.75, 15.2, 3.25),
    "GENSOL": (1250.00, 32.5, 38.75),
    "HARIOM PIPES": (650.25, 25.8, 25.50),
    "ASTRAL": (1850.50, 45.2, 42.75),
    "POLYCAB": (4850.75, 38.5, 125.50),
    "CLEAN SCIENCE": (1850.00, 42.8, 43.25),
    "DEEPAK NITRITE": (2250.50, 35.5, 63.50),
    "FINE ORGANIC": (2850.75, 28.2, 102.25),
    "GRAVITA": (1250.00, 32.8, 38.75),
    "SBI LIFE": (1450.25, 25.5, 58.50),
    "RELIANCE": (2450.75, 18.5, 125.50),
    "TCS": (3850.25, 25.2, 95.75),
    "HDFC": (1650.00, 19.8, 112.50),
    "ICICIBANK": (950.75, 16.5, 68.75),
    "WIPRO": (450.25, 20.1, 45.50),
    "TATAMOTORS": (750.50, 28.5, 35.25),
    "AXISBANK": (850.00, 17.2, 58.90),
}


class MarketDataError(Exception):
    pass


def is_market_open(at: datetime.datetime | None = None) -> bool:
    """NSE trading hours, Monday to Friday, in IST. Naive datetimes are taken as IST."""
    if at is None:
        at = datetime.datetime.now(MARKET_TIMEZONE)
    elif at.tzinfo is None:
        at = at.replace(tzinfo=MARKET_TIMEZONE)
    else:
        at = at.astimezone(MARKET_TIMEZONE)

    if at.weekday() >= 5:
        return False
    return MARKET_OPEN <= at.time().replace(second=0, microsecond=0) <= MARKET_CLOSE


class MockMarketDataProvider:
    def __init__(self, response_cache: ResponseCache | None = None, rng: random.Random | None = None):
        if response_cache is None:
            response_cache = ResponseCache(
                ttl_seconds=getattr(settings, "PORTFOLIO_CACHE_TTL", 30),
                max_entries=getattr(settings, "PORTFOLIO_CACHE_MAX_ENTRIES", 100),
            )
        self.cache = response_cache
        self.rng = rng or random.Random()

    def __call__(self, symbol: str) -> FinancialData:
        return self.fetch(symbol)

    def fetch(self, symbol: str) -> FinancialData:
        """
        Current quote for a symbol.

        Raises:
            MarketDataError: for a blank symbol
        """
        symbol = (symbol or "").strip().upper()
        if not symbol:
            raise MarketDataError("Symbol is required")

        entry = self.cache.get(symbol)
        if entry is not None:
            logger.debug(f"Cache HIT for quote {symbol}")
            return entry.value

        quote = self._quote(symbol)
        self.cache.set(symbol, quote)
        return quote

    def _quote(self, symbol: str) -> FinancialData:
        if symbol in BASE_QUOTES:
            cmp, pe_ratio, earnings = BASE_QUOTES[symbol]
        else:
            logger.info(f"No base quote for {symbol}, generating one")
            cmp = self.rng.uniform(100, 5100)
            pe_ratio = self.rng.uniform(10, 40)
            earnings = self.rng.uniform(50, 250)

        fluctuation = self.rng.uniform(-PRICE_FLUCTUATION, PRICE_FLUCTUATION)
        return FinancialData(
            cmp=round(cmp * (1 + fluctuation), 2),
            pe_ratio=round(pe_ratio, 1),
            latest_earnings=round(earnings, 2),
        )
