"""Provider interfaces consumed by the aggregator.

Every implementation must degrade instead of raising: failures are logged
inside the adapter and surface as an empty list or a missing item.
"""

from __future__ import annotations

from typing import List, Optional, Protocol, Sequence

from ..models.news import Article
from ..models.stocks import StockQuote
from ..models.weather import WeatherReading


class NewsProvider(Protocol):
    def fetch_news(self, date: str) -> List[Article]:
        """Articles published on `date` (YYYY-MM-DD); [] on any failure."""
        ...


class WeatherProvider(Protocol):
    def fetch_one(self, city: str) -> Optional[WeatherReading]:
        """Current weather for `city`, or None on failure."""
        ...

    def fetch_many(self, cities: Sequence[str]) -> List[WeatherReading]:
        """Successful readings only, in input order."""
        ...


class StockProvider(Protocol):
    def fetch_many(self, tickers: Sequence[str]) -> List[StockQuote]:
        """Successful quotes only, in input order."""
        ...
