import logging
import concurrent.futures
from typing import Any, Dict, List, Optional, Sequence
from pydantic import BaseModel
from .keywords import KeywordMatcher
from .models.news import Article
from .models.stocks import StockQuote
from .models.weather import WeatherReading
from .providers.base import NewsProvider, StockProvider, WeatherProvider
from .store.sqlite import DailyStore, date_key

logger = logging.getLogger(__name__)

NEWS_LIMIT = 5


def _fields(item: Any) -> Dict[str, Any]:
    if isinstance(item, BaseModel):
        return item.model_dump()
    return dict(item)


def empty_result() -> Dict[str, List[Any]]:
    return {"news": [], "weather": [], "stocks": []}


class DataAggregator:
    """
    Build the daily dashboard data for one date.

    CHECK_CACHE -> hit: read back from the store
                -> miss: fetch news -> (none: empty result, nothing stored)
                   -> extract keywords -> fetch weather + stocks concurrently
                   -> persist atomically -> read back from the store
    """

    def __init__(
        self,
        news: NewsProvider,
        weather: WeatherProvider,
        stocks: StockProvider,
        store: DailyStore,
        matcher: Optional[KeywordMatcher] = None,
    ):
        self.news = news
        self.weather = weather
        self.stocks = stocks
        self.store = store
        self.matcher = matcher or KeywordMatcher()

    def is_cached(self, date: str) -> bool:
        return self.store.has_date(date)

    def aggregate_data(self, date: str) -> Dict[str, List[Any]]:
        """
        Return {"news", "weather", "stocks"} records for `date` (YYYY-MM-DD).
        Provider failures only shrink the result; store failures propagate.
        """
        day = date_key(date)

        if self.store.has_date(day):
            logger.info(f"Cache hit: dashboard data for {day}")
            return self._read(day)

        logger.info(f"Fetching news for {day}")
        articles = self.news.fetch_news(day)
        if not articles:
            # not stored, so a later call retries the fetch
            logger.warning(f"No news articles fetched for {day}")
            return empty_result()

        locations = self.matcher.extract_locations(articles)
        tickers = list(self.matcher.extract_companies(articles).keys())
        logger.info(f"Derived locations={locations} tickers={tickers}")

        weather, quotes = self._fetch_related(locations, tickers)
        self._store(day, articles, weather, quotes)
        return self._read(day)

    def _fetch_related(self, locations: Sequence[str], tickers: Sequence[str]):
        # weather and stocks are independent; both must finish before persisting
        with concurrent.futures.ThreadPoolExecutor(max_workers=2) as executor:
            weather_future = executor.submit(self.weather.fetch_many, locations)
            stocks_future = executor.submit(self.stocks.fetch_many, tickers)
            return weather_future.result(), stocks_future.result()

    def _store(
        self,
        day: str,
        articles: Sequence[Article],
        weather: Sequence[WeatherReading],
        quotes: Sequence[StockQuote],
    ) -> None:
        with self.store.transaction():
            news_records = [
                self.store.insert("news", {**_fields(article), "fetched_for_date": day})
                for article in articles
            ]
            weather_records = [
                self.store.insert("weather", {**_fields(reading), "fetched_for_date": day})
                for reading in weather
            ]
            stock_records = [
                self.store.insert("stocks", {**_fields(quote), "fetched_for_date": day})
                for quote in quotes
            ]

            # every related record hangs off the first article only
            if news_records:
                first = news_records[0].id
                for record in weather_records:
                    self.store.insert_link(first, weather_id=record.id)
                for record in stock_records:
                    self.store.insert_link(first, stock_id=record.id)

        logger.info(
            f"Stored {len(news_records)} news, {len(weather_records)} weather, "
            f"{len(stock_records)} stocks for {day}"
        )

    def _read(self, day: str) -> Dict[str, List[Any]]:
        return {
            "news": self.store.query("news", day, limit=NEWS_LIMIT),
            "weather": self.store.query("weather", day),
            "stocks": self.store.query("stocks", day),
        }
