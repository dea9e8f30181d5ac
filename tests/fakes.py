import json
from pathlib import Path
import sys

import requests

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "dailyinfo" / "src"
sys.path.insert(0, str(SRC))

from dailyinfo.models.news import Article
from dailyinfo.models.stocks import StockQuote
from dailyinfo.models.weather import WeatherReading


def make_response(status: int = 200, payload=None, text: str = None) -> requests.Response:
    """Build a real requests.Response carrying a JSON (or raw text) body."""
    resp = requests.Response()
    resp.status_code = status
    body = text if text is not None else json.dumps(payload)
    resp._content = body.encode("utf-8")
    resp.encoding = "utf-8"
    return resp


class FakeNews:
    def __init__(self, articles=None):
        self.articles = list(articles or [])
        self.calls = []

    def fetch_news(self, date):
        self.calls.append(date)
        return list(self.articles)


class FakeWeather:
    def __init__(self, readings=None):
        self.readings = dict(readings or {})
        self.calls = []

    def fetch_one(self, city):
        return self.readings.get(city)

    def fetch_many(self, cities):
        self.calls.append(list(cities))
        return [self.readings[c] for c in cities if c in self.readings]


class FakeStocks:
    def __init__(self, quotes=None):
        self.quotes = dict(quotes or {})
        self.calls = []

    def fetch_many(self, tickers):
        self.calls.append(list(tickers))
        return [self.quotes[t] for t in tickers if t in self.quotes]


def article(headline, description=None, url="https://example.com/a", source="Example Wire"):
    return Article(
        headline=headline,
        description=description,
        url=url,
        source=source,
        published_at="2025-12-03T10:00:00Z",
    )


NEW_YORK = WeatherReading(location="New York", temperature=20.0, description="Sunny")
LONDON = WeatherReading(location="London", temperature=11.25, description="light rain")
AAPL = StockQuote(company_name="Apple Inc.", ticker_symbol="AAPL", price=175.23)
MSFT = StockQuote(company_name="Microsoft Corporation", ticker_symbol="MSFT", price=410.5)
