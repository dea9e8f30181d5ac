from typing import Any, Dict, Iterable, List, Mapping, Optional
from .reference import ReferenceData, get_reference

MAX_LOCATIONS = 3
MAX_COMPANIES = 5


def _field(article: Any, name: str) -> str:
    if isinstance(article, Mapping):
        value = article.get(name)
    else:
        value = getattr(article, name, None)
    return value or ""


def _search_text(article: Any) -> str:
    return f"{_field(article, 'headline')} {_field(article, 'description')}"


def _top(counts: Dict[str, int], limit: int) -> List[tuple]:
    # sorted() is stable, so ties keep first-seen order
    return sorted(counts.items(), key=lambda kv: kv[1], reverse=True)[:limit]


class KeywordMatcher:
    """
    Infer locations and company tickers mentioned in a batch of articles.

    Each article contributes at most one hit per keyword: the test is a
    case-insensitive substring match over headline + description.
    """

    def __init__(self, reference: Optional[ReferenceData] = None):
        self.reference = reference or get_reference()
        self._cities = [(city, city.lower()) for city in self.reference.cities]
        self._companies = [
            (name.lower(), ticker) for name, ticker in self.reference.companies.items()
        ]

    def extract_locations(self, articles: Iterable[Any]) -> List[str]:
        """Top 3 cities by number of articles mentioning them."""
        counts: Dict[str, int] = {}
        for article in articles:
            text = _search_text(article).lower()
            for city, needle in self._cities:
                if needle in text:
                    counts[city] = counts.get(city, 0) + 1

        top = [city for city, _ in _top(counts, MAX_LOCATIONS)]
        if not top:
            return [self.reference.default_location]
        return top

    def extract_companies(self, articles: Iterable[Any]) -> Dict[str, int]:
        """
        Top 5 tickers by number of matching articles, as ticker -> count.
        Company aliases sharing a ticker (Facebook/Meta) add to one counter.
        """
        counts: Dict[str, int] = {}
        for article in articles:
            text = _search_text(article).lower()
            for needle, ticker in self._companies:
                if needle in text:
                    counts[ticker] = counts.get(ticker, 0) + 1

        top = dict(_top(counts, MAX_COMPANIES))
        if not top:
            return {self.reference.default_ticker: 1}
        return top
