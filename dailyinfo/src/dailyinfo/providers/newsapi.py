import requests
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional
from ..config import get_newsapi_key, get_http_timeout
from ..errors import ProviderError
from ..models.news import Article

logger = logging.getLogger(__name__)

BASE_URL = "https://newsapi.org/v2"

# NewsAPI requires a query; this matches almost every English article
BROAD_QUERY = "a OR the OR is"
PAGE_SIZE = 10

def _parse_published(value: Any) -> datetime:
    if isinstance(value, str) and value:
        try:
            # NewsAPI returns e.g. 2025-12-03T10:00:00Z
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            logger.warning(f"Unparseable publishedAt {value!r}, using current time")
    return datetime.now()

def normalize_article(item: Dict[str, Any]) -> Article:
    """Map one NewsAPI article object onto an Article."""
    # NewsAPI item: {
    #   "source": {"id": null, "name": "..."},
    #   "title": "...",
    #   "description": "...",
    #   "url": "...",
    #   "publishedAt": "2025-12-03T10:00:00Z",
    #   ...
    # }
    source = item.get("source") or {}
    return Article(
        headline=item.get("title") or "",
        description=item.get("description"),
        url=item.get("url") or "",
        source=(source.get("name") if isinstance(source, dict) else None) or "Unknown",
        published_at=_parse_published(item.get("publishedAt")),
    )

class NewsApiProvider:
    """
    Daily headlines from NewsAPI.
    Reference: https://newsapi.org/docs/endpoints/everything
    """

    def __init__(self, api_key: Optional[str] = None, timeout: Optional[float] = None,
                 session: Optional[requests.Session] = None):
        self.api_key = api_key if api_key is not None else get_newsapi_key()
        self.timeout = timeout or get_http_timeout()
        self.http = session or requests

    def _request(self, date: str) -> List[Dict[str, Any]]:
        if not self.api_key:
            raise ProviderError(
                "NEWS_API_KEY is missing or invalid. "
                "Please add it to your .env file."
            )

        params = {
            "apiKey": self.api_key,
            "q": BROAD_QUERY,
            "from": date,
            "to": date,
            "sortBy": "publishedAt",
            "pageSize": PAGE_SIZE,
            "language": "en",
        }

        try:
            resp = self.http.get(f"{BASE_URL}/everything", params=params, timeout=self.timeout)
        except requests.RequestException as e:
            raise ProviderError(f"NewsAPI request failed: {e}", {"date": date})

        if not resp.ok:
            raise ProviderError(
                f"NewsAPI returned HTTP {resp.status_code}",
                {"date": date, "status": resp.status_code, "body": resp.text[:500]},
            )

        try:
            data = resp.json()
        except ValueError as e:
            raise ProviderError(f"NewsAPI returned invalid JSON: {e}", {"date": date})

        articles = data.get("articles") if isinstance(data, dict) else None
        if not isinstance(articles, list):
            raise ProviderError("NewsAPI response has no articles", {"date": date})
        return articles

    def fetch_news(self, date: str) -> List[Article]:
        """
        Fetch up to 10 English articles published on `date`.
        Never raises: every failure is logged and yields [].
        """
        try:
            raw = self._request(date)
            return [normalize_article(item) for item in raw if isinstance(item, dict)]
        except ProviderError as e:
            logger.error(f"{e.message} {e.details}")
            return []
        except Exception as e:
            logger.error(f"NewsAPI processing failed for {date}: {e}")
            return []
