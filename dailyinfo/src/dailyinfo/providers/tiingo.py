import requests
import logging
from typing import Any, Dict, List, Optional, Sequence
from ..config import get_tiingo_key, get_http_timeout
from ..errors import ProviderError
from ..models.stocks import StockQuote
from ..reference import ReferenceData, get_reference

logger = logging.getLogger(__name__)

BASE_URL = "https://api.tiingo.com"

def latest_price(bar: Dict[str, Any]) -> Any:
    """Prefer the close, then the last trade, else 0."""
    for key in ("close", "last"):
        value = bar.get(key)
        if value is not None:
            return value
    return 0

class TiingoProvider:
    """
    End-of-day quotes from Tiingo.
    Reference: https://www.tiingo.com/documentation/end-of-day
    """

    def __init__(self, api_key: Optional[str] = None, timeout: Optional[float] = None,
                 reference: Optional[ReferenceData] = None, session: Optional[requests.Session] = None):
        self.api_key = api_key if api_key is not None else get_tiingo_key()
        self.timeout = timeout or get_http_timeout()
        self.reference = reference or get_reference()
        self.http = session or requests

    def _request(self, ticker: str) -> List[Dict[str, Any]]:
        if not self.api_key:
            raise ProviderError(
                "TIINGO_API_KEY is missing or invalid. "
                "Please add it to your .env file."
            )

        try:
            resp = self.http.get(
                f"{BASE_URL}/tiingo/daily/{ticker}/prices",
                params={"token": self.api_key},
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise ProviderError(f"Tiingo request failed: {e}", {"ticker": ticker})

        if not resp.ok:
            raise ProviderError(
                f"Tiingo returned HTTP {resp.status_code}",
                {"ticker": ticker, "status": resp.status_code},
            )

        try:
            data = resp.json()
        except ValueError as e:
            raise ProviderError(f"Tiingo returned invalid JSON: {e}", {"ticker": ticker})
        if not isinstance(data, list):
            raise ProviderError("Tiingo response is not a list", {"ticker": ticker})
        return data

    def fetch_one(self, ticker: str) -> Optional[StockQuote]:
        """Latest quote for `ticker`, or None when unavailable."""
        try:
            bars = self._request(ticker)
            if not bars:
                logger.warning(f"No price data for {ticker}")
                return None
            # Tiingo item: {"date": "...", "close": 175.23, "last": ..., ...}
            return StockQuote(
                company_name=self.reference.company_name(ticker),
                ticker_symbol=ticker,
                price=latest_price(bars[0]),
            )
        except ProviderError as e:
            logger.warning(f"{e.message} {e.details}")
        except Exception as e:
            logger.error(f"Tiingo processing failed for {ticker}: {e}")
        return None

    def fetch_many(self, tickers: Sequence[str]) -> List[StockQuote]:
        """Quotes for every ticker that succeeded, in input order."""
        if not tickers:
            return []

        results = []
        for ticker in tickers:
            quote = self.fetch_one(ticker)
            if quote is not None:
                results.append(quote)
        return results
