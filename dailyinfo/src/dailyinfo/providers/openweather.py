import requests
import logging
from typing import Any, Dict, List, Optional, Sequence
from ..cache.memory import MemoryCache
from ..config import get_openweather_key, get_http_timeout
from ..errors import ProviderError
from ..models.weather import WeatherReading

logger = logging.getLogger(__name__)

BASE_URL = "https://api.openweathermap.org/data/2.5"

def normalize_weather(city: str, data: Dict[str, Any]) -> WeatherReading:
    # OpenWeatherMap current weather: {
    #   "name": "New York",
    #   "main": {"temp": 22.5, ...},
    #   "weather": [{"description": "clear sky", ...}],
    #   ...
    # }
    main = data.get("main") or {}
    conditions = data.get("weather") or []
    first = conditions[0] if conditions and isinstance(conditions[0], dict) else {}
    return WeatherReading(
        location=data.get("name") or city,
        temperature=main.get("temp", 0) if isinstance(main, dict) else 0,
        description=first.get("description") or "Unknown",
    )

class OpenWeatherProvider:
    """
    Current conditions from OpenWeatherMap, in Celsius.

    Successful lookups are kept in a MemoryCache owned by this instance and
    keyed by the requested city name; a cached city is never requested again
    while the instance lives.
    """

    def __init__(self, api_key: Optional[str] = None, timeout: Optional[float] = None,
                 cache: Optional[MemoryCache] = None, session: Optional[requests.Session] = None):
        self.api_key = api_key if api_key is not None else get_openweather_key()
        self.timeout = timeout or get_http_timeout()
        self.cache = cache if cache is not None else MemoryCache("weather")
        self.http = session or requests

    def _request(self, city: str) -> Dict[str, Any]:
        if not self.api_key:
            raise ProviderError(
                "OPENWEATHER_API_KEY is missing or invalid. "
                "Please add it to your .env file."
            )

        params = {
            "q": city,
            "appid": self.api_key,
            "units": "metric",
        }
        try:
            resp = self.http.get(f"{BASE_URL}/weather", params=params, timeout=self.timeout)
        except requests.RequestException as e:
            raise ProviderError(f"OpenWeatherMap request failed: {e}", {"city": city})

        if not resp.ok:
            raise ProviderError(
                f"OpenWeatherMap returned HTTP {resp.status_code}",
                {"city": city, "status": resp.status_code},
            )

        try:
            data = resp.json()
        except ValueError as e:
            raise ProviderError(f"OpenWeatherMap returned invalid JSON: {e}", {"city": city})
        if not isinstance(data, dict):
            raise ProviderError("OpenWeatherMap response is not an object", {"city": city})
        return data

    def fetch_one(self, city: str) -> Optional[WeatherReading]:
        """Weather for one city, or None on failure. Failures are not cached."""
        cached = self.cache.get(city)
        if cached is not None:
            logger.info(f"Cache hit: weather for {city}")
            return cached

        try:
            reading = normalize_weather(city, self._request(city))
        except ProviderError as e:
            logger.warning(f"{e.message} {e.details}")
            return None
        except Exception as e:
            logger.error(f"OpenWeatherMap processing failed for {city}: {e}")
            return None

        self.cache.put(city, reading)
        return reading

    def fetch_many(self, cities: Sequence[str]) -> List[WeatherReading]:
        """Readings for every city that succeeded, in input order."""
        results = []
        for city in cities:
            reading = self.fetch_one(city)
            if reading is not None:
                results.append(reading)
        return results
