import os
import logging
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = ":memory:"
DEFAULT_HTTP_TIMEOUT = 10.0

# Placeholder left in .env.example
_TEMPLATE_VALUE = "your_key_here"

def load_env_file(path: str = ".env"):
    """
    Load environment variables from a .env file into os.environ.
    Does not override existing strings.
    """
    p = Path(path)
    if not p.exists():
        return

    try:
        with open(p) as f:
            for line in f:
                line = line.strip()
                if not line or line.startswith('#'):
                    continue
                if '=' in line:
                    key, val = line.split('=', 1)
                    key = key.strip()
                    val = val.strip()
                    if key not in os.environ:
                        os.environ[key] = val
    except OSError as e:
        logger.warning(f"Failed to load .env: {e}")

# Load on import
load_env_file()

def _get_key(name: str) -> Optional[str]:
    key = os.environ.get(name)
    if not key or key == _TEMPLATE_VALUE:
        return None
    return key

def get_newsapi_key() -> Optional[str]:
    """NewsAPI key, or None when missing."""
    return _get_key("NEWS_API_KEY")

def get_openweather_key() -> Optional[str]:
    """OpenWeatherMap key, or None when missing."""
    return _get_key("OPENWEATHER_API_KEY")

def get_tiingo_key() -> Optional[str]:
    """Tiingo key, or None when missing."""
    return _get_key("TIINGO_API_KEY")

def get_db_path() -> str:
    return os.environ.get("DAILYINFO_DB_PATH") or DEFAULT_DB_PATH

def get_http_timeout() -> float:
    """Per-request timeout in seconds for every outbound provider call."""
    raw = os.environ.get("DAILYINFO_HTTP_TIMEOUT")
    if not raw:
        return DEFAULT_HTTP_TIMEOUT
    try:
        value = float(raw)
    except ValueError:
        logger.warning(f"Ignoring invalid DAILYINFO_HTTP_TIMEOUT={raw!r}")
        return DEFAULT_HTTP_TIMEOUT
    return value if value > 0 else DEFAULT_HTTP_TIMEOUT

def get_reference_path() -> Optional[str]:
    return os.environ.get("DAILYINFO_REFERENCE_PATH") or None
