import json
import traceback
from typing import Any, Dict

class DailyInfoError(Exception):
    """Base exception for dailyinfo"""
    def __init__(self, message: str, details: dict = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

class ValidationError(DailyInfoError):
    """Bad input: dates outside the window, malformed reference data"""
    pass

class ProviderError(DailyInfoError):
    """External provider errors; adapters log these and degrade"""
    pass

class StoreError(DailyInfoError):
    """Persistence errors; always propagated to the caller"""
    pass

class UnknownError(DailyInfoError):
    """Unexpected errors"""
    pass

def error_payload(e: Exception) -> Dict[str, Any]:
    """Error envelope: {"ok": false, "error": {...}, "meta": {...}}."""
    if isinstance(e, DailyInfoError):
        error = {"type": e.__class__.__name__, "message": e.message, "details": e.details}
    else:
        error = {
            "type": UnknownError.__name__,
            "message": str(e),
            "details": {"traceback": traceback.format_exc().splitlines()},
        }
    return {"ok": False, "error": error, "meta": {"version": 1}}

def format_error(e: Exception) -> str:
    return json.dumps(error_payload(e), indent=2, default=str)
