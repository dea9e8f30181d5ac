from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional, Tuple
import yaml
from .config import get_reference_path
from .errors import ValidationError

DEFAULT_REFERENCE_PATH = Path(__file__).resolve().parent / "data" / "reference.yaml"


@dataclass(frozen=True)
class ReferenceData:
    """
    Immutable keyword tables.
    Iteration order of `cities` and `companies` is the scan order of the matcher.
    """
    cities: Tuple[str, ...]
    companies: Mapping[str, str]
    ticker_names: Mapping[str, str]
    default_location: str = "New York"
    default_ticker: str = "SPY"

    def company_name(self, ticker: str) -> str:
        return self.ticker_names.get(ticker, ticker)


def _string_list(data: dict, key: str) -> Tuple[str, ...]:
    values = data.get(key)
    if not isinstance(values, list) or not values:
        raise ValidationError(f"'{key}' must be a non-empty list.")
    norm = []
    for v in values:
        if not isinstance(v, str) or not v.strip():
            raise ValidationError(f"All '{key}' entries must be non-empty strings.")
        norm.append(v.strip())
    return tuple(norm)


def _string_map(data: dict, key: str, *, required: bool = True) -> Mapping[str, str]:
    values = data.get(key)
    if values is None and not required:
        return MappingProxyType({})
    if not isinstance(values, dict) or (required and not values):
        raise ValidationError(f"'{key}' must be a non-empty mapping.")
    norm = {}
    for k, v in values.items():
        if not isinstance(k, str) or not isinstance(v, str) or not k.strip() or not v.strip():
            raise ValidationError(f"'{key}' keys and values must be non-empty strings.")
        norm[k.strip()] = v.strip().upper()
    return MappingProxyType(norm)


def load_reference(path: Optional[str] = None) -> ReferenceData:
    """
    Load keyword reference tables from YAML.
    Expected shape:
      cities: [New York, London]
      companies: {Apple: AAPL}
      ticker_names: {AAPL: Apple Inc.}
    """
    p = Path(path) if path else DEFAULT_REFERENCE_PATH
    if not p.exists():
        raise ValidationError(f"Reference file not found: {p}")

    try:
        data = yaml.safe_load(p.read_text()) or {}
    except yaml.YAMLError as e:
        raise ValidationError(f"Invalid reference YAML: {e}")

    if not isinstance(data, dict):
        raise ValidationError("Reference file must contain a mapping.")

    names = data.get("ticker_names") or {}
    if not isinstance(names, dict):
        raise ValidationError("'ticker_names' must be a mapping.")

    return ReferenceData(
        cities=_string_list(data, "cities"),
        companies=_string_map(data, "companies"),
        # display names keep their case
        ticker_names=MappingProxyType({str(k).upper(): str(v) for k, v in names.items()}),
        default_location=str(data.get("default_location") or "New York"),
        default_ticker=str(data.get("default_ticker") or "SPY").upper(),
    )


@lru_cache(maxsize=None)
def _load_cached(path: Optional[str]) -> ReferenceData:
    return load_reference(path)


def get_reference() -> ReferenceData:
    """Reference tables for this process, parsed once per path."""
    return _load_cached(get_reference_path())
