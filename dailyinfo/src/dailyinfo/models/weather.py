from datetime import date
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from pydantic import BaseModel, ConfigDict, field_validator

TWO_PLACES = Decimal("0.01")

def to_two_places(value) -> Decimal:
    """Quantize floats, ints and numeric strings to a 2dp Decimal."""
    if value is None:
        value = 0
    if isinstance(value, float):
        value = repr(value)
    try:
        return Decimal(str(value)).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise ValueError(f"not a number: {value!r}")

class WeatherReading(BaseModel):
    """
    Current conditions for one location (metric units).
    """
    location: str
    temperature: Decimal
    description: str = "Unknown"

    @field_validator("temperature", mode="before")
    @classmethod
    def _quantize(cls, v):
        return to_two_places(v)

class WeatherRecord(WeatherReading):
    model_config = ConfigDict(frozen=True)

    id: int
    fetched_for_date: date
