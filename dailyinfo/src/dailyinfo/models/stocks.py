from datetime import date
from decimal import Decimal
from pydantic import BaseModel, ConfigDict, field_validator
from .weather import to_two_places

class StockQuote(BaseModel):
    """
    Latest price for one ticker.
    """
    company_name: str
    ticker_symbol: str
    price: Decimal

    @field_validator("price", mode="before")
    @classmethod
    def _quantize(cls, v):
        return to_two_places(v)

class StockRecord(StockQuote):
    model_config = ConfigDict(frozen=True)

    id: int
    fetched_for_date: date
