from datetime import date, datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

class Article(BaseModel):
    """
    Normalized news article as returned by a news provider.
    Carries no date of its own; the caller supplies fetched_for_date.
    """
    headline: str = ""
    description: Optional[str] = None
    url: str = ""
    source: str = "Unknown"
    published_at: datetime = Field(default_factory=datetime.now)

class NewsRecord(Article):
    """
    Stored news item.
    """
    model_config = ConfigDict(frozen=True)

    id: int
    fetched_for_date: date
