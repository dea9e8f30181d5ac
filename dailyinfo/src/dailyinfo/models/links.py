from typing import Optional
from pydantic import BaseModel, ConfigDict

class NewsLink(BaseModel):
    """
    Join row between a news item and a related weather or stock record.
    """
    model_config = ConfigDict(frozen=True)

    id: int
    news_id: int
    weather_id: Optional[int] = None
    stock_id: Optional[int] = None
