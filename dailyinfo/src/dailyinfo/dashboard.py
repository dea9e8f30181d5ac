from datetime import date, datetime, timedelta
from typing import Any, Dict, List, Optional
from .aggregator import DataAggregator
from .errors import ValidationError

WINDOW_DAYS = 7


def resolve_date(value: Optional[str], today: Optional[date] = None) -> date:
    """
    Parse a YYYY-MM-DD string and check it lies within the last week.
    An empty value means today.
    """
    today = today or date.today()
    if not value:
        return today

    try:
        day = date.fromisoformat(value.strip())
    except ValueError:
        raise ValidationError("Invalid date format.", {"date": value, "expected": "YYYY-MM-DD"})

    oldest = today - timedelta(days=WINDOW_DAYS - 1)
    if day < oldest or day > today:
        raise ValidationError(
            "We can only show data from the past week.",
            {"date": value, "oldest": oldest.isoformat(), "newest": today.isoformat()},
        )
    return day


def available_dates(today: Optional[date] = None) -> List[Dict[str, str]]:
    """The selectable days, newest first."""
    today = today or date.today()
    dates = []
    for i in range(WINDOW_DAYS):
        d = today - timedelta(days=i)
        dates.append({"label": d.strftime("%a %b %d, %Y"), "value": d.isoformat()})
    return dates


def _dump(records: List[Any]) -> List[Dict[str, Any]]:
    return [r.model_dump(mode="json") if hasattr(r, "model_dump") else dict(r) for r in records]


def build_dashboard(
    aggregator: DataAggregator,
    date_param: Optional[str] = None,
    *,
    today: Optional[date] = None,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """
    Validate the requested date, aggregate its data and attach the
    presentation metadata the dashboard page needs.
    """
    day = resolve_date(date_param, today=today)
    data = aggregator.aggregate_data(day.isoformat())

    return {
        "date": day.strftime("%b %d, %Y"),
        "dateParam": day.isoformat(),
        "news": _dump(data["news"]),
        "weather": _dump(data["weather"]),
        "stocks": _dump(data["stocks"]),
        "availableDates": available_dates(today),
        "lastUpdated": (now or datetime.now().astimezone()).isoformat(),
    }
