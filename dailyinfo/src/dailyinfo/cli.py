import sys
import json
import click
import logging
from .errors import format_error
from .logging import configure_logging
from .aggregator import DataAggregator
from .config import get_db_path
from .dashboard import build_dashboard, available_dates, resolve_date
from .keywords import KeywordMatcher
from .models.news import Article
from .providers.newsapi import NewsApiProvider
from .providers.openweather import OpenWeatherProvider
from .providers.tiingo import TiingoProvider
from .store.sqlite import DailyStore

# Configure logging at module level
configure_logging()
logger = logging.getLogger(__name__)

VERSION = "0.1.0"


def build_aggregator(db_path: str) -> DataAggregator:
    """Wire the real providers to a store at `db_path`."""
    return DataAggregator(
        news=NewsApiProvider(),
        weather=OpenWeatherProvider(),
        stocks=TiingoProvider(),
        store=DailyStore(db_path),
    )


@click.group()
@click.option("--verbose", is_flag=True, help="Enable debug logging")
def cli(verbose):
    """dailyinfo: daily news, weather and stocks dashboard."""
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)


@cli.command()
@click.option("--date", "date_param", required=False, help="Dashboard date (YYYY-MM-DD, within the past week)")
@click.option("--db", "db_path", default=None, help="SQLite database path (default: DAILYINFO_DB_PATH or in-memory)")
def dashboard(date_param, db_path):
    """
    Aggregate and print the dashboard for a date.
    Stored dates are served without calling any provider.
    """
    day = resolve_date(date_param)
    aggregator = build_aggregator(db_path or get_db_path())
    cached = aggregator.is_cached(day.isoformat())

    payload = build_dashboard(aggregator, day.isoformat())
    logger.info(
        f"Dashboard for {payload['dateParam']}: {len(payload['news'])} news, "
        f"{len(payload['weather'])} weather, {len(payload['stocks'])} stocks"
    )
    _print_json(payload, cached=cached)


@cli.command()
def dates():
    """List the dates the dashboard can show."""
    _print_json(available_dates())


@cli.command()
@click.option("--text", required=True, help="Headline text to scan")
@click.option("--description", default="", help="Optional description text")
def keywords(text, description):
    """Show the locations and tickers a headline would map to."""
    matcher = KeywordMatcher()
    article = Article(headline=text, description=description or None)
    _print_json({
        "locations": matcher.extract_locations([article]),
        "companies": matcher.extract_companies([article]),
    })


@cli.command()
def version():
    """Print version information."""
    _print_json({"version": VERSION})


def _print_json(data, cached=False):
    """Helper to print standard JSON envelope."""
    payload = {
        "ok": True,
        "data": data,
        "meta": {
            "version": 1,
            "cached": cached
        }
    }
    click.echo(json.dumps(payload, indent=2, default=str))


def main():
    """Entry point for the CLI."""
    try:
        cli(standalone_mode=False)
    except Exception as e:
        if isinstance(e, click.exceptions.Exit):
            sys.exit(e.exit_code)
        if isinstance(e, click.exceptions.Abort):
            sys.exit(130)

        print(format_error(e))
        sys.exit(1)

if __name__ == "__main__":
    main()
