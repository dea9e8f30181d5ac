import sqlite3
import logging
import threading
from contextlib import contextmanager
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple, Type
from pydantic import BaseModel
from ..errors import StoreError, ValidationError
from ..models.links import NewsLink
from ..models.news import NewsRecord
from ..models.stocks import StockRecord
from ..models.weather import WeatherRecord

logger = logging.getLogger(__name__)

# Decimal columns are TEXT so two-place values round-trip exactly
SCHEMA = """
CREATE TABLE IF NOT EXISTS news (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    headline TEXT NOT NULL,
    description TEXT,
    url TEXT NOT NULL,
    source TEXT NOT NULL,
    published_at TIMESTAMP NOT NULL,
    fetched_for_date DATE NOT NULL,
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);
CREATE INDEX IF NOT EXISTS news_fetched_for_date_index ON news (fetched_for_date);

CREATE TABLE IF NOT EXISTS weather (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    location TEXT NOT NULL,
    temperature TEXT NOT NULL,
    description TEXT NOT NULL,
    fetched_for_date DATE NOT NULL,
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);
CREATE INDEX IF NOT EXISTS weather_fetched_for_date_index ON weather (fetched_for_date);

CREATE TABLE IF NOT EXISTS stocks (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    company_name TEXT NOT NULL,
    ticker_symbol TEXT NOT NULL,
    price TEXT NOT NULL,
    fetched_for_date DATE NOT NULL,
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);
CREATE INDEX IF NOT EXISTS stocks_fetched_for_date_index ON stocks (fetched_for_date);

CREATE TABLE IF NOT EXISTS news_related_data (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    news_id INTEGER NOT NULL REFERENCES news (id) ON DELETE CASCADE,
    weather_id INTEGER REFERENCES weather (id) ON DELETE CASCADE,
    stock_id INTEGER REFERENCES stocks (id) ON DELETE CASCADE,
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);
CREATE INDEX IF NOT EXISTS news_related_data_news_id_index ON news_related_data (news_id);
"""

# entity name -> (table, record model, writable columns)
ENTITIES: Dict[str, Tuple[str, Type[BaseModel], Tuple[str, ...]]] = {
    "news": (
        "news",
        NewsRecord,
        ("headline", "description", "url", "source", "published_at", "fetched_for_date"),
    ),
    "weather": (
        "weather",
        WeatherRecord,
        ("location", "temperature", "description", "fetched_for_date"),
    ),
    "stocks": (
        "stocks",
        StockRecord,
        ("company_name", "ticker_symbol", "price", "fetched_for_date"),
    ),
}


def _to_sql(value: Any) -> Any:
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return value


def date_key(value: Any) -> str:
    if isinstance(value, (date, datetime)):
        return value.isoformat()[:10]
    try:
        return date.fromisoformat(str(value)[:10]).isoformat()
    except ValueError:
        raise ValidationError(f"Invalid date: {value!r}", {"expected": "YYYY-MM-DD"})


class DailyStore:
    """
    Date-partitioned store for news, weather and stock records plus the
    news_related_data join table, backed by SQLite.

    One connection is held for the lifetime of the store so that ':memory:'
    databases survive between calls. All access is serialized by a lock.
    """

    def __init__(self, db_path: str = ":memory:"):
        self.db_path = db_path
        self._lock = threading.RLock()
        self._depth = 0
        try:
            self._conn = sqlite3.connect(db_path, isolation_level=None, check_same_thread=False)
            self._conn.row_factory = sqlite3.Row
            self._conn.execute("PRAGMA foreign_keys = ON")
            self._conn.executescript(SCHEMA)
        except sqlite3.Error as e:
            logger.error(f"Failed to init store at {db_path}: {e}")
            raise StoreError(f"Failed to open store: {e}", {"db_path": db_path})

    def close(self):
        with self._lock:
            self._conn.close()

    @contextmanager
    def transaction(self) -> Iterator["DailyStore"]:
        """
        Group writes into one atomic unit: commit on success, roll back on
        any exception. Nested calls join the outermost transaction.
        """
        with self._lock:
            outermost = self._depth == 0
            if outermost:
                self._execute("BEGIN")
            self._depth += 1
            try:
                yield self
            except BaseException:
                self._depth -= 1
                if outermost and self._conn.in_transaction:
                    logger.warning("Rolling back store transaction")
                    self._conn.execute("ROLLBACK")
                raise
            self._depth -= 1
            if outermost:
                self._execute("COMMIT")

    def _execute(self, sql: str, params: Tuple = ()) -> sqlite3.Cursor:
        try:
            return self._conn.execute(sql, params)
        except sqlite3.Error as e:
            raise StoreError(f"Store operation failed: {e}", {"sql": sql.split("(")[0].strip()})

    def _entity(self, entity: str) -> Tuple[str, Type[BaseModel], Tuple[str, ...]]:
        try:
            return ENTITIES[entity]
        except KeyError:
            raise ValidationError(f"Unknown entity type: {entity}", {"allowed": sorted(ENTITIES)})

    def query(self, entity: str, fetched_for_date: Any, limit: Optional[int] = None) -> List[BaseModel]:
        """Records stored for a date, in insertion order."""
        table, model, columns = self._entity(entity)
        sql = f"SELECT id, {', '.join(columns)} FROM {table} WHERE fetched_for_date = ? ORDER BY id"
        params: Tuple = (date_key(fetched_for_date),)
        if limit is not None:
            sql += " LIMIT ?"
            params += (int(limit),)
        with self._lock:
            rows = self._execute(sql, params).fetchall()
        return [model(**dict(row)) for row in rows]

    def has_date(self, fetched_for_date: Any) -> bool:
        """A date counts as cached once at least one news item exists for it."""
        with self._lock:
            row = self._execute(
                "SELECT 1 FROM news WHERE fetched_for_date = ? LIMIT 1",
                (date_key(fetched_for_date),),
            ).fetchone()
        return row is not None

    def insert(self, entity: str, record: Any) -> BaseModel:
        """Insert one record (mapping or model) and return it with its id."""
        table, model, columns = self._entity(entity)
        values: Mapping[str, Any] = record.model_dump() if isinstance(record, BaseModel) else record
        if "fetched_for_date" not in values:
            raise ValidationError(f"{entity} record needs fetched_for_date")

        fields = dict(values)
        fields["fetched_for_date"] = date_key(fields["fetched_for_date"])
        # validate before touching the database
        candidate = model(id=0, **{c: fields.get(c) for c in columns if c in fields})
        row = {c: _to_sql(getattr(candidate, c)) for c in columns}

        placeholders = ", ".join("?" for _ in columns)
        with self._lock:
            cursor = self._execute(
                f"INSERT INTO {table} ({', '.join(columns)}) VALUES ({placeholders})",
                tuple(row[c] for c in columns),
            )
        return candidate.model_copy(update={"id": cursor.lastrowid})

    def insert_link(self, news_id: int, weather_id: Optional[int] = None,
                    stock_id: Optional[int] = None) -> NewsLink:
        with self._lock:
            cursor = self._execute(
                "INSERT INTO news_related_data (news_id, weather_id, stock_id) VALUES (?, ?, ?)",
                (news_id, weather_id, stock_id),
            )
        return NewsLink(id=cursor.lastrowid, news_id=news_id, weather_id=weather_id, stock_id=stock_id)

    def links_for_news(self, news_id: int) -> List[NewsLink]:
        with self._lock:
            rows = self._execute(
                "SELECT id, news_id, weather_id, stock_id FROM news_related_data "
                "WHERE news_id = ? ORDER BY id",
                (news_id,),
            ).fetchall()
        return [NewsLink(**dict(row)) for row in rows]

    def count(self, entity: str) -> int:
        """Total rows for an entity, or for 'links'."""
        table = "news_related_data" if entity == "links" else self._entity(entity)[0]
        with self._lock:
            return self._execute(f"SELECT COUNT(*) FROM {table}").fetchone()[0]
