"""Search Ledger - SQLite history of successful weather lookups."""

import logging
import os
import sqlite3
import time
from pathlib import Path

from observability import trace_tool
from src.tools.shared_libraries.errors import StoreUnavailable

from .models import SCHEMA_SQL, SearchRecord
from .pool import ConnectionPool


logger = logging.getLogger(__name__)

MAX_RECENT = 10


def get_db_path() -> str:
    """Get the database file path.

    WEATHER_DB_PATH wins; otherwise weather.db inside WEATHER_DB_DIR.
    """
    explicit = os.getenv('WEATHER_DB_PATH')
    if explicit:
        return explicit
    db_dir = Path(os.getenv('WEATHER_DB_DIR', './data'))
    db_dir.mkdir(parents=True, exist_ok=True)
    return str(db_dir / 'weather.db')


class SearchLedger:
    """Append-only record of searches with a most-recent-N read."""

    def __init__(
        self,
        db_path: str | None = None,
        pool_size: int = 5,
        acquire_timeout: float = 5.0,
    ):
        self.db_path = db_path or get_db_path()
        self.pool = ConnectionPool(self.db_path, size=pool_size, timeout=acquire_timeout)

    def init_db(self) -> None:
        """Initialize the database with required tables."""
        with self.pool.connection() as conn:
            try:
                conn.executescript(SCHEMA_SQL)
                conn.commit()
            except sqlite3.Error as e:
                raise StoreUnavailable(
                    'Could not initialize search history', details=str(e)
                ) from e

    def connect_with_retry(self, attempts: int = 5, delay: float = 2.0) -> bool:
        """Initialize the schema, retrying while the store is unreachable.

        Returns:
            True once the schema is in place, False if every attempt failed.
        """
        for attempt in range(1, attempts + 1):
            try:
                self.init_db()
                logger.info(f'Search ledger ready at {self.db_path}')
                return True
            except StoreUnavailable as e:
                logger.warning(
                    f'Search ledger connection attempt {attempt}/{attempts} failed: '
                    f'{e.details or e.message}'
                )
                if attempt < attempts:
                    time.sleep(delay)
        logger.error(f'Search ledger unavailable after {attempts} attempts')
        return False

    @trace_tool(name='db.record')
    def record(
        self,
        city: str,
        temperature: float,
        description: str,
    ) -> SearchRecord:
        """Append a search to the ledger.

        Args:
            city: The city the reading was for.
            temperature: Temperature at time of search, in Celsius.
            description: Short condition description.

        Returns:
            The stored record, with its id and server timestamp.
        """
        with self.pool.connection() as conn:
            try:
                cursor = conn.execute(
                    """
                    INSERT INTO weather_searches (city, temperature, description)
                    VALUES (?, ?, ?)
                    """,
                    (city, temperature, description),
                )
                conn.commit()
                row = conn.execute(
                    """
                    SELECT id, city, temperature, description, search_date
                    FROM weather_searches
                    WHERE id = ?
                    """,
                    (cursor.lastrowid,),
                ).fetchone()
            except sqlite3.Error as e:
                raise StoreUnavailable('Failed to save search', details=str(e)) from e
        return SearchRecord(**dict(row))

    @trace_tool(name='db.recent')
    def recent(self, limit: int = MAX_RECENT) -> list[SearchRecord]:
        """Get the most recent searches, newest first.

        Args:
            limit: Maximum number of records, clamped to 1..10.

        Returns:
            Search records ordered by search date descending.
        """
        limit = max(1, min(limit, MAX_RECENT))
        with self.pool.connection() as conn:
            try:
                rows = conn.execute(
                    """
                    SELECT id, city, temperature, description, search_date
                    FROM weather_searches
                    ORDER BY search_date DESC, id DESC
                    LIMIT ?
                    """,
                    (limit,),
                ).fetchall()
            except sqlite3.Error as e:
                raise StoreUnavailable(
                    'Failed to fetch search history', details=str(e)
                ) from e
        return [SearchRecord(**dict(row)) for row in rows]

    def ping(self) -> bool:
        """Whether the store answers a trivial query."""
        try:
            with self.pool.connection() as conn:
                conn.execute('SELECT 1').fetchone()
            return True
        except (StoreUnavailable, sqlite3.Error) as e:
            logger.warning(f'Search ledger health check failed: {e}')
            return False

    def close(self) -> None:
        self.pool.close()
