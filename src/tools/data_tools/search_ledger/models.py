"""Database schema and record model for the search ledger."""

from pydantic import BaseModel

# SQLite schema definitions
SCHEMA_SQL = """
-- One row per successful current-conditions lookup
CREATE TABLE IF NOT EXISTS weather_searches (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    city TEXT NOT NULL,
    temperature REAL,
    description TEXT,
    search_date TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);

CREATE INDEX IF NOT EXISTS idx_weather_searches_search_date
    ON weather_searches(search_date);
"""


class SearchRecord(BaseModel):
    """A persisted search. Never updated once written."""

    id: int
    city: str
    temperature: float | None = None
    description: str | None = None
    search_date: str
