"""SQLite database connection and schema management.

Local mirror of the hosted ``bags`` / ``sales`` tables, used for offline
analysis and tests.
"""

from __future__ import annotations

import sqlite3
import logging

from ..common.config import Config

logger = logging.getLogger(__name__)

_SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS bags (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    model_name TEXT,
    size INTEGER NOT NULL,
    color TEXT,
    color_secondary TEXT,
    leather_type TEXT,
    hardware TEXT,
    year INTEGER,
    is_exotic INTEGER NOT NULL DEFAULT 0,
    exotic_type TEXT,
    is_limited_edition INTEGER NOT NULL DEFAULT 0,
    condition TEXT,
    created_at TEXT DEFAULT (datetime('now'))
);

CREATE INDEX IF NOT EXISTS idx_bags_size_exotic
    ON bags(size, is_exotic);

CREATE TABLE IF NOT EXISTS sales (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    bag_id INTEGER NOT NULL,
    source_name TEXT,
    sale_price REAL NOT NULL,
    currency TEXT NOT NULL DEFAULT 'USD',
    sale_date TEXT,
    FOREIGN KEY (bag_id) REFERENCES bags(id)
);

CREATE INDEX IF NOT EXISTS idx_sales_bag_date
    ON sales(bag_id, sale_date);
"""


def get_connection(config: Config | None = None) -> sqlite3.Connection:
    """Get a SQLite connection with row factory enabled.

    Args:
        config: Optional Config. Uses defaults if not provided.

    Returns:
        sqlite3.Connection with Row factory.
    """
    config = config or Config()
    db_path = config.database_abs_path
    db_path.parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(str(db_path))
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    conn.execute("PRAGMA foreign_keys=ON")
    return conn


def init_db(config: Config | None = None) -> None:
    """Initialize database schema (idempotent).

    Args:
        config: Optional Config. Uses defaults if not provided.
    """
    config = config or Config()
    conn = get_connection(config)
    try:
        conn.executescript(_SCHEMA_SQL)
        conn.commit()
        logger.info("Database schema initialized at %s", config.database_abs_path)
    finally:
        conn.close()
