"""Database initialization and connection management.

Creates the schema on first boot, provides connection factory.
"""

import pathlib
import sqlite3


_SCHEMA = """
CREATE TABLE IF NOT EXISTS trades (
    id          TEXT PRIMARY KEY,
    scrip_name  TEXT NOT NULL,
    quantity    REAL NOT NULL CHECK (quantity > 0),
    buy_price   REAL NOT NULL CHECK (buy_price > 0),
    sell_price  REAL CHECK (sell_price IS NULL OR sell_price > 0),
    buy_date    TEXT NOT NULL,
    sell_date   TEXT,
    is_open     INTEGER NOT NULL DEFAULT 1,
    created_at  TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_trades_created_at ON trades (created_at);

CREATE TABLE IF NOT EXISTS capital_settings (
    id             INTEGER PRIMARY KEY CHECK (id = 1),
    total_capital  REAL NOT NULL CHECK (total_capital >= 0),
    updated_at     TEXT NOT NULL
);
"""


def init_db(db_path: str) -> None:
    """Initialize the database, creating any missing tables.

    The parent directory of *db_path* is created if needed.

    Args:
        db_path: Path to the SQLite database file (or ``":memory:"``).
    """
    if db_path != ":memory:":
        pathlib.Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(db_path)
    try:
        conn.executescript(_SCHEMA)
    finally:
        conn.close()


def get_connection(db_path: str) -> sqlite3.Connection:
    """Return a new SQLite connection with row-factory enabled.

    Callers are responsible for closing the connection.
    """
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    return conn
