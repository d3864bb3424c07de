"""
Database configuration and schema management for the snake stats store.

This module provides SQLite connection management with environment-aware
path selection and schema initialization.
"""

import logging
import os
import sqlite3
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


def get_database_path() -> str:
    """
    Determine the stats database path.

    Returns:
        SNAKE_STATS_DB_PATH when set, otherwise backend/snake_stats.db.
    """
    env_path = os.getenv('SNAKE_STATS_DB_PATH')
    if env_path:
        parent = Path(env_path).parent
        if str(parent):
            os.makedirs(parent, exist_ok=True)
        return env_path

    backend_dir = Path(__file__).parent
    return str(backend_dir / 'snake_stats.db')


def get_connection(db_path: Optional[str] = None) -> sqlite3.Connection:
    """
    Get a database connection with appropriate settings.

    Returns:
        sqlite3.Connection: Database connection with row factory enabled.
    """
    conn = sqlite3.connect(db_path or get_database_path())
    conn.row_factory = sqlite3.Row  # Enable column access by name
    return conn


def init_database(db_path: Optional[str] = None) -> None:
    """
    Initialize the database schema.
    Safe to call multiple times (uses IF NOT EXISTS / INSERT OR IGNORE).
    """
    db_path = db_path or get_database_path()
    logger.info("Initializing stats database at: %s", db_path)

    conn = get_connection(db_path)
    cursor = conn.cursor()

    try:
        # Single-row table holding the lifetime counters
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS game_stats (
                id INTEGER PRIMARY KEY CHECK (id = 1),
                total_games_played INTEGER DEFAULT 0,
                ai_games_played INTEGER DEFAULT 0,
                total_playtime REAL DEFAULT 0.0,
                current_score INTEGER DEFAULT 0,
                high_score INTEGER DEFAULT 0,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """)
        cursor.execute("INSERT OR IGNORE INTO game_stats (id) VALUES (1)")

        conn.commit()
        logger.info("Stats schema initialized successfully")

    except Exception as e:
        conn.rollback()
        logger.error("Error initializing stats database: %s", e)
        raise
    finally:
        conn.close()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(message)s")
    init_database()
    logger.info("Database ready at: %s", get_database_path())
