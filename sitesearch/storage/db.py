"""
SQLite database setup and connection management
"""

import logging
import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterator

logger = logging.getLogger(__name__)

TABLES = ("site", "page", "lemma", "search_index")

SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS site (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        url VARCHAR(255) UNIQUE NOT NULL,
        name VARCHAR(255) NOT NULL,
        status VARCHAR(16) NOT NULL CHECK (status IN ('INDEXING', 'INDEXED', 'FAILED')),
        status_time TIMESTAMP NOT NULL,
        last_error TEXT NOT NULL DEFAULT ''
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS page (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        site_id INTEGER NOT NULL REFERENCES site(id) ON DELETE CASCADE,
        path TEXT NOT NULL,
        code INTEGER NOT NULL,
        content TEXT NOT NULL,
        UNIQUE (site_id, path)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS lemma (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        site_id INTEGER NOT NULL REFERENCES site(id) ON DELETE CASCADE,
        lemma VARCHAR(255) NOT NULL,
        frequency INTEGER NOT NULL CHECK (frequency >= 0),
        UNIQUE (site_id, lemma)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS search_index (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        page_id INTEGER NOT NULL REFERENCES page(id) ON DELETE CASCADE,
        lemma_id INTEGER NOT NULL REFERENCES lemma(id) ON DELETE CASCADE,
        lemma_rank REAL NOT NULL,
        UNIQUE (page_id, lemma_id)
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_page_site ON page(site_id)",
    "CREATE INDEX IF NOT EXISTS idx_lemma_lemma ON lemma(lemma)",
    "CREATE INDEX IF NOT EXISTS idx_search_index_lemma ON search_index(lemma_id)",
)


class Database:
    """Single shared SQLite connection guarded by a re-entrant lock.

    Crawl jobs write from many threads; every statement goes through
    :meth:`transaction` so writes are serialized and committed atomically.
    """

    def __init__(self, path: str = ":memory:"):
        self.path = path
        if path != ":memory:":
            Path(path).parent.mkdir(parents=True, exist_ok=True)

        self._lock = threading.RLock()
        self._depth = 0
        self._conn = sqlite3.connect(path, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._conn.execute("PRAGMA foreign_keys = ON")

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """Hold the lock for the duration of a unit of work and commit it"""
        with self._lock:
            if self._depth:
                # Nested unit of work joins the outer one
                self._depth += 1
                try:
                    yield self._conn
                finally:
                    self._depth -= 1
                return

            self._depth = 1
            try:
                yield self._conn
                self._conn.commit()
            except Exception:
                self._conn.rollback()
                raise
            finally:
                self._depth = 0

    def setup(self) -> None:
        """Create tables and indexes if they do not exist"""
        with self.transaction() as conn:
            for statement in SCHEMA:
                conn.execute(statement)
        logger.info(f"Database schema ready at {self.path}")

    def reset(self) -> None:
        """Drop all tables and recreate them"""
        with self.transaction() as conn:
            for table in reversed(TABLES):
                conn.execute(f"DROP TABLE IF EXISTS {table}")
        logger.info("All tables dropped")
        self.setup()

    def status(self) -> Dict[str, int]:
        """Row counts per table"""
        counts = {}
        with self.transaction() as conn:
            for table in TABLES:
                counts[table] = conn.execute(f"SELECT COUNT(*) FROM {table}").fetchone()[0]
        return counts

    def close(self) -> None:
        with self._lock:
            self._conn.close()
