"""
SQLite database integration and simple migration system.

This module provides a small connection pool (``ConnectionPool``) and a
migration runner (``init_db``).  The pool is created once by the
application lifespan and handed explicitly to the service layer; no
module level connection state exists.

The migration mechanism stores applied migration versions in the
``migrations`` table and executes new migrations in order.
"""

import logging
import os
import queue
import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List

logger = logging.getLogger(__name__)


MIGRATIONS: list[tuple[int, str]] = [
    # Migration 1: books table
    (
        1,
        """
        CREATE TABLE IF NOT EXISTS books (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            title VARCHAR(225) NOT NULL,
            author VARCHAR(50),
            published_date DATE,
            stock INTEGER DEFAULT 0,
            created_at TIMESTAMP DEFAULT (strftime('%Y-%m-%dT%H:%M:%S', 'now'))
        );
        """,
    ),
]


def get_database_path(database_url: str) -> str:
    """Compute the path to the SQLite database file.

    If ``database_url`` is an absolute path, use it directly.  Otherwise
    resolve it relative to the project root.
    """
    if os.path.isabs(database_url):
        return database_url
    base_dir = Path(__file__).resolve().parent.parent.parent.parent
    return str((base_dir / database_url).resolve())


def _connect(db_path: str) -> sqlite3.Connection:
    conn = sqlite3.connect(db_path, check_same_thread=False)
    # Return rows as dict‑like objects keyed by column name
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    conn.execute("PRAGMA journal_mode=WAL;")
    return conn


class ConnectionPool:
    """A fixed-size pool of SQLite connections shared by concurrent requests.

    Connections are opened eagerly.  ``connection()`` hands one out for
    the duration of a ``with`` block, commits if the block succeeds,
    rolls back if it raises and always puts the connection back.
    """

    def __init__(self, db_path: str, size: int = 5, timeout: float = 30.0) -> None:
        if size < 1:
            raise ValueError("pool size must be at least 1")
        self.db_path = db_path
        self.size = size
        self.timeout = timeout
        self._closed = False
        self._lock = threading.Lock()
        self._connections: "queue.Queue[sqlite3.Connection]" = queue.Queue(maxsize=size)
        for _ in range(size):
            self._connections.put(_connect(db_path))
        logger.debug("Opened %d connections to %s", size, db_path)

    @property
    def available(self) -> int:
        """Number of idle connections currently in the pool."""
        return self._connections.qsize()

    @property
    def closed(self) -> bool:
        return self._closed

    def _acquire(self) -> sqlite3.Connection:
        if self._closed:
            raise sqlite3.ProgrammingError("connection pool is closed")
        try:
            return self._connections.get(timeout=self.timeout)
        except queue.Empty:
            raise sqlite3.OperationalError(
                f"timed out after {self.timeout}s waiting for a database connection"
            ) from None

    def _release(self, conn: sqlite3.Connection) -> None:
        with self._lock:
            if self._closed:
                conn.close()
                return
            self._connections.put_nowait(conn)

    @contextmanager
    def connection(self) -> Iterator[sqlite3.Connection]:
        """Borrow a connection for one unit of work."""
        conn = self._acquire()
        try:
            yield conn
            conn.commit()
        except BaseException:
            conn.rollback()
            raise
        finally:
            self._release(conn)

    def close(self) -> None:
        """Close all idle connections; borrowed ones are closed on release."""
        with self._lock:
            self._closed = True
            drained: List[sqlite3.Connection] = []
            while True:
                try:
                    drained.append(self._connections.get_nowait())
                except queue.Empty:
                    break
        for conn in drained:
            conn.close()
        logger.debug("Closed connection pool for %s", self.db_path)


def init_db(pool: ConnectionPool) -> None:
    """Initialise the database and apply pending migrations.

    Creates the ``migrations`` table if it does not exist, checks the
    current schema version, and applies any new migrations defined in
    ``MIGRATIONS``.  If you add a new migration, append it with an
    incremented version number.
    """
    with pool.connection() as conn:
        cursor = conn.cursor()
        cursor.execute(
            "CREATE TABLE IF NOT EXISTS migrations (version INTEGER PRIMARY KEY)"
        )
        cursor.execute("SELECT MAX(version) as version FROM migrations")
        row = cursor.fetchone()
        current_version = row["version"] if row and row["version"] is not None else 0

        for version, sql in MIGRATIONS:
            if version > current_version:
                cursor.executescript(sql)
                cursor.execute(
                    "INSERT INTO migrations (version) VALUES (?)", (version,)
                )
                logger.info("Applied migration %s", version)
                current_version = version
