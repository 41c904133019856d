# Area: Store
"""
ringside._store.database — Database Initialization
==================================================

Handles SQLite schema initialization and connection management for the
period store. A ``Database`` hands out one connection per thread and
wraps writes in ``BEGIN IMMEDIATE`` transactions so concurrent
transitions serialize on the database write lock.
"""

import sqlite3
import logging
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Optional

logger = logging.getLogger("ringside.store.database")

# Path to schema file
SCHEMA_PATH = Path(__file__).parent / "schema.sql"


def get_connection(db_path: str = "ringside.db", busy_timeout: float = 5.0) -> sqlite3.Connection:
    """
    Get a database connection.

    The connection runs in autocommit mode; transactions are opened
    explicitly by ``Database.transaction()``.

    Args:
        db_path: Path to the SQLite database file
        busy_timeout: Seconds to wait for a competing writer

    Returns:
        SQLite connection with row factory set
    """
    conn = sqlite3.connect(
        db_path,
        timeout=busy_timeout,
        isolation_level=None,
        check_same_thread=False,
    )
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


def init_database(db_path: str = "ringside.db") -> None:
    """
    Initialize the database with schema.

    Args:
        db_path: Path to the SQLite database file
    """
    conn = get_connection(db_path)
    try:
        with open(SCHEMA_PATH, "r", encoding="utf-8") as f:
            schema = f.read()
        conn.executescript(schema)
        logger.info(f"Database initialized at {db_path}")
    finally:
        conn.close()


class Database:
    """
    Thread-aware access to one SQLite database file.

    Each thread gets its own connection. ``transaction()`` nests: the
    outermost call issues ``BEGIN IMMEDIATE`` and inner calls use
    savepoints, so a cascade joins the transaction of the transition
    that triggered it and rolls back with it.

    Usage:
        db = Database("ringside.db")
        with db.transaction():
            repo.open_period(...)
    """

    def __init__(self, db_path: str = "ringside.db", busy_timeout: float = 5.0):
        self.db_path = str(db_path)
        self.busy_timeout = busy_timeout
        self._local = threading.local()
        self._lock = threading.Lock()
        self._connections: List[sqlite3.Connection] = []

    def connection(self) -> sqlite3.Connection:
        """Return this thread's connection, opening it on first use."""
        conn: Optional[sqlite3.Connection] = getattr(self._local, "conn", None)
        if conn is None:
            conn = get_connection(self.db_path, self.busy_timeout)
            self._local.conn = conn
            self._local.depth = 0
            with self._lock:
                self._connections.append(conn)
        return conn

    @property
    def in_transaction(self) -> bool:
        return getattr(self._local, "depth", 0) > 0

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """
        Run the enclosed block atomically.

        Any exception rolls back every write made inside the block
        (including nested blocks) and is re-raised unchanged.
        """
        conn = self.connection()
        depth = self._local.depth
        savepoint = f"sp_{depth}"

        if depth == 0:
            conn.execute("BEGIN IMMEDIATE")
        else:
            conn.execute(f"SAVEPOINT {savepoint}")
        self._local.depth = depth + 1

        try:
            yield conn
        except BaseException:
            self._local.depth = depth
            if depth == 0:
                conn.execute("ROLLBACK")
                logger.debug("Transaction rolled back")
            else:
                conn.execute(f"ROLLBACK TO SAVEPOINT {savepoint}")
                conn.execute(f"RELEASE SAVEPOINT {savepoint}")
            raise
        else:
            self._local.depth = depth
            if depth == 0:
                conn.execute("COMMIT")
            else:
                conn.execute(f"RELEASE SAVEPOINT {savepoint}")

    def close(self) -> None:
        """Close every connection opened by any thread."""
        with self._lock:
            for conn in self._connections:
                conn.close()
            self._connections.clear()
        self._local = threading.local()


class BaseRepository:
    """
    Base class for database repositories.

    Provides common query helpers on top of a shared ``Database`` so
    repository calls made inside ``db.transaction()`` join it.
    """

    def __init__(self, db: Database):
        """
        Initialize repository.

        Args:
            db: Database the repository reads and writes
        """
        self.db = db

    def _get_conn(self) -> sqlite3.Connection:
        """Get this thread's database connection."""
        return self.db.connection()

    def _execute(
        self, query: str, params: tuple = (), fetch: bool = False
    ) -> Optional[list]:
        """
        Execute a query.

        Args:
            query: SQL query string
            params: Query parameters
            fetch: If True, fetch and return results

        Returns:
            Query results if fetch=True, else None
        """
        cursor = self._get_conn().execute(query, params)
        if fetch:
            return [dict(row) for row in cursor.fetchall()]
        return None

    def _execute_one(self, query: str, params: tuple = ()) -> Optional[dict]:
        """Execute query and return single result."""
        results = self._execute(query, params, fetch=True)
        return results[0] if results else None

    def _insert(self, query: str, params: tuple = ()) -> int:
        """Execute an INSERT and return the new row id."""
        cursor = self._get_conn().execute(query, params)
        return int(cursor.lastrowid)
