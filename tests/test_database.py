# Area: Store Tests
"""Tests for database initialization and transactions."""

import sqlite3
import threading

import pytest

from ringside._store.database import Database, get_connection, init_database


class TestInitDatabase:
    """Tests for init_database."""

    def test_creates_tables(self, db_path):
        """Test that every table exists after initialization."""
        conn = get_connection(db_path)
        try:
            rows = conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'").fetchall()
        finally:
            conn.close()
        names = {row["name"] for row in rows}
        assert {"entities", "periods", "status_changes", "matches", "match_participants"} <= names

    def test_is_idempotent(self, db_path):
        """Test that initializing twice does not fail."""
        init_database(db_path)
        init_database(db_path)


class TestTransaction:
    """Tests for Database.transaction."""

    def _count(self, db):
        return db.connection().execute("SELECT COUNT(*) FROM entities").fetchone()[0]

    def _insert(self, conn, name):
        conn.execute("INSERT INTO entities (entity_type, name) VALUES ('wrestler', ?)", (name,))

    def test_commit(self, db):
        """Test that a successful block is committed."""
        with db.transaction() as conn:
            self._insert(conn, "A")
        assert self._count(db) == 1

    def test_rollback_on_error(self, db):
        """Test that an exception rolls back every write in the block."""
        with pytest.raises(RuntimeError):
            with db.transaction() as conn:
                self._insert(conn, "A")
                raise RuntimeError("boom")
        assert self._count(db) == 0
        assert not db.in_transaction

    def test_nested_rollback_keeps_outer_writes(self, db):
        """Test that a failed savepoint only undoes the inner block."""
        with db.transaction() as conn:
            self._insert(conn, "outer")
            with pytest.raises(ValueError):
                with db.transaction():
                    self._insert(conn, "inner")
                    raise ValueError("inner failure")
        assert self._count(db) == 1

    def test_outer_failure_discards_inner_commit(self, db):
        """Test that released savepoints still roll back with the outer block."""
        with pytest.raises(RuntimeError):
            with db.transaction() as conn:
                with db.transaction():
                    self._insert(conn, "inner")
                raise RuntimeError("outer failure")
        assert self._count(db) == 0

    def test_connection_per_thread(self, db):
        """Test that each thread gets its own connection."""
        seen = []

        def grab():
            seen.append(db.connection())

        worker = threading.Thread(target=grab)
        worker.start()
        worker.join()
        assert seen[0] is not db.connection()

    def test_close_closes_connections(self, db):
        """Test that close() closes every connection."""
        conn = db.connection()
        db.close()
        with pytest.raises(sqlite3.ProgrammingError):
            conn.execute("SELECT 1")
