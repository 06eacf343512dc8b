"""
SQLite database integration and simple migration system.

This module provides functions for obtaining a database connection
(``get_connection``), short-lived cursors (``get_cursor``), write
transactions that hold the database lock from the first statement
(``transaction``) and schema migrations applied on application start
(``init_db``).  The tables model a schemaless key-value store: one
table for set members and one for the fields of flat objects.

The migration mechanism stores applied migration versions in the
``migrations`` table and executes new migrations in order.
"""

import os
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from .config import settings


MIGRATIONS: list[tuple[int, str]] = [
    # Migration 1: key-value tables
    (
        1,
        """
        CREATE TABLE IF NOT EXISTS kv_sets (
            key TEXT NOT NULL,
            member TEXT NOT NULL,
            PRIMARY KEY (key, member)
        );

        -- ``value`` has no declared type so integers and strings keep
        -- their Python type on the way back out.
        CREATE TABLE IF NOT EXISTS kv_objects (
            key TEXT NOT NULL,
            field TEXT NOT NULL,
            value,
            PRIMARY KEY (key, field)
        );
        """,
    ),
]


def get_database_path(database_url: Optional[str] = None) -> str:
    """Compute the path to the SQLite database file.

    If the configured path is absolute, use it directly.  Otherwise
    resolve it relative to the project root.
    """
    db_url = database_url or settings.database_url
    if os.path.isabs(db_url):
        return db_url
    base_dir = Path(__file__).resolve().parent.parent.parent.parent
    return str((base_dir / db_url).resolve())


def get_connection(database_url: Optional[str] = None, timeout: Optional[float] = None) -> sqlite3.Connection:
    """Create and return a new SQLite connection.

    ``timeout`` is how long the connection waits for a lock held by
    another writer before raising ``sqlite3.OperationalError``.
    """
    db_path = get_database_path(database_url)
    conn = sqlite3.connect(db_path, timeout=timeout if timeout is not None else settings.store_timeout)
    conn.row_factory = sqlite3.Row
    return conn


@contextmanager
def get_cursor(database_url: Optional[str] = None, timeout: Optional[float] = None) -> Iterator[sqlite3.Cursor]:
    """Context manager that yields a cursor and closes the connection on exit."""
    conn = get_connection(database_url, timeout)
    try:
        yield conn.cursor()
        conn.commit()
    finally:
        conn.close()


@contextmanager
def transaction(database_url: Optional[str] = None, timeout: Optional[float] = None) -> Iterator[sqlite3.Cursor]:
    """Yield a cursor inside a ``BEGIN IMMEDIATE`` transaction.

    The write lock is taken before the first read, so a
    check-then-write sequence run on this cursor cannot interleave with
    another writer.  The transaction is committed on normal exit and
    rolled back if the block raises.
    """
    conn = get_connection(database_url, timeout)
    conn.isolation_level = None
    try:
        cursor = conn.cursor()
        cursor.execute("BEGIN IMMEDIATE")
        try:
            yield cursor
        except BaseException:
            cursor.execute("ROLLBACK")
            raise
        cursor.execute("COMMIT")
    finally:
        conn.close()


def init_db(database_url: Optional[str] = None) -> None:
    """Initialise the database and apply pending migrations.

    Creates the ``migrations`` table if it does not exist, checks the
    current schema version, and applies any new migrations defined in
    ``MIGRATIONS``.  If you add a migration, append it with an
    incremented version number.
    """
    with get_cursor(database_url) as cursor:
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
                current_version = version
