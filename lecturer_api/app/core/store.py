"""
Key-value store on top of SQLite.

The services only need a handful of primitives: sets of strings and
flat objects made of named scalar fields, addressed by opaque string
keys.  :class:`KeyValueStore` offers exactly those, with the
operations that have to be race-free (set add, field increment and
conditional object creation) executed as single statements or inside
an immediate transaction.

Every ``sqlite3.Error`` is re-raised as
:class:`~lecturer_api.app.core.errors.StoreUnavailable` so callers never
depend on the storage engine.
"""

from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple

from .db import get_cursor, init_db, transaction
from .errors import StoreUnavailable

logger = logging.getLogger(__name__)


class KeyValueStore:
    """Sets and flat objects stored in a SQLite file."""

    def __init__(self, database_url: Optional[str] = None, timeout: Optional[float] = None):
        self.database_url = database_url
        self.timeout = timeout

    def initialize(self) -> None:
        """Create the backing tables if needed."""
        try:
            init_db(self.database_url)
        except sqlite3.Error as exc:
            raise StoreUnavailable(str(exc)) from exc
        logger.debug("Key-value store ready at %s", self.database_url)

    @contextmanager
    def _cursor(self, atomic: bool = False) -> Iterator[sqlite3.Cursor]:
        opener = transaction if atomic else get_cursor
        try:
            with opener(self.database_url, self.timeout) as cursor:
                yield cursor
        except sqlite3.Error as exc:
            logger.debug("Store operation failed: %s", exc)
            raise StoreUnavailable(str(exc)) from exc

    # ------------------------------------------------------------------
    # Objects
    # ------------------------------------------------------------------
    def get_object(self, key: str) -> Optional[Dict[str, Any]]:
        """Return all fields of the object at ``key`` or ``None``."""
        with self._cursor() as cursor:
            rows = cursor.execute(
                "SELECT field, value FROM kv_objects WHERE key = ? ORDER BY rowid",
                (key,),
            ).fetchall()
        if not rows:
            return None
        return {row["field"]: row["value"] for row in rows}

    def object_exists(self, key: str) -> bool:
        """Return ``True`` if an object is stored at ``key``.

        Sets are not considered, so a set and an object sharing a key
        never make each other look present.
        """
        with self._cursor() as cursor:
            row = cursor.execute(
                "SELECT 1 FROM kv_objects WHERE key = ? LIMIT 1", (key,)
            ).fetchone()
            return row is not None

    def set_object_if_absent(
        self,
        key: str,
        mapping: Mapping[str, Any],
        index: Optional[Tuple[str, str]] = None,
    ) -> bool:
        """Create the object at ``key`` only if nothing is stored there yet.

        When ``index`` is given as ``(set_key, member)`` the member is
        added to that set in the same transaction, so the object and
        its index entry appear together or not at all.

        Returns ``False`` without writing anything when the object
        already exists.
        """
        with self._cursor(atomic=True) as cursor:
            row = cursor.execute(
                "SELECT 1 FROM kv_objects WHERE key = ? LIMIT 1", (key,)
            ).fetchone()
            if row is not None:
                return False
            self._write_fields(cursor, key, mapping)
            if index is not None:
                set_key, member = index
                cursor.execute(
                    "INSERT OR IGNORE INTO kv_sets (key, member) VALUES (?, ?)",
                    (set_key, str(member)),
                )
            return True

    def incr_object_field(self, key: str, field: str, delta: int = 1) -> int:
        """Atomically add ``delta`` to an integer field and return the new value.

        A missing field is created with the value ``delta``.
        """
        with self._cursor(atomic=True) as cursor:
            cursor.execute(
                """
                INSERT INTO kv_objects (key, field, value) VALUES (?, ?, ?)
                ON CONFLICT(key, field) DO UPDATE SET value = value + excluded.value
                """,
                (key, field, int(delta)),
            )
            row = cursor.execute(
                "SELECT value FROM kv_objects WHERE key = ? AND field = ?",
                (key, field),
            ).fetchone()
            return int(row["value"])

    @staticmethod
    def _write_fields(cursor: sqlite3.Cursor, key: str, mapping: Mapping[str, Any]) -> None:
        cursor.executemany(
            """
            INSERT INTO kv_objects (key, field, value) VALUES (?, ?, ?)
            ON CONFLICT(key, field) DO UPDATE SET value = excluded.value
            """,
            [(key, field, value) for field, value in mapping.items() if value is not None],
        )

    # ------------------------------------------------------------------
    # Sets
    # ------------------------------------------------------------------
    def set_add(self, key: str, member: str) -> bool:
        """Add ``member`` to the set at ``key``.

        Returns ``True`` if the member was not present before.  The
        membership test and the insert are one statement, so two
        concurrent callers can never both see ``True``.
        """
        with self._cursor() as cursor:
            cursor.execute(
                "INSERT OR IGNORE INTO kv_sets (key, member) VALUES (?, ?)",
                (key, str(member)),
            )
            return cursor.rowcount == 1

    def is_set_member(self, key: str, member: str) -> bool:
        with self._cursor() as cursor:
            row = cursor.execute(
                "SELECT 1 FROM kv_sets WHERE key = ? AND member = ?",
                (key, str(member)),
            ).fetchone()
            return row is not None

    def get_set_members(self, key: str) -> List[str]:
        """Return the members of the set at ``key`` in insertion order."""
        with self._cursor() as cursor:
            rows = cursor.execute(
                "SELECT member FROM kv_sets WHERE key = ? ORDER BY rowid",
                (key,),
            ).fetchall()
        return [row["member"] for row in rows]
