"""
SQLite storage handle and simple migration system.

``SQLiteStorage`` is the concrete storage handle injected into
``RecordService``.  It exposes three coroutines, ``insert``,
``select_one`` and ``select_many``, that the service relies on; any
object with the same coroutines (for example a test double) can be
used in its place.

Each call opens its own connection inside a worker thread, so the
event loop only suspends while a query is running.  To switch to
another DBMS replace the connection logic and keep the three
coroutines.

The migration mechanism stores applied versions in the ``migrations``
table and executes new migrations in order (``init_db``).
"""

import asyncio
import logging
import os
import re
import sqlite3
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence, Tuple

from .config import settings

logger = logging.getLogger(__name__)

RECORD_TABLE = "record"

Row = Dict[str, Any]

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

MIGRATIONS: List[Tuple[int, str]] = [
    # Migration 1: record table
    (
        1,
        """
        CREATE TABLE IF NOT EXISTS record (
            tx_id TEXT PRIMARY KEY,
            version TEXT NOT NULL,
            kind TEXT NOT NULL
                CHECK (kind IN ('RecordLinkage', 'ProcessEventSet')),
            system_id TEXT NOT NULL,
            record_id TEXT NOT NULL,
            record_kind TEXT NOT NULL
                CHECK (record_kind IN ('Permit', 'Project', 'Submission', 'Tracking')),
            process_event TEXT NOT NULL
        );
        """,
    ),
    # Migration 2: lookups by submitting system and its record id
    (
        2,
        """
        CREATE INDEX IF NOT EXISTS idx_record_system_record
            ON record(system_id, record_id);
        """,
    ),
]


def get_database_path(database_url: Optional[str] = None) -> str:
    """Compute the path to the SQLite database file.

    An absolute path is used directly; a relative one is resolved
    against the project root (the directory holding the package).
    """
    db_url = database_url or settings.database_url
    if os.path.isabs(db_url):
        return db_url
    base_dir = Path(__file__).resolve().parent.parent.parent.parent
    return str((base_dir / db_url).resolve())


def _check_identifier(name: str) -> str:
    if not _IDENTIFIER.match(name):
        raise ValueError(f"Invalid SQL identifier: {name!r}")
    return name


def _where_clause(filters: Mapping[str, Any]) -> Tuple[str, Tuple[Any, ...]]:
    if not filters:
        return "", ()
    clauses = [f"{_check_identifier(column)} = ?" for column in filters]
    return " WHERE " + " AND ".join(clauses), tuple(filters.values())


class SQLiteStorage:
    """Storage handle backed by an SQLite database file."""

    def __init__(self, database_path: Optional[str] = None, timeout: Optional[float] = None):
        self.database_path = get_database_path(database_path)
        self.timeout = settings.db_timeout_seconds if timeout is None else timeout

    def get_connection(self) -> sqlite3.Connection:
        """Create and return a new SQLite connection.

        Rows are returned as ``sqlite3.Row`` objects and foreign key
        enforcement is switched on for the lifetime of the connection.
        """
        conn = sqlite3.connect(self.database_path, timeout=self.timeout)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        return conn

    @contextmanager
    def get_cursor(self) -> Iterator[sqlite3.Cursor]:
        """Yield a cursor, commit on success and always close the connection."""
        conn = self.get_connection()
        try:
            yield conn.cursor()
            conn.commit()
        finally:
            conn.close()

    def init_db(self) -> int:
        """Create the database if needed and apply pending migrations.

        Returns the schema version after migrating.  To change the
        schema append a new entry to ``MIGRATIONS`` with an incremented
        version number.
        """
        Path(self.database_path).parent.mkdir(parents=True, exist_ok=True)
        with self.get_cursor() as cursor:
            cursor.execute(
                "CREATE TABLE IF NOT EXISTS migrations (version INTEGER PRIMARY KEY)"
            )
            cursor.execute("SELECT MAX(version) AS version FROM migrations")
            row = cursor.fetchone()
            current_version = row["version"] if row and row["version"] is not None else 0

            for version, sql in MIGRATIONS:
                if version > current_version:
                    logger.info("Applying migration %s to %s", version, self.database_path)
                    cursor.executescript(sql)
                    cursor.execute("INSERT INTO migrations (version) VALUES (?)", (version,))
                    current_version = version
        return current_version

    # --- storage handle contract ---

    async def insert(self, table: str, values: Mapping[str, Any]) -> Row:
        """Insert a row and return all of its columns.

        Raises ``sqlite3.IntegrityError`` on constraint violations.
        """
        return await asyncio.to_thread(self._insert, table, dict(values))

    async def select_one(self, table: str, filters: Mapping[str, Any]) -> Optional[Row]:
        """Return the first row matching every filter, or ``None``."""
        return await asyncio.to_thread(self._select_one, table, dict(filters))

    async def select_many(
        self,
        table: str,
        filters: Mapping[str, Any],
        order_by: Sequence[Tuple[str, str]] = (),
    ) -> List[Row]:
        """Return all rows matching every filter.

        ``order_by`` is a sequence of ``(column, direction)`` pairs with
        direction ``"asc"`` or ``"desc"``.
        """
        return await asyncio.to_thread(self._select_many, table, dict(filters), tuple(order_by))

    async def ping(self) -> float:
        """Run ``SELECT 1`` and return the round trip in milliseconds."""
        return await asyncio.to_thread(self._ping)

    # --- blocking implementations (run in worker threads) ---

    def _insert(self, table: str, values: Dict[str, Any]) -> Row:
        table = _check_identifier(table)
        columns = [_check_identifier(column) for column in values]
        placeholders = ", ".join("?" for _ in columns)
        conn = self.get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                f"INSERT INTO {table} ({', '.join(columns)}) VALUES ({placeholders})",
                tuple(values.values()),
            )
            row = cursor.execute(
                f"SELECT * FROM {table} WHERE rowid = ?", (cursor.lastrowid,)
            ).fetchone()
            conn.commit()
            return dict(row)
        finally:
            conn.close()

    def _select_one(self, table: str, filters: Dict[str, Any]) -> Optional[Row]:
        where, params = _where_clause(filters)
        conn = self.get_connection()
        try:
            row = conn.execute(
                f"SELECT * FROM {_check_identifier(table)}{where} LIMIT 1", params
            ).fetchone()
            return dict(row) if row else None
        finally:
            conn.close()

    def _select_many(
        self,
        table: str,
        filters: Dict[str, Any],
        order_by: Tuple[Tuple[str, str], ...],
    ) -> List[Row]:
        where, params = _where_clause(filters)
        query = f"SELECT * FROM {_check_identifier(table)}{where}"
        if order_by:
            terms = []
            for column, direction in order_by:
                direction = direction.lower()
                if direction not in {"asc", "desc"}:
                    raise ValueError(f"Invalid sort direction: {direction!r}")
                terms.append(f"{_check_identifier(column)} {direction.upper()}")
            query += " ORDER BY " + ", ".join(terms)
        conn = self.get_connection()
        try:
            return [dict(row) for row in conn.execute(query, params).fetchall()]
        finally:
            conn.close()

    def _ping(self) -> float:
        start = time.perf_counter()
        conn = self.get_connection()
        try:
            conn.execute("SELECT 1").fetchone()
        finally:
            conn.close()
        return (time.perf_counter() - start) * 1000
