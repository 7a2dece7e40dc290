"""SQLite-backed bounded store for generation history records."""

from __future__ import annotations

import asyncio
import json
import logging
import sqlite3
import threading
from collections.abc import Callable
from pathlib import Path
from typing import Any, Generic, TypeVar

from banana_studio.exceptions import StorageUnavailableError, ValidationError
from banana_studio.models import GenerationRecord

logger = logging.getLogger(__name__)

DEFAULT_MAX_ITEMS = 100

P = TypeVar("P")
T = TypeVar("T")


class BoundedRecordStore(Generic[P]):
    """Durable record set holding at most ``max_items`` records.

    Each store owns one table in a SQLite database; the image and video
    histories live in separate tables of the same file. Every mutating
    operation runs as a single transaction. Blocking SQLite calls are
    handed to a worker thread so callers on the event loop never block.

    Capacity is enforced after a new record is committed: the oldest
    records (by ``created_at``, then ``id``) are deleted one by one until
    the store is back within bounds. A victim that fails to delete is
    logged and skipped.
    """

    def __init__(
        self,
        db_path: Path,
        table: str,
        parameters_type: Any,
        kind: str,
        max_items: int = DEFAULT_MAX_ITEMS,
    ):
        """Initialize the store.

        Args:
            db_path: Path to the SQLite database file
            table: Table holding this store's records
            parameters_type: Parameter class providing ``from_dict``
            kind: Record kind stored here ("image" or "video")
            max_items: Maximum number of records kept
        """
        if max_items < 1:
            raise ValidationError("max_items must be at least 1")
        if not table.isidentifier():
            raise ValidationError(f"Invalid history table name {table!r}")
        self.db_path = Path(db_path)
        self.table = table
        self.parameters_type = parameters_type
        self.kind = kind
        self.max_items = max_items
        self._conn: sqlite3.Connection | None = None
        self._lock = threading.Lock()

    @property
    def is_open(self) -> bool:
        """Check if the store holds an open database connection."""
        return self._conn is not None

    async def __aenter__(self) -> BoundedRecordStore[P]:
        await self.open()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def open(self) -> None:
        """Open the database, creating the file and table if absent.

        Raises:
            StorageUnavailableError: If the database cannot be opened
        """
        if self._conn is not None:
            return
        self._conn = await asyncio.to_thread(self._connect)

    async def close(self) -> None:
        """Close the database connection. Safe to call more than once."""
        conn, self._conn = self._conn, None
        if conn is not None:
            await asyncio.to_thread(self._close_connection, conn)

    async def get_all(self) -> list[GenerationRecord[P]]:
        """Return every stored record, in no particular order.

        Raises:
            StorageUnavailableError: If the database cannot be read
        """
        rows = await self._run(self._select_all)
        records = []
        for row in rows:
            record = self._row_to_record(row)
            if record is not None:
                records.append(record)
        return records

    async def put(self, record: GenerationRecord[P]) -> None:
        """Insert or overwrite a record, then evict the oldest if over capacity.

        Args:
            record: Record to store

        Raises:
            StorageUnavailableError: If the record could not be written
        """
        inserted = await self._run(self._upsert, record)
        if inserted:
            await self._enforce_capacity()

    async def delete(self, record_id: str) -> bool:
        """Delete a record by ID.

        Args:
            record_id: ID of the record to delete

        Returns:
            True if a record was deleted, False if it didn't exist
        """
        return await self._run(self._delete, record_id)

    async def clear(self) -> None:
        """Delete all records."""
        await self._run(self._clear)

    async def count(self) -> int:
        """Return the number of stored records."""
        return await self._run(self._count)

    async def newest_created_at(self) -> float | None:
        """Return the creation time of the newest record, or None if empty."""
        return await self._run(self._max_created_at)

    async def _enforce_capacity(self) -> None:
        """Delete the oldest records until the store is within capacity."""
        try:
            victims = await self._run(self._select_excess)
        except StorageUnavailableError as e:
            logger.warning(f"Could not check history size for {self.table}: {e}")
            return
        if not victims:
            return

        removed = 0
        for record_id in victims:
            try:
                if await self.delete(record_id):
                    removed += 1
            except StorageUnavailableError as e:
                logger.warning(f"Failed to evict history item {record_id}: {e}")

        logger.info(
            f"Cleaned up {removed} old {self.kind} history items. "
            f"Keeping {self.max_items} most recent."
        )

    async def _run(self, operation: Callable[..., T], *args: Any) -> T:
        """Run a blocking database operation on a worker thread."""
        if self._conn is None:
            raise StorageUnavailableError(f"History store {self.table!r} is not open")
        return await asyncio.to_thread(self._locked, operation, *args)

    def _locked(self, operation: Callable[..., T], *args: Any) -> T:
        conn = self._conn
        if conn is None:
            raise StorageUnavailableError(f"History store {self.table!r} is not open")
        with self._lock:
            try:
                return operation(conn, *args)
            except sqlite3.Error as e:
                raise StorageUnavailableError(f"History database error: {e}") from e

    # ------------------------------------------------------------------
    # Blocking helpers (run on a worker thread)
    # ------------------------------------------------------------------

    def _connect(self) -> sqlite3.Connection:
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(str(self.db_path), check_same_thread=False)
        except (OSError, sqlite3.Error) as e:
            raise StorageUnavailableError(f"Cannot open history database {self.db_path}: {e}") from e

        try:
            with conn:
                conn.execute(f"""
                    CREATE TABLE IF NOT EXISTS {self.table} (
                        id TEXT PRIMARY KEY,
                        kind TEXT NOT NULL,
                        artifact_reference TEXT NOT NULL,
                        prompt_text TEXT NOT NULL DEFAULT '',
                        parameters TEXT NOT NULL DEFAULT '{{}}',
                        created_at REAL NOT NULL
                    )
                    """)
                conn.execute(
                    f"CREATE INDEX IF NOT EXISTS idx_{self.table}_created_at "
                    f"ON {self.table} (created_at, id)"
                )
        except sqlite3.Error as e:
            conn.close()
            raise StorageUnavailableError(f"Cannot initialize history table {self.table}: {e}") from e
        return conn

    @staticmethod
    def _close_connection(conn: sqlite3.Connection) -> None:
        try:
            conn.close()
        except sqlite3.Error:
            logger.exception("Failed to close history database")

    def _select_all(self, conn: sqlite3.Connection) -> list[sqlite3.Row]:
        conn.row_factory = sqlite3.Row
        return conn.execute(
            f"SELECT id, kind, artifact_reference, prompt_text, parameters, created_at "
            f"FROM {self.table}"
        ).fetchall()

    def _upsert(self, conn: sqlite3.Connection, record: GenerationRecord[P]) -> bool:
        """Write a record and return True if its ID was not stored before."""
        params_json = json.dumps(
            record.parameters.to_dict(),  # type: ignore[attr-defined]
            ensure_ascii=False,
        )
        with conn:
            existing = conn.execute(
                f"SELECT 1 FROM {self.table} WHERE id = ?", (record.id,)
            ).fetchone()
            conn.execute(
                f"""
                INSERT OR REPLACE INTO {self.table}
                    (id, kind, artifact_reference, prompt_text, parameters, created_at)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    record.id,
                    record.kind,
                    record.artifact_reference,
                    record.prompt_text,
                    params_json,
                    record.created_at,
                ),
            )
        return existing is None

    def _select_excess(self, conn: sqlite3.Connection) -> list[str]:
        """Return IDs of the oldest records beyond capacity."""
        total = self._count(conn)
        excess = total - self.max_items
        if excess <= 0:
            return []
        rows = conn.execute(
            f"SELECT id FROM {self.table} ORDER BY created_at ASC, id ASC LIMIT ?",
            (excess,),
        ).fetchall()
        return [row[0] for row in rows]

    def _delete(self, conn: sqlite3.Connection, record_id: str) -> bool:
        with conn:
            cursor = conn.execute(f"DELETE FROM {self.table} WHERE id = ?", (record_id,))
            return cursor.rowcount > 0

    def _clear(self, conn: sqlite3.Connection) -> None:
        with conn:
            conn.execute(f"DELETE FROM {self.table}")

    def _count(self, conn: sqlite3.Connection) -> int:
        cursor = conn.execute(f"SELECT COUNT(*) FROM {self.table}")
        return cursor.fetchone()[0]

    def _max_created_at(self, conn: sqlite3.Connection) -> float | None:
        cursor = conn.execute(f"SELECT MAX(created_at) FROM {self.table}")
        return cursor.fetchone()[0]

    def _row_to_record(self, row: sqlite3.Row) -> GenerationRecord[P] | None:
        """Convert a database row to a record, or None if it is unreadable."""
        try:
            data = json.loads(row["parameters"])
            if not isinstance(data, dict):
                raise ValueError(f"expected a JSON object, got {type(data).__name__}")
            parameters = self.parameters_type.from_dict(data)
        except (json.JSONDecodeError, TypeError, ValueError, ValidationError) as e:
            logger.warning(f"Skipping unreadable history item {row['id']}: {e}")
            return None
        return GenerationRecord(
            id=row["id"],
            kind=row["kind"],
            artifact_reference=row["artifact_reference"],
            prompt_text=row["prompt_text"],
            parameters=parameters,
            created_at=row["created_at"],
        )
