"""SQLite storage adapter for the UPS status table."""

import logging
import sqlite3
from collections.abc import Mapping
from datetime import datetime

from upstelemetry.adapters.storage.sqlite_base import AsyncConnectionManager
from upstelemetry.core.errors import StorageError

logger = logging.getLogger(__name__)

UPDATED_KEY = "stats.updated"
UPDATED_FORMAT = "%d.%m.%Y %H:%M:%S"

_STATUS_SCHEMA = """
CREATE TABLE IF NOT EXISTS status (
    key TEXT NOT NULL PRIMARY KEY,
    value TEXT NOT NULL
);
"""

_UPSERT_STATUS = """
INSERT INTO status (key, value) VALUES (?, ?)
ON CONFLICT(key) DO UPDATE SET value = excluded.value
"""

_SELECT_STATUS = """
SELECT key, value FROM status ORDER BY key ASC
"""

_SELECT_STATUS_KEY = """
SELECT value FROM status WHERE key = ?
"""

_COUNT_STATUS = """
SELECT COUNT(*) FROM status
"""

_CLEAR_STATUS = """
DELETE FROM status
"""


class SQLiteStatusStorage:
    """SQLite implementation of StatusStoragePort.

    Keeps one row per snapshot key holding its latest value. Each upsert
    writes the whole snapshot and the ``stats.updated`` row in a single
    transaction, so readers never see a half-updated snapshot.
    """

    def __init__(self, db_path: str) -> None:
        self._db_path = db_path
        self._manager = AsyncConnectionManager(db_path, _STATUS_SCHEMA)

    async def upsert(self, snapshot: Mapping[str, str], updated_at: datetime) -> None:
        """Insert or replace every snapshot key plus ``stats.updated``.

        Raises:
            StorageError: If the transaction fails. Nothing is committed then.
        """
        rows = [*snapshot.items(), (UPDATED_KEY, updated_at.strftime(UPDATED_FORMAT))]
        try:
            async with self._manager.connection() as db:
                try:
                    await db.executemany(_UPSERT_STATUS, rows)
                    await db.commit()
                except sqlite3.Error:
                    await db.rollback()
                    raise
        except sqlite3.Error as exc:
            raise StorageError(
                f"Failed to update status table in {self._db_path}: {exc}"
            ) from exc
        logger.info("Database successfully updated.")

    async def read(self) -> dict[str, str]:
        """Return every stored key/value pair, ordered by key."""
        async with self._manager.connection() as db:
            async with db.execute(_SELECT_STATUS) as cursor:
                return {row[0]: row[1] async for row in cursor}

    async def get(self, key: str) -> str | None:
        """Return the stored value for ``key``, or None."""
        async with self._manager.connection() as db:
            async with db.execute(_SELECT_STATUS_KEY, (key,)) as cursor:
                row = await cursor.fetchone()
                return row[0] if row else None

    async def count(self) -> int:
        """Return the number of stored keys."""
        async with self._manager.connection() as db:
            async with db.execute(_COUNT_STATUS) as cursor:
                row = await cursor.fetchone()
                return row[0] if row else 0

    async def clear(self) -> None:
        """Remove all rows."""
        async with self._manager.connection() as db:
            await db.execute(_CLEAR_STATUS)
            await db.commit()

    async def close(self) -> None:
        """Close persistent connection (for :memory: databases)."""
        await self._manager.close()
