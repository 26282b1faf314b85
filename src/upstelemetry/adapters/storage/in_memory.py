"""In-memory storage adapter for the UPS status table."""

from collections.abc import Mapping
from datetime import datetime

from upstelemetry.adapters.storage.sqlite_status import UPDATED_FORMAT, UPDATED_KEY


class InMemoryStatusStorage:
    """In-memory implementation of StatusStoragePort.

    Stores the status in a dict. Suitable for testing and for embedding
    where persistence is not required.
    """

    def __init__(self) -> None:
        self._status: dict[str, str] = {}

    async def upsert(self, snapshot: Mapping[str, str], updated_at: datetime) -> None:
        """Insert or replace every snapshot key plus ``stats.updated``."""
        self._status.update(snapshot)
        self._status[UPDATED_KEY] = updated_at.strftime(UPDATED_FORMAT)

    async def read(self) -> dict[str, str]:
        """Return every stored key/value pair, ordered by key."""
        return dict(sorted(self._status.items()))

    async def get(self, key: str) -> str | None:
        return self._status.get(key)

    async def count(self) -> int:
        return len(self._status)

    async def clear(self) -> None:
        self._status.clear()

    async def close(self) -> None:
        pass
