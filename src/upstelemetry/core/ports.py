"""Port interfaces for the collection cycle.

These protocols define the contracts that adapters must implement.
The collection cycle depends only on these interfaces, so tests can
inject fakes and never touch upsc, SQLite or the network.
"""

from collections.abc import Mapping
from datetime import datetime
from typing import Protocol, runtime_checkable

from upstelemetry.core.models import Measurement


@runtime_checkable
class SnapshotSourcePort(Protocol):
    """Port for acquiring one UPS snapshot.

    Examples: UpscSnapshotSource, StaticSnapshotSource.
    """

    async def fetch(self) -> dict[str, str]:
        """Return the current snapshot as a flat string mapping."""
        ...


@runtime_checkable
class StatusStoragePort(Protocol):
    """Port for persisting the latest snapshot.

    Examples: SQLiteStatusStorage, InMemoryStatusStorage.
    """

    async def upsert(self, snapshot: Mapping[str, str], updated_at: datetime) -> None:
        """Insert or replace every key of the snapshot in one transaction.

        Args:
            snapshot: Key/value pairs to store.
            updated_at: Time of the update, recorded under ``stats.updated``.
        """
        ...

    async def read(self) -> dict[str, str]:
        """Return every stored key/value pair."""
        ...

    async def close(self) -> None:
        """Release any open connection."""
        ...


@runtime_checkable
class PublisherPort(Protocol):
    """Port for sending one measurement to the metrics backend.

    Examples: MetricsPublisher.
    """

    async def publish(self, measurement: Measurement) -> int:
        """Send the measurement and return the HTTP status code received."""
        ...
