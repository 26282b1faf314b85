"""Storage adapters implementing core ports."""

from upstelemetry.adapters.storage.in_memory import InMemoryStatusStorage
from upstelemetry.adapters.storage.sqlite_status import SQLiteStatusStorage

__all__ = [
    "InMemoryStatusStorage",
    "SQLiteStatusStorage",
]
