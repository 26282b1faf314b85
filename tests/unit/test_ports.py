"""Tests for port interfaces."""

from collections.abc import Mapping
from datetime import datetime

import pytest

from upstelemetry.adapters.publisher import MetricsPublisher
from upstelemetry.adapters.storage import InMemoryStatusStorage, SQLiteStatusStorage
from upstelemetry.adapters.upsc import StaticSnapshotSource, UpscSnapshotSource
from upstelemetry.core.models import ConnectionConfig, Measurement
from upstelemetry.core.ports import PublisherPort, SnapshotSourcePort, StatusStoragePort

pytestmark = pytest.mark.tier(0)


class TestSnapshotSourcePort:
    """Tests for SnapshotSourcePort protocol."""

    @pytest.mark.core
    def test_protocol_has_fetch_method(self) -> None:
        """SnapshotSourcePort must define fetch() -> dict[str, str]."""
        assert hasattr(SnapshotSourcePort, "fetch")

    @pytest.mark.core
    def test_adapters_are_recognized(self) -> None:
        """upsc and static sources satisfy the protocol."""
        assert isinstance(UpscSnapshotSource("ups@localhost"), SnapshotSourcePort)
        assert isinstance(StaticSnapshotSource({}), SnapshotSourcePort)


class TestStatusStoragePort:
    """Tests for StatusStoragePort protocol."""

    @pytest.mark.core
    def test_protocol_has_upsert_read_and_close(self) -> None:
        """StatusStoragePort must define upsert(), read() and close()."""
        assert hasattr(StatusStoragePort, "upsert")
        assert hasattr(StatusStoragePort, "read")
        assert hasattr(StatusStoragePort, "close")

    @pytest.mark.core
    def test_class_implementing_protocol_is_recognized(self) -> None:
        """A class with upsert, read and close methods satisfies StatusStoragePort."""

        class FakeStatusStorage:
            async def upsert(
                self, snapshot: Mapping[str, str], updated_at: datetime
            ) -> None:
                pass

            async def read(self) -> dict[str, str]:
                return {}

            async def close(self) -> None:
                pass

        assert isinstance(FakeStatusStorage(), StatusStoragePort)

    @pytest.mark.core
    def test_adapters_are_recognized(self) -> None:
        """SQLite and in-memory storage satisfy the protocol."""
        assert isinstance(InMemoryStatusStorage(), StatusStoragePort)
        assert isinstance(SQLiteStatusStorage(":memory:"), StatusStoragePort)


class TestPublisherPort:
    """Tests for PublisherPort protocol."""

    @pytest.mark.core
    def test_metrics_publisher_is_recognized(
        self, connection_config: ConnectionConfig
    ) -> None:
        """MetricsPublisher satisfies PublisherPort."""
        assert isinstance(MetricsPublisher(connection_config), PublisherPort)

    @pytest.mark.core
    def test_class_without_publish_is_rejected(self) -> None:
        """Objects lacking publish() do not satisfy PublisherPort."""

        class NotAPublisher:
            async def send(self, measurement: Measurement) -> int:
                return 204

        assert not isinstance(NotAPublisher(), PublisherPort)
