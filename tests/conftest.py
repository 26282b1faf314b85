"""Shared test fixtures for all test modules."""

from pathlib import Path

import pytest
from tests.transport_helpers import RecordingTransport

from upstelemetry.core.models import ConnectionConfig, Scheme


@pytest.fixture
def status_db_path(tmp_path: Path) -> str:
    """Provide a temporary database path for status storage tests."""
    return str(tmp_path / "status.db")


@pytest.fixture
def recording_transport() -> RecordingTransport:
    """Transport stub answering 204 and recording every request."""
    return RecordingTransport()


@pytest.fixture
def connection_config() -> ConnectionConfig:
    """Connection settings pointing at a fake metrics server."""
    return ConnectionConfig(
        token="s3cr3t",
        database="ups",
        host="metrics.local",
        scheme=Scheme.SECURE,
        port=8181,
    )


@pytest.fixture
def upsc_snapshot() -> dict[str, str]:
    """A realistic snapshot as printed by upsc."""
    return {
        "battery.charge": "87.5",
        "battery.runtime": "1860",
        "device.mfr": "EATON",
        "device.model": "X1",
        "device.serial": "ABC123",
        "ups.power": "512",
        "ups.realpower": "450",
        "ups.status": "OL",
    }
