"""UPS telemetry collector.

Reads a UPS snapshot from NUT's ``upsc``, keeps the latest values in a
SQLite status table and forwards a power measurement to an InfluxDB 3
compatible endpoint as line protocol.
"""

from upstelemetry.adapters.publisher import (
    MetricsPublisher,
    build_endpoint,
    publish,
    publish_with_deadline,
)
from upstelemetry.core.encoding.line_protocol import encode_measurement
from upstelemetry.core.errors import (
    ConfigError,
    SnapshotError,
    StorageError,
    TransportError,
    TransportErrorKind,
    UpsTelemetryError,
)
from upstelemetry.core.models import (
    ConnectionConfig,
    Field,
    Measurement,
    Scheme,
    Settings,
    StatusStoreConfig,
    Tag,
)

__all__ = [
    "ConfigError",
    "ConnectionConfig",
    "Field",
    "Measurement",
    "MetricsPublisher",
    "Scheme",
    "Settings",
    "SnapshotError",
    "StatusStoreConfig",
    "StorageError",
    "Tag",
    "TransportError",
    "TransportErrorKind",
    "UpsTelemetryError",
    "build_endpoint",
    "encode_measurement",
    "publish",
    "publish_with_deadline",
]
__version__ = "0.1.0"
