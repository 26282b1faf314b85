"""Core domain models for UPS telemetry."""

from dataclasses import dataclass, field
from enum import Enum

from upstelemetry.core.errors import ConfigError

DEFAULT_INFLUX_PORT = 8181
DEFAULT_STATUS_DB = "/var/lib/ups-telemetry/status.db"


class Scheme(Enum):
    """Transport scheme of the metrics endpoint."""

    PLAIN = "http"
    SECURE = "https"

    @property
    def url_scheme(self) -> str:
        return self.value


@dataclass(frozen=True)
class ConnectionConfig:
    """Where and how to reach the metrics database.

    Attributes:
        token: Bearer credential sent with every write.
        database: Target database name.
        host: Hostname or address of the metrics server.
        scheme: PLAIN (http) or SECURE (https).
        port: TCP port, 0-65535.

    Raises:
        ConfigError: If token, database or host is empty, the token is not
            printable ASCII, or port is out of range.
    """

    token: str
    database: str
    host: str
    scheme: Scheme = Scheme.PLAIN
    port: int = DEFAULT_INFLUX_PORT

    def __post_init__(self) -> None:
        missing = [
            name for name in ("token", "database", "host") if not getattr(self, name)
        ]
        if missing:
            raise ConfigError(
                f"Missing required connection settings: {', '.join(missing)}"
            )
        # sent verbatim in an HTTP header, which only carries printable ASCII
        if not (self.token.isascii() and self.token.isprintable()):
            raise ConfigError("Token must contain only printable ASCII characters")
        if isinstance(self.port, bool) or not isinstance(self.port, int):
            raise ConfigError(f"Invalid port number: {self.port!r}")
        if not 0 <= self.port <= 65535:
            raise ConfigError(f"Invalid port number: {self.port}")

    def __repr__(self) -> str:
        # keep the token out of logs and tracebacks
        return (
            f"ConnectionConfig(database={self.database!r}, host={self.host!r}, "
            f"scheme={self.scheme.name}, port={self.port})"
        )


@dataclass(frozen=True)
class StatusStoreConfig:
    """Location of the relational status table.

    Attributes:
        path: SQLite database file, or ":memory:".
    """

    path: str = DEFAULT_STATUS_DB


@dataclass(frozen=True)
class Settings:
    """Both typed records produced by the configuration loader."""

    connection: ConnectionConfig
    status_store: StatusStoreConfig = field(default_factory=StatusStoreConfig)


@dataclass(frozen=True)
class Tag:
    """An indexed, string-only dimension of a measurement."""

    key: str
    value: str


@dataclass(frozen=True)
class Field:
    """A measured value. Numeric type is inferred when encoding."""

    key: str
    value: str


@dataclass(frozen=True)
class Measurement:
    """One timestamped observation.

    Attributes:
        table: Measurement (series) name.
        tags: Tags in output order.
        fields: Fields in output order.
        timestamp: Milliseconds since the Unix epoch.
    """

    table: str
    tags: tuple[Tag, ...] = ()
    fields: tuple[Field, ...] = ()
    timestamp: int = 0

    def __post_init__(self) -> None:
        # accept lists from callers but store immutable sequences
        object.__setattr__(self, "tags", tuple(self.tags))
        object.__setattr__(self, "fields", tuple(self.fields))
