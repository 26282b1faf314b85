"""Exception hierarchy for ups-telemetry.

Only the CLI turns these into exit codes; everything below it raises.
"""

from enum import Enum


class UpsTelemetryError(Exception):
    """Base class for all errors raised by ups-telemetry."""


class ConfigError(UpsTelemetryError):
    """A required setting is missing, empty or malformed."""


class SnapshotError(UpsTelemetryError):
    """The UPS snapshot could not be acquired or lacks required keys."""


class StorageError(UpsTelemetryError):
    """Persisting the snapshot to the status table failed."""


class TransportErrorKind(Enum):
    """Classification of a failed metrics send."""

    CONNECT = "connect"
    TIMEOUT = "timeout"
    PROTOCOL = "protocol"
    CANCELLED = "cancelled"
    OTHER = "other"


class TransportError(UpsTelemetryError):
    """The line-protocol payload could not be delivered.

    Attributes:
        kind: What went wrong at the transport layer.
        cause: The underlying exception, if any.
    """

    def __init__(
        self,
        message: str,
        kind: TransportErrorKind = TransportErrorKind.OTHER,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.cause = cause
