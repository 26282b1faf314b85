"""Configuration loading.

The configuration file is an env-style ``key = value`` list shared with
the status database settings::

    influx_host = metrics.local
    influx_token = s3cr3t
    influx_database = ups
    influx_port = 8181
    influx_scheme = https
    status_db = /var/lib/ups-telemetry/status.db

Blank lines and lines starting with ``#`` are ignored. Unknown keys are
ignored. Values are split on the first ``=`` and trimmed.
"""

from pathlib import Path

from upstelemetry.core.errors import ConfigError
from upstelemetry.core.models import (
    DEFAULT_INFLUX_PORT,
    DEFAULT_STATUS_DB,
    ConnectionConfig,
    Scheme,
    Settings,
    StatusStoreConfig,
)

DEFAULT_CONFIG_PATH = "/etc/usv-to-db-tool/database.conf"


def _parse_pairs(text: str) -> dict[str, str]:
    pairs: dict[str, str] = {}
    for line in text.splitlines():
        if line.lstrip().startswith("#"):
            continue
        key, sep, value = line.partition("=")
        if sep:
            pairs[key.strip()] = value.strip()
    return pairs


def _parse_port(raw: str) -> int:
    if not raw.isascii() or not raw.isdigit():
        raise ConfigError(f"Invalid port number: {raw!r}")
    port = int(raw)
    if port > 65535:
        raise ConfigError(f"Invalid port number: {raw!r}")
    return port


def _parse_scheme(raw: str) -> Scheme:
    return Scheme.SECURE if raw == "https" else Scheme.PLAIN


def parse_settings(text: str) -> Settings:
    """Parse configuration text into typed settings.

    Args:
        text: Contents of the configuration file.

    Returns:
        Settings with the metrics connection and status store location.

    Raises:
        ConfigError: If a required influx_* value is missing or empty,
            or influx_port is not a valid port number.
    """
    pairs = _parse_pairs(text)
    connection = ConnectionConfig(
        token=pairs.get("influx_token", ""),
        database=pairs.get("influx_database", ""),
        host=pairs.get("influx_host", ""),
        scheme=_parse_scheme(pairs.get("influx_scheme", "")),
        port=_parse_port(pairs["influx_port"])
        if "influx_port" in pairs
        else DEFAULT_INFLUX_PORT,
    )
    status_store = StatusStoreConfig(path=pairs.get("status_db") or DEFAULT_STATUS_DB)
    return Settings(connection=connection, status_store=status_store)


def load_settings(path: str | Path = DEFAULT_CONFIG_PATH) -> Settings:
    """Read and parse a configuration file.

    Raises:
        ConfigError: If the file cannot be read or its contents are invalid.
    """
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Cannot read configuration file {path}: {exc}") from exc
    return parse_settings(text)
