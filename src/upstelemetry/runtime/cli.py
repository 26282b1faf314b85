"""Command-line entry point.

Usage:
    ups-telemetry <ups> [--config PATH] [--timeout SECONDS] [-v]

Reads the UPS snapshot with upsc, stores it in the status table and
sends the power measurement to the metrics database. Exits 0 once a
response was received (whatever its status), 1 on any error and 2 on
usage errors.
"""

import argparse
import asyncio
import logging
import sys
from collections.abc import Callable, Sequence
from http import HTTPStatus
from pathlib import Path

from upstelemetry.adapters.logging import configure_logging
from upstelemetry.adapters.publisher import MetricsPublisher
from upstelemetry.adapters.storage.sqlite_status import SQLiteStatusStorage
from upstelemetry.adapters.upsc import UpscSnapshotSource
from upstelemetry.core.config import DEFAULT_CONFIG_PATH, load_settings
from upstelemetry.core.errors import UpsTelemetryError
from upstelemetry.core.models import ConnectionConfig
from upstelemetry.core.ports import PublisherPort, SnapshotSourcePort, StatusStoragePort
from upstelemetry.runtime.cycle import CollectionCycle, CycleResult

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ups-telemetry",
        description="Store a UPS snapshot and forward power metrics.",
    )
    parser.add_argument("ups", help="UPS name passed to upsc, e.g. myups@localhost")
    parser.add_argument(
        "--config",
        default=DEFAULT_CONFIG_PATH,
        help=f"configuration file (default: {DEFAULT_CONFIG_PATH})",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="abort the metrics write after this many seconds",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return parser


PublisherFactory = Callable[[ConnectionConfig, float | None], PublisherPort]
StorageFactory = Callable[[str], StatusStoragePort]


def _default_publisher(config: ConnectionConfig, deadline: float | None) -> PublisherPort:
    return MetricsPublisher(config, deadline=deadline)


async def run_once(
    config_path: str | Path,
    source: SnapshotSourcePort,
    timeout: float | None = None,
    publisher_factory: PublisherFactory = _default_publisher,
    storage_factory: StorageFactory = SQLiteStatusStorage,
) -> CycleResult:
    """Load settings and run one collection cycle.

    Settings are loaded before the storage or publisher is created, so a
    ConfigError leaves the network and the status table untouched.
    """
    settings = load_settings(config_path)
    publisher = publisher_factory(settings.connection, timeout)
    storage = storage_factory(settings.status_store.path)
    cycle = CollectionCycle(source=source, storage=storage, publisher=publisher)
    try:
        return await cycle.run()
    finally:
        await storage.close()


def format_status(status_code: int) -> str:
    """Render a status code with its reason phrase, e.g. ``204 No Content``."""
    try:
        phrase = HTTPStatus(status_code).phrase
    except ValueError:
        phrase = "<unknown status code>"
    return f"{status_code} {phrase}"


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    handler = configure_logging(verbose=args.verbose)

    try:
        result = asyncio.run(
            run_once(args.config, UpscSnapshotSource(args.ups), timeout=args.timeout)
        )
    except UpsTelemetryError as exc:
        logger.error("%s", exc)
        return 1
    finally:
        logging.getLogger("upstelemetry").removeHandler(handler)

    print(f"Status: {format_status(result.status_code)}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
