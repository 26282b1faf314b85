"""Example: publish a captured snapshot without upsc or a status database.

Run with:
    python examples/publish_snapshot.py metrics.local 8181 ups <token>

Encodes the power measurement from a fixed snapshot, prints the line that
will be sent and posts it once, printing the status code.
"""

import asyncio
import sys
import time

from upstelemetry.adapters.publisher import MetricsPublisher
from upstelemetry.core.encoding.line_protocol import encode_measurement
from upstelemetry.core.errors import UpsTelemetryError
from upstelemetry.core.models import ConnectionConfig
from upstelemetry.core.snapshot import measurement_from_snapshot, parse_upsc_output

CAPTURED = """\
battery.charge: 100
device.model: Smart-UPS 1500
device.serial: AS1234567890
ups.power: 512
ups.realpower: 450
ups.status: OL
"""


async def main(host: str, port: int, database: str, token: str) -> int:
    config = ConnectionConfig(token=token, database=database, host=host, port=port)
    measurement = measurement_from_snapshot(
        parse_upsc_output(CAPTURED), time.time_ns() // 1_000_000
    )
    print(encode_measurement(measurement))

    publisher = MetricsPublisher(config, deadline=10.0)
    try:
        status = await publisher.publish(measurement)
    except UpsTelemetryError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    print(f"Status: {status}")
    return 0


if __name__ == "__main__":
    if len(sys.argv) != 5:
        print(__doc__, file=sys.stderr)
        sys.exit(2)
    sys.exit(asyncio.run(main(sys.argv[1], int(sys.argv[2]), sys.argv[3], sys.argv[4])))
