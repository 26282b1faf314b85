"""Snapshot parsing and measurement mapping.

A snapshot is the flat ``key: value`` listing printed by ``upsc <ups>``,
for example::

    battery.charge: 100
    device.model: Smart-UPS 1500
    ups.realpower: 450
"""

from collections.abc import Mapping, Sequence

from upstelemetry.core.errors import SnapshotError
from upstelemetry.core.models import Field, Measurement, Tag

POWER_TABLE = "measurement__power"

# (output key, snapshot key)
POWER_TAGS: tuple[tuple[str, str], ...] = (
    ("device_serial", "device.serial"),
    ("device_model", "device.model"),
)
POWER_FIELDS: tuple[tuple[str, str], ...] = (
    ("ups_realpower", "ups.realpower"),
    ("ups_power", "ups.power"),
    ("battery_charge", "battery.charge"),
)


def parse_upsc_output(output: str) -> dict[str, str]:
    """Parse upsc output into a snapshot.

    Each line is split on its first colon and both sides are trimmed.
    Lines without a colon are ignored. Later duplicates win.

    Args:
        output: Text printed by upsc.

    Returns:
        Mapping of variable name to value.
    """
    snapshot: dict[str, str] = {}
    for line in output.splitlines():
        key, sep, value = line.partition(":")
        if sep:
            snapshot[key.strip()] = value.strip()
    return snapshot


def measurement_from_snapshot(
    snapshot: Mapping[str, str],
    timestamp: int,
    table: str = POWER_TABLE,
    tags: Sequence[tuple[str, str]] = POWER_TAGS,
    fields: Sequence[tuple[str, str]] = POWER_FIELDS,
) -> Measurement:
    """Build a measurement from the selected snapshot keys.

    Args:
        snapshot: The UPS snapshot.
        timestamp: Milliseconds since the Unix epoch.
        table: Measurement name.
        tags: Pairs of (tag key, snapshot key), in output order.
        fields: Pairs of (field key, snapshot key), in output order.

    Returns:
        A Measurement preserving the order of ``tags`` and ``fields``.

    Raises:
        SnapshotError: If any referenced snapshot key is missing.
    """
    missing = [
        source
        for _, source in (*tags, *fields)
        if source not in snapshot
    ]
    if missing:
        raise SnapshotError(f"Snapshot is missing keys: {', '.join(missing)}")

    return Measurement(
        table=table,
        tags=tuple(Tag(key=key, value=snapshot[source]) for key, source in tags),
        fields=tuple(
            Field(key=key, value=snapshot[source]) for key, source in fields
        ),
        timestamp=timestamp,
    )
