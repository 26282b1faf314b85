"""One acquire-store-publish cycle."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from upstelemetry.core.models import Measurement
from upstelemetry.core.ports import PublisherPort, SnapshotSourcePort, StatusStoragePort
from upstelemetry.core.snapshot import measurement_from_snapshot

logger = logging.getLogger(__name__)

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def epoch_millis(moment: datetime) -> int:
    """Milliseconds since the Unix epoch for an aware or local datetime.

    Computed with integer arithmetic, so the millisecond part is exact.
    """
    if moment.tzinfo is None:
        moment = moment.astimezone()
    return (moment - _EPOCH) // timedelta(milliseconds=1)


@dataclass(frozen=True)
class CycleResult:
    """Outcome of a completed cycle.

    Attributes:
        status_code: HTTP status returned by the metrics backend.
        measurement: The measurement that was sent.
        snapshot_size: Number of keys in the stored snapshot.
    """

    status_code: int
    measurement: Measurement
    snapshot_size: int

    @property
    def accepted(self) -> bool:
        return 200 <= self.status_code < 300


class CollectionCycle:
    """Fetch a snapshot, persist it, and publish the power measurement.

    Errors from any step propagate unchanged; a failing step stops the
    cycle before the next one starts.
    """

    def __init__(
        self,
        source: SnapshotSourcePort,
        storage: StatusStoragePort,
        publisher: PublisherPort,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._source = source
        self._storage = storage
        self._publisher = publisher
        self._clock = clock or (lambda: datetime.now().astimezone())

    async def run(self) -> CycleResult:
        snapshot = await self._source.fetch()
        now = self._clock()

        await self._storage.upsert(snapshot, now)

        measurement = measurement_from_snapshot(snapshot, epoch_millis(now))
        result = CycleResult(
            status_code=await self._publisher.publish(measurement),
            measurement=measurement,
            snapshot_size=len(snapshot),
        )
        if result.accepted:
            logger.debug(
                "Metrics backend accepted the measurement (%d)", result.status_code
            )
        else:
            logger.warning(
                "Metrics backend answered with status %d", result.status_code
            )
        return result
