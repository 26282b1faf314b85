"""Snapshot source backed by the NUT ``upsc`` command."""

import asyncio
import logging

from upstelemetry.core.errors import SnapshotError
from upstelemetry.core.snapshot import parse_upsc_output

logger = logging.getLogger(__name__)


class UpscSnapshotSource:
    """Run ``upsc <ups>`` and parse its output.

    Implements SnapshotSourcePort.
    """

    def __init__(self, ups: str, command: str = "upsc") -> None:
        """Initialize the source.

        Args:
            ups: UPS identifier passed to upsc, e.g. "myups@localhost".
            command: Executable to run.
        """
        self._ups = ups
        self._command = command

    async def fetch(self) -> dict[str, str]:
        """Run upsc once and return the parsed snapshot.

        Raises:
            SnapshotError: If the command cannot be started or exits non-zero.
        """
        logger.debug("Running %s %s", self._command, self._ups)
        try:
            proc = await asyncio.create_subprocess_exec(
                self._command,
                self._ups,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as exc:
            raise SnapshotError(f"Failed to execute {self._command}: {exc}") from exc

        stdout, stderr = await proc.communicate()
        if proc.returncode != 0:
            detail = stderr.decode("utf-8", errors="replace").strip()
            raise SnapshotError(
                f"{self._command} {self._ups} exited with status "
                f"{proc.returncode}: {detail}"
            )

        snapshot = parse_upsc_output(stdout.decode("utf-8", errors="replace"))
        logger.debug("Read %d variables from %s", len(snapshot), self._ups)
        return snapshot


class StaticSnapshotSource:
    """Snapshot source returning a fixed mapping.

    Useful for tests and for replaying a captured snapshot.
    """

    def __init__(self, snapshot: dict[str, str]) -> None:
        self._snapshot = dict(snapshot)

    async def fetch(self) -> dict[str, str]:
        return dict(self._snapshot)
