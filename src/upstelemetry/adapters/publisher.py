"""HTTP publisher for line-protocol writes.

Sends one encoded measurement to an InfluxDB 3 compatible
``/api/v3/write_lp`` endpoint using httpx.

Any HTTP response counts as delivered: the status code is returned as
received and interpreting 4xx/5xx is left to the caller. Only failures
below HTTP (DNS, refused connections, TLS, timeouts, cancellation,
malformed responses) raise TransportError. Nothing is retried.
"""

import asyncio
import logging

import httpx

from upstelemetry.core.encoding.line_protocol import encode_measurement
from upstelemetry.core.errors import ConfigError, TransportError, TransportErrorKind
from upstelemetry.core.models import ConnectionConfig, Measurement

logger = logging.getLogger(__name__)

CONTENT_TYPE = "text/plain; charset=utf-8"


def build_endpoint(config: ConnectionConfig) -> str:
    """Build the write URL for a connection.

    The database name is inserted without URL-encoding.

    Example:
        ``https://metrics.local:8181/api/v3/write_lp?db=ups&precision=millisecond``
    """
    return (
        f"{config.scheme.url_scheme}://{config.host}:{config.port}"
        f"/api/v3/write_lp?db={config.database}&precision=millisecond"
    )


def build_headers(config: ConnectionConfig) -> dict[str, str]:
    """Build the request headers for a connection."""
    return {
        "Authorization": f"Bearer {config.token}",
        "Content-Type": CONTENT_TYPE,
    }


def _classify(exc: httpx.HTTPError) -> TransportErrorKind:
    """Map an httpx exception to a transport error kind."""
    if isinstance(exc, httpx.TimeoutException):
        return TransportErrorKind.TIMEOUT
    if isinstance(exc, httpx.ConnectError):
        return TransportErrorKind.CONNECT
    if isinstance(exc, (httpx.RemoteProtocolError, httpx.LocalProtocolError)):
        return TransportErrorKind.PROTOCOL
    return TransportErrorKind.OTHER


async def publish(
    config: ConnectionConfig,
    measurement: Measurement,
    *,
    timeout: float | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> int:
    """POST one measurement and return the response status code.

    The measurement is encoded completely before any network activity.

    Args:
        config: Connection settings.
        measurement: The measurement to send.
        timeout: Optional httpx timeout in seconds. None waits indefinitely.
        transport: Optional httpx transport (tests use httpx.MockTransport).

    Returns:
        The HTTP status code received, whatever its class.

    Raises:
        ConfigError: If the endpoint built from the config is not a valid URL.
        TransportError: If no HTTP response was received.
    """
    body = encode_measurement(measurement)
    url = build_endpoint(config)
    logger.debug("Posting %d bytes to %s", len(body), url)

    try:
        async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
            response = await client.post(
                url, headers=build_headers(config), content=body.encode("utf-8")
            )
    except httpx.InvalidURL as exc:
        raise ConfigError(f"Invalid metrics endpoint {url}: {exc}") from exc
    except httpx.HTTPError as exc:
        kind = _classify(exc)
        logger.debug("Write to %s failed (%s): %s", url, kind.value, exc)
        raise TransportError(
            f"Failed to send measurement to {config.host}:{config.port}: {exc}",
            kind=kind,
            cause=exc,
        ) from exc

    logger.debug("Write to %s answered %d", url, response.status_code)
    return response.status_code


async def publish_with_deadline(
    config: ConnectionConfig,
    measurement: Measurement,
    deadline: float,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> int:
    """Publish, aborting the request if it has not finished after ``deadline`` seconds.

    Raises:
        TransportError: With kind CANCELLED when the deadline expires, or
            any error publish() raises.
    """
    try:
        async with asyncio.timeout(deadline):
            return await publish(config, measurement, transport=transport)
    except TimeoutError as exc:
        raise TransportError(
            f"Send to {config.host}:{config.port} cancelled after {deadline}s",
            kind=TransportErrorKind.CANCELLED,
            cause=exc,
        ) from exc


class MetricsPublisher:
    """Publisher bound to one connection.

    Implements PublisherPort for the collection cycle.

    Example:
        ```python
        publisher = MetricsPublisher(settings.connection, deadline=10.0)
        status = await publisher.publish(measurement)
        ```
    """

    def __init__(
        self,
        config: ConnectionConfig,
        deadline: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config
        self._deadline = deadline
        self._transport = transport

    @property
    def endpoint(self) -> str:
        return build_endpoint(self._config)

    async def publish(self, measurement: Measurement) -> int:
        """Send the measurement and return the HTTP status code."""
        if self._deadline is None:
            return await publish(self._config, measurement, transport=self._transport)
        return await publish_with_deadline(
            self._config, measurement, self._deadline, transport=self._transport
        )
