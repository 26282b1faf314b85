"""BDD step definitions for the publish cycle feature."""

import asyncio
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any

import httpx
import pytest
from pytest_bdd import given, parsers, then, when
from tests.transport_helpers import RecordingTransport

from upstelemetry.adapters.publisher import MetricsPublisher
from upstelemetry.adapters.storage import InMemoryStatusStorage
from upstelemetry.adapters.upsc import StaticSnapshotSource
from upstelemetry.core.errors import ConfigError, TransportError, UpsTelemetryError
from upstelemetry.core.models import ConnectionConfig, Scheme
from upstelemetry.runtime.cli import run_once
from upstelemetry.runtime.cycle import CollectionCycle, CycleResult


@dataclass
class CycleScenarioContext:
    """Mutable state shared between the steps of one scenario."""

    snapshot: dict[str, str] = field(default_factory=dict)
    storage: InMemoryStatusStorage = field(default_factory=InMemoryStatusStorage)
    transport: RecordingTransport = field(default_factory=RecordingTransport)
    config: ConnectionConfig | None = None
    config_lines: list[str] = field(default_factory=list)
    now: datetime | None = None
    result: CycleResult | None = None
    error: Exception | None = None


@pytest.fixture
def ctx() -> CycleScenarioContext:
    """Fresh scenario context for each test."""
    return CycleScenarioContext()


def _run(coro: Any) -> Any:
    return asyncio.run(coro)


# === Background Steps ===
@given("a upsc snapshot")
def step_snapshot(ctx: CycleScenarioContext, datatable: list[list[str]]) -> None:
    header, *rows = datatable
    assert header == ["key", "value"]
    ctx.snapshot = {key: value for key, value in rows}


@given("in-memory status storage")
def step_storage(ctx: CycleScenarioContext) -> None:
    ctx.storage = InMemoryStatusStorage()


@given(parsers.parse("the clock reads {millis:d} milliseconds"))
def step_clock(ctx: CycleScenarioContext, millis: int) -> None:
    epoch = datetime(1970, 1, 1, tzinfo=timezone.utc)
    ctx.now = epoch + timedelta(milliseconds=millis)


# === Server Steps ===
@given(
    parsers.parse(
        'a metrics server at "{scheme}://{host}:{port:d}" for database "{database}" '
        "answering {status:d}"
    )
)
def step_server(
    ctx: CycleScenarioContext,
    scheme: str,
    host: str,
    port: int,
    database: str,
    status: int,
) -> None:
    ctx.config = ConnectionConfig(
        token="s3cr3t",
        database=database,
        host=host,
        scheme=Scheme(scheme),
        port=port,
    )
    ctx.transport = RecordingTransport(status_code=status)


@given("an unreachable metrics server")
def step_unreachable(ctx: CycleScenarioContext) -> None:
    ctx.config = ConnectionConfig(token="s3cr3t", database="ups", host="metrics.local")
    ctx.transport.error = httpx.ConnectError("Connection refused")


@given(parsers.parse('a configuration file for "{host}" and database "{database}"'))
def step_config_file(ctx: CycleScenarioContext, host: str, database: str) -> None:
    ctx.config_lines = [
        f"influx_host = {host}",
        "influx_token = s3cr3t",
        f"influx_database = {database}",
    ]


@given(parsers.parse('the "{setting}" line is removed from the configuration file'))
def step_remove_setting(ctx: CycleScenarioContext, setting: str) -> None:
    ctx.config_lines = [
        line for line in ctx.config_lines if not line.startswith(f"{setting} ")
    ]


# === Actions ===
@when("the collection cycle runs")
def step_run_cycle(ctx: CycleScenarioContext) -> None:
    assert ctx.config is not None
    cycle = CollectionCycle(
        source=StaticSnapshotSource(ctx.snapshot),
        storage=ctx.storage,
        publisher=MetricsPublisher(ctx.config, transport=ctx.transport),
        clock=lambda: ctx.now,
    )
    try:
        ctx.result = _run(cycle.run())
    except UpsTelemetryError as exc:
        ctx.error = exc


@when("the collection run starts from that configuration")
def step_run_from_config(ctx: CycleScenarioContext, tmp_path: Path) -> None:
    path = tmp_path / "database.conf"
    path.write_text("\n".join(ctx.config_lines) + "\n", encoding="utf-8")
    try:
        ctx.result = _run(
            run_once(
                path,
                StaticSnapshotSource(ctx.snapshot),
                publisher_factory=lambda config, deadline: MetricsPublisher(
                    config, deadline=deadline, transport=ctx.transport
                ),
                storage_factory=lambda db_path: ctx.storage,
            )
        )
    except UpsTelemetryError as exc:
        ctx.error = exc


# === Assertions ===
@then(parsers.parse("the cycle reports status {status:d}"))
def step_status(ctx: CycleScenarioContext, status: int) -> None:
    assert ctx.error is None
    assert ctx.result is not None
    assert ctx.result.status_code == status


@then(parsers.parse('exactly one request was sent to "{url}"'))
def step_one_request(ctx: CycleScenarioContext, url: str) -> None:
    assert len(ctx.transport.requests) == 1
    request = ctx.transport.requests[0]
    assert request.method == "POST"
    assert str(request.url) == url
    assert request.headers["Authorization"] == "Bearer s3cr3t"
    assert request.headers["Content-Type"] == "text/plain; charset=utf-8"


@then("the request body is:")
def step_request_body(ctx: CycleScenarioContext, docstring: str) -> None:
    assert ctx.transport.requests[0].content.decode("utf-8") == docstring.strip()


@then(parsers.parse('the status table contains "{key}" = "{value}"'))
def step_status_table(ctx: CycleScenarioContext, key: str, value: str) -> None:
    assert _run(ctx.storage.get(key)) == value


@then(parsers.parse('the cycle fails with a "{kind}" transport error'))
def step_transport_error(ctx: CycleScenarioContext, kind: str) -> None:
    assert isinstance(ctx.error, TransportError)
    assert ctx.error.kind.value == kind


@then("a configuration error is raised")
def step_config_error(ctx: CycleScenarioContext) -> None:
    assert isinstance(ctx.error, ConfigError)


@then("no request was sent")
def step_no_request(ctx: CycleScenarioContext) -> None:
    assert ctx.transport.requests == []


@then("the status table is empty")
def step_status_table_empty(ctx: CycleScenarioContext) -> None:
    assert _run(ctx.storage.count()) == 0
