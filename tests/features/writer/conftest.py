"""BDD step definitions for windowed export features."""

from collections.abc import Sequence
from dataclasses import dataclass, field

import pytest
from pytest_bdd import given, parsers, then, when

from metricsbridge.adapters.transport import InMemoryTransport
from metricsbridge.core.config import MappingConfig
from metricsbridge.core.errors import TransportError
from metricsbridge.core.models import LabelRule, MappingRule, OutputRecord, TagRef
from metricsbridge.core.samples import counter
from metricsbridge.writer import CloudMonitoringWriter


class SwitchableTransport(InMemoryTransport):
    """In-memory transport that can be told to reject every batch."""

    def __init__(self) -> None:
        super().__init__()
        self.failing = False

    def send(self, batch: Sequence[OutputRecord]) -> None:
        if self.failing:
            raise TransportError("backend unavailable")
        super().send(batch)


@dataclass
class WriterScenarioContext:
    """State shared between the steps of one scenario."""

    now: float = 0.0
    poll_interval: int = 60
    rules: list[MappingRule] = field(default_factory=list)
    transport: SwitchableTransport = field(default_factory=SwitchableTransport)
    writer: CloudMonitoringWriter | None = None

    def get_writer(self) -> CloudMonitoringWriter:
        if self.writer is None:
            self.writer = CloudMonitoringWriter(clock=lambda: self.now)
            self.writer.initialize_with(
                MappingConfig(tuple(self.rules)),
                self.transport,
                poll_interval_seconds=self.poll_interval,
            )
        return self.writer


@pytest.fixture
def ctx() -> WriterScenarioContext:
    """Fresh scenario context for each test."""
    return WriterScenarioContext()


# === Background Steps ===
@given(parsers.parse("a writer polling every {seconds:d} seconds"))
def step_poll_interval(ctx: WriterScenarioContext, seconds: int) -> None:
    ctx.poll_interval = seconds


@given(parsers.parse('a mapping for "{name}" summed per "{tag}" tag'))
def step_mapping(ctx: WriterScenarioContext, name: str, tag: str) -> None:
    ctx.rules.append(
        MappingRule(
            source_metric_name=name,
            output_metric_type=f"custom.googleapis.com/{name}",
            output_resource_type="global",
            metric_label_rules=(LabelRule(tag, TagRef(tag)),),
        )
    )


# === Action Steps ===
@when(
    parsers.parse(
        '{n:d} samples of "{name}" with value {value:d} are written at {now:d}'
    )
)
def step_write(
    ctx: WriterScenarioContext, n: int, name: str, value: int, now: int
) -> None:
    ctx.now = float(now)
    samples = [counter(name, value, {"app": "pipeline-1"}) for _ in range(n)]
    ctx.get_writer().write(samples)


@when("the transport starts failing")
def step_transport_fails(ctx: WriterScenarioContext) -> None:
    ctx.transport.failing = True


@when("the transport recovers")
def step_transport_recovers(ctx: WriterScenarioContext) -> None:
    ctx.transport.failing = False


# === Assertion Steps ===
@then(parsers.parse("{n:d} record is exported with value {value:d}"))
def step_one_record(ctx: WriterScenarioContext, n: int, value: int) -> None:
    records = ctx.transport.records
    assert len(records) == n
    assert records[-1].value == value


@then(parsers.parse("{n:d} records are exported"))
def step_n_records(ctx: WriterScenarioContext, n: int) -> None:
    assert len(ctx.transport.records) == n


@then(parsers.parse("the last record covers {start:d} to {end:d}"))
def step_last_interval(ctx: WriterScenarioContext, start: int, end: int) -> None:
    interval = ctx.transport.records[-1].interval
    assert (interval.start, interval.end) == (start, end)


@then(parsers.parse("the watermark is {value:d}"))
def step_watermark(ctx: WriterScenarioContext, value: int) -> None:
    assert ctx.get_writer().watermark == value
