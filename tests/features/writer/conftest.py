"""BDD step definitions for snapshot dispatch features."""

from dataclasses import dataclass, field
from datetime import datetime

import pytest
from pytest_bdd import given, parsers, then, when

from appmetrics_wavefront.adapters.senders.in_memory import InMemoryWavefrontSender
from appmetrics_wavefront.adapters.writer import MetricSnapshotWavefrontWriter
from appmetrics_wavefront.core import errors
from appmetrics_wavefront.core.encoding.distributions import serialize_distributions
from appmetrics_wavefront.core.models import Centroid, Distribution, HistogramGranularity
from appmetrics_wavefront.core.sdk_metrics import SdkMetricsRegistry
from appmetrics_wavefront.core.tags import delta_counter_tags, wavefront_histogram_tags


@dataclass
class DispatchScenarioContext:
    """State shared between the steps of one scenario."""

    sender: InMemoryWavefrontSender = field(default_factory=InMemoryWavefrontSender)
    sdk_metrics: SdkMetricsRegistry | None = None
    writer: MetricSnapshotWavefrontWriter | None = None
    exception_raised: Exception | None = None


@pytest.fixture
def ctx() -> DispatchScenarioContext:
    """Fresh scenario context for each test."""
    return DispatchScenarioContext()


def _table_pairs(datatable: list[list[str]]) -> list[tuple[str, str]]:
    """Rows of a key/value table, header row dropped."""
    return [(row[0], row[1]) for row in datatable[1:]]


def _split(full_name: str) -> tuple[str, str]:
    context, _, name = full_name.rpartition(".")
    return context, name


def _write(
    ctx: DispatchScenarioContext,
    full_name: str,
    columns: list[str],
    values: list[object],
    tags: tuple[tuple[str, str], ...] | list[tuple[str, str]],
) -> None:
    assert ctx.writer is not None
    context, name = _split(full_name)
    try:
        ctx.writer.write(context, name, columns, values, tags, datetime.now())
    except Exception as e:
        ctx.exception_raised = e


def _all_sent_tags(ctx: DispatchScenarioContext) -> list[dict[str, str]]:
    sent = [*ctx.sender.metrics, *ctx.sender.delta_counters, *ctx.sender.distributions]
    return [call.tags for call in sent]


# === Background Steps ===
@given("an in-memory Wavefront sender")
def step_sender(ctx: DispatchScenarioContext) -> None:
    ctx.sender = InMemoryWavefrontSender()
    ctx.sdk_metrics = SdkMetricsRegistry(ctx.sender, source="bdd")


@given("a snapshot writer with global tags:")
def step_writer(ctx: DispatchScenarioContext, datatable: list[list[str]]) -> None:
    ctx.writer = MetricSnapshotWavefrontWriter(
        ctx.sender,
        "bdd",
        dict(_table_pairs(datatable)),
        {HistogramGranularity.MINUTE},
        sdk_metrics=ctx.sdk_metrics,
    )


# === Write Steps ===
@when(parsers.parse('the counter "{full_name}" is written with value {value:d}'))
def step_write_counter(ctx: DispatchScenarioContext, full_name: str, value: int) -> None:
    _write(ctx, full_name, ["value"], [value], [("mtype", "counter")])


@when(parsers.parse('the delta counter "{full_name}" is written with value {value:d}'))
def step_write_delta_counter(
    ctx: DispatchScenarioContext, full_name: str, value: int
) -> None:
    _write(ctx, full_name, ["value"], [value], delta_counter_tags([("mtype", "counter")]))


@when(
    parsers.parse('the gauge "{full_name}" is written with value {value:g} and tags:')
)
def step_write_gauge_with_tags(
    ctx: DispatchScenarioContext,
    full_name: str,
    value: float,
    datatable: list[list[str]],
) -> None:
    tags = [("mtype", "gauge"), *_table_pairs(datatable)]
    _write(ctx, full_name, ["value"], [value], tags)


@when(
    parsers.parse(
        'the Wavefront histogram "{full_name}" is written with {n:d} distributions'
    )
)
def step_write_wavefront_histogram(
    ctx: DispatchScenarioContext, full_name: str, n: int
) -> None:
    payload = serialize_distributions(
        Distribution(1700000000000 + i * 60000, (Centroid(float(i), 1),)) for i in range(n)
    )
    _write(
        ctx,
        full_name,
        ["user.max", "user.min"],
        [payload.key, payload.value],
        wavefront_histogram_tags([("mtype", "histogram")]),
    )


@when(parsers.parse('a metric with type "{kind}" is written'))
def step_write_unknown_kind(ctx: DispatchScenarioContext, kind: str) -> None:
    _write(ctx, "application.mystery", ["value"], [1], [("mtype", kind)])


# === Assertion Steps ===
@then(parsers.parse('a point "{name}" with value {value:g} should be sent'))
def step_point_sent(ctx: DispatchScenarioContext, name: str, value: float) -> None:
    assert [(m.name, m.value) for m in ctx.sender.metrics] == [(name, value)]


@then(parsers.parse('a delta counter "{name}" with value {value:g} should be sent'))
def step_delta_counter_sent(
    ctx: DispatchScenarioContext, name: str, value: float
) -> None:
    assert [(c.name, c.value) for c in ctx.sender.delta_counters] == [(name, value)]


@then(parsers.parse('{n:d} distributions named "{name}" should be sent'))
def step_distributions_sent(ctx: DispatchScenarioContext, n: int, name: str) -> None:
    assert [d.name for d in ctx.sender.distributions] == [name] * n


@then("no point should be sent")
def step_no_point(ctx: DispatchScenarioContext) -> None:
    assert ctx.sender.metrics == []


@then("no delta counter should be sent")
def step_no_delta_counter(ctx: DispatchScenarioContext) -> None:
    assert ctx.sender.delta_counters == []


@then("nothing should be sent")
def step_nothing_sent(ctx: DispatchScenarioContext) -> None:
    assert ctx.sender.call_count() == 0


@then(parsers.parse('the sent tags should not contain "{key}"'))
def step_tags_exclude(ctx: DispatchScenarioContext, key: str) -> None:
    tag_sets = _all_sent_tags(ctx)
    assert tag_sets
    assert all(key not in tags for tags in tag_sets)


@then("the sent tags should be:")
def step_tags_equal(ctx: DispatchScenarioContext, datatable: list[list[str]]) -> None:
    expected = dict(_table_pairs(datatable))
    assert _all_sent_tags(ctx) == [expected]


@then(parsers.parse('the "{name}" counter should be {n:d}'))
def step_counter_value(ctx: DispatchScenarioContext, name: str, n: int) -> None:
    assert ctx.sdk_metrics is not None
    assert ctx.sdk_metrics.get_count(name) == n


@then(parsers.parse("the write should fail with {error_name}"))
def step_write_failed(ctx: DispatchScenarioContext, error_name: str) -> None:
    assert isinstance(ctx.exception_raised, getattr(errors, error_name))
