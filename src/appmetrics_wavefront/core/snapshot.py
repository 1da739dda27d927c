"""Decoding of raw snapshot entries into metric records.

The snapshot producer emits each metric as parallel column/value sequences
plus a tag list that also encodes the metric type. ``decode_entry`` turns
that shape into a ``MetricRecord`` once, so dispatch never has to look at
internal tags again.
"""

from collections.abc import Sequence
from datetime import datetime
from typing import NamedTuple

from appmetrics_wavefront.core.errors import ContractViolationError
from appmetrics_wavefront.core.fields import HistogramFields, MetricFields
from appmetrics_wavefront.core.models import (
    DistributionPayload,
    MetricKind,
    MetricRecord,
)
from appmetrics_wavefront.core.tags import (
    TagPairs,
    is_delta_counter,
    is_wavefront_histogram,
    resolve_kind,
    strip_internal_tags,
)

# Context the metrics framework reports its own bookkeeping metrics under.
INTERNAL_METRICS_CONTEXT = "appmetrics.internal"


class SnapshotEntry(NamedTuple):
    """One metric instance as emitted by the snapshot producer."""

    context: str
    name: str
    columns: Sequence[str]
    values: Sequence[object]
    tags: TagPairs
    timestamp: datetime


def pair_fields(columns: Sequence[str], values: Sequence[object]) -> dict[str, object]:
    """Zip column names with their values.

    Raises:
        ContractViolationError: If the sequences differ in length.
    """
    if len(columns) != len(values):
        raise ContractViolationError(
            f"Got {len(columns)} columns but {len(values)} values"
        )
    return dict(zip(columns, values))


def _distribution_payload(
    fields: dict[str, object], metric_fields: MetricFields
) -> DistributionPayload | None:
    key_column = metric_fields.histogram_column(HistogramFields.USER_MAX_VALUE)
    value_column = metric_fields.histogram_column(HistogramFields.USER_MIN_VALUE)
    if key_column not in fields or value_column not in fields:
        return None
    key, value = fields[key_column], fields[value_column]
    if not isinstance(key, str) or not isinstance(value, str):
        raise ContractViolationError(
            "Wavefront histogram distributions must be carried as strings"
        )
    return DistributionPayload(key=key, value=value)


def decode_entry(
    entry: SnapshotEntry, metric_fields: MetricFields | None = None
) -> MetricRecord:
    """Decode a raw snapshot entry into a MetricRecord.

    Args:
        entry: Raw entry from the snapshot producer.
        metric_fields: Column mapping used to find distribution carriers.
            Defaults to the framework's column names.

    Returns:
        MetricRecord with explicit kind and variant flags, and with internal
        tags removed.

    Raises:
        ContractViolationError: If columns and values differ in length.
        UnknownMetricKindError: If the metric type tag is missing or unknown.
    """
    metric_fields = metric_fields or MetricFields()
    fields = pair_fields(entry.columns, entry.values)
    kind = resolve_kind(entry.tags)

    is_delta = kind is MetricKind.COUNTER and is_delta_counter(entry.name, entry.tags)
    is_distribution = kind in (
        MetricKind.HISTOGRAM,
        MetricKind.TIMER,
    ) and is_wavefront_histogram(entry.tags)
    payload = _distribution_payload(fields, metric_fields) if is_distribution else None

    return MetricRecord(
        context=entry.context,
        name=entry.name,
        fields=fields,
        tags=strip_internal_tags(entry.tags),
        kind=kind,
        timestamp=entry.timestamp,
        is_delta=is_delta,
        is_distribution=is_distribution,
        distribution_payload=payload,
    )
