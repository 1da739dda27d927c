"""Writer that translates metric snapshots into Wavefront points.

One writer serves one flush cycle. The snapshot producer calls ``write`` for
each metric instance; the writer picks the columns each metric type reports,
sends them through a WavefrontSenderPort and counts what it reported.

Example:
    ```python
    writer = MetricSnapshotWavefrontWriter(sender, "web-01", {"env": "prod"}, set())
    writer.write(
        "application", "requests", ["value"], [42], [("mtype", "counter")], now
    )
    # sender.send_metric("application.requests.count", 42.0, ...)
    ```
"""

from collections.abc import Iterable, Mapping, Sequence, Set
from datetime import datetime, timezone

from appmetrics_wavefront.core.encoding.distributions import deserialize_distributions
from appmetrics_wavefront.core.errors import MissingFieldError
from appmetrics_wavefront.core.fields import (
    USER_VALUE_FIELDS,
    GaugeFields,
    MetricFields,
)
from appmetrics_wavefront.core.models import (
    HistogramGranularity,
    MetricKind,
    MetricRecord,
)
from appmetrics_wavefront.core.naming import concat, sanitize
from appmetrics_wavefront.core.ports import WavefrontSenderPort
from appmetrics_wavefront.core.sdk_metrics import SdkMetricsRegistry
from appmetrics_wavefront.core.snapshot import (
    INTERNAL_METRICS_CONTEXT,
    SnapshotEntry,
    decode_entry,
)
from appmetrics_wavefront.core.tags import DELTA_PREFIX, TagPairs, filter_tags

# Counters report a column named "value" as "count".
VALUE_COLUMN = "value"
COUNTER_VALUE_SUFFIX = "count"


def to_epoch_millis(timestamp: datetime) -> int:
    """Convert a snapshot timestamp to epoch milliseconds, naive meaning UTC."""
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=timezone.utc)
    return int(timestamp.timestamp() * 1000)


class _ReportedCounters:
    """Per-kind self-observability counters of a writer."""

    def __init__(self, registry: SdkMetricsRegistry) -> None:
        self.gauges = registry.counter("gauges.reported")
        self.delta_counters = registry.counter("delta_counters.reported")
        self.counters = registry.counter("counters.reported")
        self.wavefront_histograms = registry.counter("wavefront_histograms.reported")
        self.histograms = registry.counter("histograms.reported")
        self.meters = registry.counter("meters.reported")
        self.timers = registry.counter("timers.reported")
        self.apdexes = registry.counter("apdexes.reported")
        self.errors = registry.counter("writer.errors")


class MetricSnapshotWavefrontWriter:
    """Writes metric snapshots to a Wavefront sender.

    Args:
        sender: Sender the points are handed to.
        source: Source every point is reported for.
        global_tags: Tags applied to every point, overridden by point tags.
        granularities: Granularities Wavefront histograms are reported at.
        sdk_metrics: Registry for the writer's own counters. None disables them.
        fields: Column mapping of the metrics framework.
        sanitize_names: Replace characters Wavefront does not accept in
            metric names. Off by default, since senders sanitize names.
    """

    def __init__(
        self,
        sender: WavefrontSenderPort,
        source: str,
        global_tags: Mapping[str, str] | None,
        granularities: Set[HistogramGranularity],
        sdk_metrics: SdkMetricsRegistry | None = None,
        fields: MetricFields | None = None,
        sanitize_names: bool = False,
    ) -> None:
        self._sender = sender
        self._source = source
        self._global_tags = dict(global_tags or {})
        self._granularities = frozenset(granularities)
        self._fields = fields or MetricFields()
        self._sanitize_names = sanitize_names
        self._reported = (
            _ReportedCounters(sdk_metrics) if sdk_metrics is not None else None
        )

    def write(
        self,
        context: str,
        name: str,
        columns: Sequence[str],
        values: Sequence[object],
        tags: TagPairs,
        timestamp: datetime,
    ) -> None:
        """Write one metric instance.

        Metrics of the framework's internal context are skipped. Any error is
        counted once in ``writer.errors`` and re-raised.

        Raises:
            ContractViolationError: If the entry is malformed.
            DistributionDecodeError: If a Wavefront histogram payload is malformed.
        """
        # The framework's own bookkeeping metrics are not reported.
        if context == INTERNAL_METRICS_CONTEXT:
            return

        try:
            record = decode_entry(
                SnapshotEntry(context, name, columns, values, tags, timestamp),
                self._fields,
            )
            self._dispatch(record)
        except Exception:
            if self._reported is not None:
                self._reported.errors.inc()
            raise

    def write_value(
        self,
        context: str,
        name: str,
        field: str,
        value: object,
        tags: TagPairs,
        timestamp: datetime,
    ) -> None:
        """Write one metric instance that reports a single column."""
        self.write(context, name, [field], [value], tags, timestamp)

    def write_record(self, record: MetricRecord) -> None:
        """Write a metric instance that was already decoded."""
        if record.context == INTERNAL_METRICS_CONTEXT:
            return

        try:
            self._dispatch(record)
        except Exception:
            if self._reported is not None:
                self._reported.errors.inc()
            raise

    def _dispatch(self, record: MetricRecord) -> None:
        reported = self._reported
        kind = record.kind

        if kind is MetricKind.APDEX:
            self._write_fields(record, self._fields.apdex.values())
            if reported:
                reported.apdexes.inc()
        elif kind is MetricKind.COUNTER:
            self._write_counter(record)
            if reported:
                counter = reported.delta_counters if record.is_delta else reported.counters
                counter.inc()
        elif kind is MetricKind.GAUGE:
            self._write_gauge(record)
            if reported:
                reported.gauges.inc()
        elif kind is MetricKind.HISTOGRAM:
            self._write_histogram(record)
            if reported:
                histogram = (
                    reported.wavefront_histograms
                    if record.is_distribution
                    else reported.histograms
                )
                histogram.inc()
        elif kind is MetricKind.METER:
            self._write_fields(record, self._fields.meter.values())
            if reported:
                reported.meters.inc()
        elif kind is MetricKind.TIMER:
            self._write_fields(record, self._fields.meter.values())
            self._write_histogram(record)
            if reported:
                reported.timers.inc()

    def _write_counter(self, record: MetricRecord) -> None:
        # The sender's delta counter API applies the delta prefix itself.
        name = record.name.removeprefix(DELTA_PREFIX)
        for column in self._fields.counter.values():
            if column not in record.fields:
                continue
            suffix = COUNTER_VALUE_SUFFIX if column == VALUE_COLUMN else column
            if record.is_delta:
                # Delta counters are aggregated by the backend, which owns their timestamps.
                self._sender.send_delta_counter(
                    self._metric_name(record.context, name, suffix),
                    float(record.fields[column]),
                    self._source,
                    filter_tags(record.tags, self._global_tags),
                )
            else:
                self._send_point(record, suffix, record.fields[column])

    def _write_gauge(self, record: MetricRecord) -> None:
        column = self._fields.gauge.get(GaugeFields.VALUE)
        if column is None or column not in record.fields:
            raise MissingFieldError(
                f"Gauge {record.context}.{record.name} has no {column!r} field"
            )
        self._send_point(record, column, record.fields[column])

    def _write_histogram(self, record: MetricRecord) -> None:
        if record.is_distribution:
            self._write_distributions(record)
            return

        for role, column in self._fields.histogram.items():
            # User values are strings, never numbers.
            if role in USER_VALUE_FIELDS:
                continue
            if column in record.fields:
                self._send_point(record, column, record.fields[column])

    def _write_distributions(self, record: MetricRecord) -> None:
        if record.distribution_payload is None:
            return

        name = self._metric_name(record.context, record.name)
        tags = filter_tags(record.tags, self._global_tags)
        for distribution in deserialize_distributions(record.distribution_payload):
            self._sender.send_distribution(
                name,
                list(distribution.centroids),
                self._granularities,
                distribution.timestamp,
                self._source,
                tags,
            )

    def _write_fields(self, record: MetricRecord, columns: Iterable[str]) -> None:
        for column in columns:
            if column in record.fields:
                self._send_point(record, column, record.fields[column])

    def _send_point(self, record: MetricRecord, suffix: str, value: object) -> None:
        self._sender.send_metric(
            self._metric_name(record.context, record.name, suffix),
            float(value),  # type: ignore[arg-type]
            to_epoch_millis(record.timestamp),
            self._source,
            filter_tags(record.tags, self._global_tags),
        )

    def _metric_name(self, *components: str) -> str:
        name = concat(*components)
        return sanitize(name) if self._sanitize_names else name
