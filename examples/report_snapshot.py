"""Report one flush cycle to an in-memory sender and print what was sent.

Run with:
    python examples/report_snapshot.py

Swap InMemoryWavefrontSender for any object implementing WavefrontSenderPort
(e.g. a wrapper around a Wavefront proxy or direct ingestion client) to
report to a real Wavefront instance.
"""

import logging
from datetime import datetime, timezone

from appmetrics_wavefront import (
    ApplicationTags,
    Centroid,
    Distribution,
    HistogramOptions,
    InMemoryWavefrontSender,
    ReporterOptions,
    SnapshotEntry,
    WavefrontReporter,
)
from appmetrics_wavefront.core.encoding import serialize_distributions
from appmetrics_wavefront.core.tags import delta_counter_tags, wavefront_histogram_tags


def build_snapshot(now: datetime) -> list[SnapshotEntry]:
    """A snapshot like the one a metrics framework emits on each flush."""
    distributions = serialize_distributions(
        [Distribution(int(now.timestamp() * 1000), (Centroid(12.5, 4), Centroid(40.0, 1)))]
    )
    return [
        SnapshotEntry(
            "application", "requests", ["value"], [128],
            [("mtype", "counter"), ("route", "/cart")], now,
        ),
        SnapshotEntry(
            "application", "errors", ["value"], [3],
            delta_counter_tags([("mtype", "counter")]), now,
        ),
        SnapshotEntry("process", "memory", ["value"], [512.0], [("mtype", "gauge")], now),
        SnapshotEntry(
            "application", "checkout",
            ["count.meter", "rate1m", "rate5m", "rate15m", "rate.mean"],
            [42, 0.7, 0.6, 0.5, 0.65], [("mtype", "meter")], now,
        ),
        SnapshotEntry(
            "application", "latency",
            ["count.hist", "user.max", "user.min"],
            [5, distributions.key, distributions.value],
            wavefront_histogram_tags([("mtype", "histogram")]), now,
        ),
    ]  # fmt: skip


def main() -> None:
    logging.basicConfig(level=logging.DEBUG)

    sender = InMemoryWavefrontSender()
    reporter = WavefrontReporter(
        ReporterOptions(
            sender=sender,
            source="example-host",
            application_tags=ApplicationTags("shop", "checkout", cluster="us-west"),
            histogram=HistogramOptions(
                report_minute_distribution=True, report_hour_distribution=True
            ),
        )
    )

    ok = reporter.flush(build_snapshot(datetime.now(timezone.utc)))
    reporter.report_sdk_metrics()

    print(f"Flush succeeded: {ok}")
    for metric in sender.metrics:
        print(f"point        {metric.name} = {metric.value} {metric.tags}")
    for counter in sender.delta_counters:
        print(f"delta        {counter.name} += {counter.value}")
    for distribution in sender.distributions:
        granularities = sorted(g.value for g in distribution.granularities)
        print(f"distribution {distribution.name} {distribution.centroids} {granularities}")


if __name__ == "__main__":
    main()
