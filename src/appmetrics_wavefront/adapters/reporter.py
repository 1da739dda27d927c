"""Reporter that flushes metric snapshots to Wavefront.

The reporter is created once from ReporterOptions and owns the
self-observability registry. The enclosing scheduler calls ``flush`` once
per flush interval with the snapshot of that cycle.
"""

import logging
from collections.abc import Iterable

from appmetrics_wavefront._version import __version__
from appmetrics_wavefront.adapters.writer import MetricSnapshotWavefrontWriter
from appmetrics_wavefront.core.config import ReporterOptions
from appmetrics_wavefront.core.errors import InvalidOptionsError
from appmetrics_wavefront.core.sdk_metrics import DEFAULT_SDK_PREFIX, SdkMetricsRegistry
from appmetrics_wavefront.core.snapshot import SnapshotEntry

logger = logging.getLogger(__name__)


def semver_to_float(version: str) -> float:
    """Encode ``major.minor.patch`` as ``major.MMPP`` (e.g. 1.2.3 -> 1.0203).

    Pre-release and build suffixes are ignored. Missing parts count as 0.
    """
    core = version.split("-", 1)[0].split("+", 1)[0]
    parts = (core.split(".") + ["0", "0"])[:3]
    try:
        major, minor, patch = (int(part) for part in parts)
    except ValueError:
        return 0.0
    return float(f"{major}.{minor:02d}{patch:02d}")


class WavefrontReporter:
    """Reports metric snapshots through a Wavefront sender.

    Args:
        options: Validated reporter configuration.

    Example:
        ```python
        reporter = WavefrontReporter(ReporterOptions(sender=sender))
        ok = reporter.flush(snapshot_entries)
        ```
    """

    def __init__(self, options: ReporterOptions) -> None:
        if options is None:
            raise InvalidOptionsError("options must not be None")

        self._options = options
        self._sender = options.sender
        self._source = options.source
        self._global_tags = options.global_tags()
        self._granularities = options.histogram.granularities()
        self.flush_interval = options.flush_interval

        self.sdk_metrics = SdkMetricsRegistry(
            self._sender,
            source=self._source,
            tags=self._global_tags,
            prefix=DEFAULT_SDK_PREFIX,
        )
        self._reporter_errors = self.sdk_metrics.delta_counter("reporter.errors")
        sdk_version = semver_to_float(__version__)
        self.sdk_metrics.gauge("version", lambda: sdk_version)

        logger.info(
            "Using Wavefront reporter for source %s. Flush interval: %ss",
            self._source,
            self.flush_interval,
        )

    def create_writer(self) -> MetricSnapshotWavefrontWriter:
        """Create the writer for one flush cycle."""
        return MetricSnapshotWavefrontWriter(
            self._sender,
            self._source,
            self._global_tags,
            self._granularities,
            sdk_metrics=self.sdk_metrics,
            fields=self._options.fields,
            sanitize_names=self._options.sanitize_names,
        )

    def flush(self, entries: Iterable[SnapshotEntry]) -> bool:
        """Write one flush cycle's snapshot.

        Args:
            entries: Snapshot entries of the cycle, in producer order.

        Returns:
            True if every entry was written, False if the flush failed.
        """
        logger.debug("Flushing metrics snapshot")

        writer = self.create_writer()
        try:
            for entry in entries:
                writer.write(*entry)
        except Exception as e:
            self._reporter_errors.inc()
            logger.exception("Failed to flush metrics snapshot: %s", e)
            return False

        logger.debug("Flushed metrics snapshot")
        return True

    def report_sdk_metrics(self) -> None:
        """Send the reporter's own metrics through the sender."""
        self.sdk_metrics.report()
