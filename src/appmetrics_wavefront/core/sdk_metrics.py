"""Self-observability metrics of the reporter itself.

The registry is created by the reporter and handed to each writer, so the
counters live exactly as long as the reporter does.
"""

import threading
from collections.abc import Callable, Mapping

from appmetrics_wavefront.core.naming import concat
from appmetrics_wavefront.core.ports import WavefrontSenderPort

DEFAULT_SDK_PREFIX = "~sdk.python.app_metrics"


class SdkCounter:
    """Monotonic counter, safe to increment from overlapping flushes."""

    def __init__(self) -> None:
        self._count = 0
        self._lock = threading.Lock()

    def inc(self, n: int = 1) -> None:
        with self._lock:
            self._count += n

    def dec(self, n: int = 1) -> None:
        with self._lock:
            self._count -= n

    @property
    def count(self) -> int:
        with self._lock:
            return self._count


class SdkDeltaCounter(SdkCounter):
    """Counter whose reported value is the increment since the last report."""


class SdkMetricsRegistry:
    """Registry of counters and gauges describing the reporter's own work.

    Args:
        sender: Sender the metrics are reported through.
        source: Source the metrics are reported for.
        tags: Tags attached to every metric.
        prefix: Prefix of every metric name.
    """

    def __init__(
        self,
        sender: WavefrontSenderPort,
        source: str = "",
        tags: Mapping[str, str] | None = None,
        prefix: str = DEFAULT_SDK_PREFIX,
    ) -> None:
        self._sender = sender
        self._source = source
        self._tags = dict(tags or {})
        self._prefix = prefix
        self._counters: dict[str, SdkCounter] = {}
        self._delta_counters: dict[str, SdkDeltaCounter] = {}
        self._gauges: dict[str, Callable[[], float]] = {}
        self._lock = threading.Lock()

    def counter(self, name: str) -> SdkCounter:
        """Return the counter registered under ``name``, creating it if needed."""
        with self._lock:
            return self._counters.setdefault(name, SdkCounter())

    def delta_counter(self, name: str) -> SdkDeltaCounter:
        """Return the delta counter registered under ``name``, creating it if needed."""
        with self._lock:
            return self._delta_counters.setdefault(name, SdkDeltaCounter())

    def gauge(self, name: str, supplier: Callable[[], float]) -> None:
        """Register a gauge whose value is read from ``supplier`` on report."""
        with self._lock:
            self._gauges[name] = supplier

    def get_count(self, name: str) -> int:
        """Current value of a counter or delta counter, 0 if not registered."""
        with self._lock:
            counter = self._counters.get(name) or self._delta_counters.get(name)
        return counter.count if counter is not None else 0

    def report(self) -> None:
        """Send every registered metric through the sender.

        Delta counters are reported only when non-zero, and are decremented
        by the amount sent so increments made during the report are kept.
        """
        with self._lock:
            gauges = dict(self._gauges)
            counters = dict(self._counters)
            delta_counters = dict(self._delta_counters)

        for name, supplier in gauges.items():
            self._sender.send_metric(
                concat(self._prefix, name), float(supplier()), None, self._source, self._tags
            )
        for name, counter in counters.items():
            self._sender.send_metric(
                concat(self._prefix, name),
                float(counter.count),
                None,
                self._source,
                self._tags,
            )
        for name, delta_counter in delta_counters.items():
            count = delta_counter.count
            if count == 0:
                continue
            self._sender.send_delta_counter(
                concat(self._prefix, name), float(count), self._source, self._tags
            )
            delta_counter.dec(count)
