"""Port interfaces for the Wavefront sender and snapshot writers.

The sender owns connections, batching and retries. The writer depends only
on this protocol, so any Wavefront client (proxy or direct ingestion) can be
plugged in by wrapping it.
"""

from collections.abc import Mapping, Sequence, Set
from datetime import datetime
from typing import Protocol, runtime_checkable

from appmetrics_wavefront.core.models import Centroid, HistogramGranularity
from appmetrics_wavefront.core.tags import TagPairs


@runtime_checkable
class WavefrontSenderPort(Protocol):
    """Port for sending points to Wavefront.

    Each call returns once the point has been queued or rejected.
    Adapters implementing this protocol: InMemoryWavefrontSender.
    """

    def send_metric(
        self,
        name: str,
        value: float,
        timestamp: int | None,
        source: str,
        tags: Mapping[str, str],
    ) -> None:
        """Send a single point.

        Args:
            name: Metric name.
            value: Point value.
            timestamp: Epoch milliseconds, or None to let the backend stamp it.
            source: Source the point is reported for.
            tags: Point tags.
        """
        ...

    def send_delta_counter(
        self,
        name: str,
        value: float,
        source: str,
        tags: Mapping[str, str],
    ) -> None:
        """Send a delta counter increment, aggregated by the backend.

        ``name`` arrives without the delta prefix. Implementations apply the
        prefix ("∆") themselves, as Wavefront delta counter APIs do.
        """
        ...

    def send_distribution(
        self,
        name: str,
        centroids: Sequence[Centroid],
        granularities: Set[HistogramGranularity],
        timestamp: int,
        source: str,
        tags: Mapping[str, str],
    ) -> None:
        """Send a distribution to be aggregated at each granularity."""
        ...


@runtime_checkable
class SnapshotWriterPort(Protocol):
    """Port for consumers of metric snapshots.

    The snapshot producer calls ``write`` once per metric instance per flush.
    """

    def write(
        self,
        context: str,
        name: str,
        columns: Sequence[str],
        values: Sequence[object],
        tags: TagPairs,
        timestamp: datetime,
    ) -> None:
        """Write one metric instance with all of its columns."""
        ...

    def write_value(
        self,
        context: str,
        name: str,
        field: str,
        value: object,
        tags: TagPairs,
        timestamp: datetime,
    ) -> None:
        """Write one metric instance that has a single column."""
        ...
