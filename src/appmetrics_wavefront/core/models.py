"""Core domain models for metric snapshots and Wavefront points."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class MetricKind(Enum):
    """Metric type as declared by the metrics framework's type tag."""

    APDEX = "apdex"
    COUNTER = "counter"
    GAUGE = "gauge"
    HISTOGRAM = "histogram"
    METER = "meter"
    TIMER = "timer"


class HistogramGranularity(Enum):
    """Time bucket a distribution is aggregated into by the backend."""

    MINUTE = "minute"
    HOUR = "hour"
    DAY = "day"


@dataclass(frozen=True)
class Centroid:
    """A cluster of samples within a distribution.

    Attributes:
        value: Mean of the samples in the cluster.
        weight: Number of samples in the cluster.
    """

    value: float
    weight: int


@dataclass(frozen=True)
class Distribution:
    """Centroids accumulated during one aggregation interval.

    Attributes:
        timestamp: Start of the interval, epoch milliseconds.
        centroids: Centroids of the interval.
    """

    timestamp: int
    centroids: tuple[Centroid, ...] = ()


@dataclass(frozen=True)
class DistributionPayload:
    """Serialized distributions carried by a Wavefront histogram snapshot.

    Attributes:
        key: Serialized distribution timestamps.
        value: Serialized centroid lists, one per timestamp.
    """

    key: str
    value: str


@dataclass(frozen=True)
class MetricRecord:
    """A single metric instance of one flush cycle, decoded at the snapshot boundary.

    Attributes:
        context: Metric context (e.g., "application.http").
        name: Metric name within the context.
        fields: Column name to value, as reported by the framework.
        tags: Point tags in their original order, with the metric type and
            Wavefront marker tags removed. Keys may repeat.
        kind: Declared metric type.
        timestamp: Snapshot timestamp.
        is_delta: Counter is reported as a Wavefront delta counter.
        is_distribution: Histogram is reported as a Wavefront distribution.
        distribution_payload: Serialized distributions of a Wavefront
            histogram, when the snapshot carried them.
    """

    context: str
    name: str
    fields: dict[str, object]
    tags: tuple[tuple[str, str], ...]
    kind: MetricKind
    timestamp: datetime
    is_delta: bool = False
    is_distribution: bool = False
    distribution_payload: DistributionPayload | None = field(default=None)
