"""In-memory sender that records what would be sent to Wavefront."""

from collections.abc import Mapping, Sequence, Set
from dataclasses import dataclass, field

from appmetrics_wavefront.core.models import Centroid, HistogramGranularity


@dataclass(frozen=True)
class SentMetric:
    name: str
    value: float
    timestamp: int | None
    source: str
    tags: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class SentDeltaCounter:
    name: str
    value: float
    source: str
    tags: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class SentDistribution:
    name: str
    centroids: tuple[Centroid, ...]
    granularities: frozenset[HistogramGranularity]
    timestamp: int
    source: str
    tags: dict[str, str] = field(default_factory=dict)


class InMemoryWavefrontSender:
    """In-memory implementation of WavefrontSenderPort.

    Records every call in the order it was made. Suitable for testing and
    for inspecting what a reporter would send without a Wavefront endpoint.
    """

    def __init__(self) -> None:
        self.metrics: list[SentMetric] = []
        self.delta_counters: list[SentDeltaCounter] = []
        self.distributions: list[SentDistribution] = []

    def send_metric(
        self,
        name: str,
        value: float,
        timestamp: int | None,
        source: str,
        tags: Mapping[str, str],
    ) -> None:
        """Record a point."""
        self.metrics.append(SentMetric(name, value, timestamp, source, dict(tags)))

    def send_delta_counter(
        self,
        name: str,
        value: float,
        source: str,
        tags: Mapping[str, str],
    ) -> None:
        """Record a delta counter increment."""
        self.delta_counters.append(SentDeltaCounter(name, value, source, dict(tags)))

    def send_distribution(
        self,
        name: str,
        centroids: Sequence[Centroid],
        granularities: Set[HistogramGranularity],
        timestamp: int,
        source: str,
        tags: Mapping[str, str],
    ) -> None:
        """Record a distribution."""
        self.distributions.append(
            SentDistribution(
                name,
                tuple(centroids),
                frozenset(granularities),
                timestamp,
                source,
                dict(tags),
            )
        )

    def metric_names(self) -> list[str]:
        """Names of recorded points, in send order."""
        return [metric.name for metric in self.metrics]

    def call_count(self) -> int:
        """Total number of recorded calls of any kind."""
        return len(self.metrics) + len(self.delta_counters) + len(self.distributions)

    def clear(self) -> None:
        """Forget everything recorded so far."""
        self.metrics.clear()
        self.delta_counters.clear()
        self.distributions.clear()
