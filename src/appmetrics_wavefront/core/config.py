"""Reporter configuration.

Options are immutable and validated when constructed, so a reporter can
never be created from an invalid configuration.
"""

import socket
from collections.abc import Mapping
from dataclasses import dataclass, field

from appmetrics_wavefront.core.errors import InvalidOptionsError
from appmetrics_wavefront.core.fields import MetricFields
from appmetrics_wavefront.core.models import HistogramGranularity
from appmetrics_wavefront.core.ports import WavefrontSenderPort

DEFAULT_FLUSH_INTERVAL = 10.0

# Value of the cluster and shard application tags when unset.
UNSET_TAG_VALUE = "none"


def default_source() -> str:
    """Hostname of this machine, falling back to localhost."""
    try:
        return socket.gethostname() or "localhost"
    except OSError:
        return "localhost"


@dataclass(frozen=True)
class HistogramOptions:
    """Which aggregation intervals Wavefront histograms are reported at."""

    report_minute_distribution: bool = False
    report_hour_distribution: bool = False
    report_day_distribution: bool = False

    def granularities(self) -> frozenset[HistogramGranularity]:
        """Return the enabled granularities."""
        enabled = set()
        if self.report_minute_distribution:
            enabled.add(HistogramGranularity.MINUTE)
        if self.report_hour_distribution:
            enabled.add(HistogramGranularity.HOUR)
        if self.report_day_distribution:
            enabled.add(HistogramGranularity.DAY)
        return frozenset(enabled)


@dataclass(frozen=True)
class ApplicationTags:
    """Metadata about the application, sent as tags on every point.

    Attributes:
        application: Name of the application.
        service: Name of the service within the application.
        cluster: Cluster the service runs in, "none" when unset.
        shard: Shard of the cluster, "none" when unset.
        custom_tags: Additional tags, applied after the standard ones.
    """

    application: str
    service: str
    cluster: str | None = None
    shard: str | None = None
    custom_tags: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.application:
            raise InvalidOptionsError("application must not be empty")
        if not self.service:
            raise InvalidOptionsError("service must not be empty")

    def to_point_tags(self) -> dict[str, str]:
        """Return the tags as a dict, standard keys first.

        An unset cluster or shard is reported as ``"none"``.
        """
        tags = {
            "application": self.application,
            "service": self.service,
            "cluster": self.cluster or UNSET_TAG_VALUE,
            "shard": self.shard or UNSET_TAG_VALUE,
        }
        tags.update(self.custom_tags)
        return tags


@dataclass(frozen=True)
class ReporterOptions:
    """Configuration of a WavefrontReporter.

    Attributes:
        sender: Sender that delivers points to Wavefront.
        source: Source metrics are reported for. Defaults to the hostname.
        application_tags: Application metadata sent as global tags.
        histogram: Granularities Wavefront histograms are reported at.
        flush_interval: Seconds between flushes. 0 selects the default.
        fields: Column mapping of the metrics framework.
        sanitize_names: Sanitize metric names before sending. Leave off when
            the sender sanitizes names itself.

    Raises:
        InvalidOptionsError: If ``sender`` is None or ``flush_interval`` is
            negative.
    """

    sender: WavefrontSenderPort
    source: str = field(default_factory=default_source)
    application_tags: ApplicationTags | None = None
    histogram: HistogramOptions = field(default_factory=HistogramOptions)
    flush_interval: float = DEFAULT_FLUSH_INTERVAL
    fields: MetricFields = field(default_factory=MetricFields)
    sanitize_names: bool = False

    def __post_init__(self) -> None:
        if self.sender is None:
            raise InvalidOptionsError("sender must not be None")
        if self.flush_interval < 0:
            raise InvalidOptionsError("flush_interval must not be less than zero")
        if self.flush_interval == 0:
            object.__setattr__(self, "flush_interval", DEFAULT_FLUSH_INTERVAL)

    def global_tags(self) -> dict[str, str]:
        """Tags applied to every point."""
        if self.application_tags is None:
            return {}
        return self.application_tags.to_point_tags()
