"""appmetrics-wavefront: report metric snapshots to Wavefront.

Translates counters, gauges, histograms, meters, timers and apdex scores
from a metrics snapshot into Wavefront points, delta counters and
distributions, and hands them to a Wavefront sender.
"""

from appmetrics_wavefront._version import __version__
from appmetrics_wavefront.adapters.reporter import WavefrontReporter
from appmetrics_wavefront.adapters.senders.in_memory import InMemoryWavefrontSender
from appmetrics_wavefront.adapters.writer import MetricSnapshotWavefrontWriter
from appmetrics_wavefront.core.config import (
    ApplicationTags,
    HistogramOptions,
    ReporterOptions,
)
from appmetrics_wavefront.core.errors import (
    ContractViolationError,
    DistributionDecodeError,
    InvalidOptionsError,
    MissingFieldError,
    UnknownMetricKindError,
    WavefrontWriterError,
)
from appmetrics_wavefront.core.fields import MetricFields
from appmetrics_wavefront.core.models import (
    Centroid,
    Distribution,
    DistributionPayload,
    HistogramGranularity,
    MetricKind,
    MetricRecord,
)
from appmetrics_wavefront.core.ports import SnapshotWriterPort, WavefrontSenderPort
from appmetrics_wavefront.core.sdk_metrics import SdkMetricsRegistry
from appmetrics_wavefront.core.snapshot import SnapshotEntry

__all__ = [
    "ApplicationTags",
    "Centroid",
    "ContractViolationError",
    "Distribution",
    "DistributionDecodeError",
    "DistributionPayload",
    "HistogramGranularity",
    "HistogramOptions",
    "InMemoryWavefrontSender",
    "InvalidOptionsError",
    "MetricFields",
    "MetricKind",
    "MetricRecord",
    "MetricSnapshotWavefrontWriter",
    "MissingFieldError",
    "ReporterOptions",
    "SdkMetricsRegistry",
    "SnapshotEntry",
    "SnapshotWriterPort",
    "UnknownMetricKindError",
    "WavefrontReporter",
    "WavefrontSenderPort",
    "WavefrontWriterError",
    "__version__",
]
