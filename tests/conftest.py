"""Shared test fixtures for all test modules."""

from datetime import datetime, timezone

import pytest

from appmetrics_wavefront.adapters.senders.in_memory import InMemoryWavefrontSender
from appmetrics_wavefront.adapters.writer import MetricSnapshotWavefrontWriter
from appmetrics_wavefront.core.models import HistogramGranularity
from appmetrics_wavefront.core.sdk_metrics import SdkMetricsRegistry

# 2023-11-14T22:13:20Z
SNAPSHOT_TIME = datetime(2023, 11, 14, 22, 13, 20, tzinfo=timezone.utc)


@pytest.fixture
def snapshot_time() -> datetime:
    """Timestamp used for every snapshot entry in a test."""
    return SNAPSHOT_TIME


@pytest.fixture
def sender() -> InMemoryWavefrontSender:
    """Fresh in-memory sender that records every call."""
    return InMemoryWavefrontSender()


@pytest.fixture
def global_tags() -> dict[str, str]:
    """Global tags applied by the writer under test."""
    return {"globalKey1": "globalVal1", "globalKey2": "globalVal2"}


@pytest.fixture
def sdk_metrics(sender: InMemoryWavefrontSender) -> SdkMetricsRegistry:
    """Self-observability registry reporting through the test sender."""
    return SdkMetricsRegistry(sender, source="source")


@pytest.fixture
def writer(
    sender: InMemoryWavefrontSender,
    global_tags: dict[str, str],
    sdk_metrics: SdkMetricsRegistry,
) -> MetricSnapshotWavefrontWriter:
    """Writer with global tags, minute distributions and counters enabled."""
    return MetricSnapshotWavefrontWriter(
        sender,
        "source",
        global_tags,
        {HistogramGranularity.MINUTE},
        sdk_metrics=sdk_metrics,
    )
