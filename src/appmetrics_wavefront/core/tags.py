"""Tag handling for metric snapshots.

The metrics framework smuggles exporter-internal signals through ordinary
point tags: the metric type under ``mtype``, and the Wavefront variants
(delta counter, Wavefront histogram) under ``wavefrontMetricType``. These
helpers read those signals and make sure they never reach the backend.
"""

from collections.abc import Iterable, Mapping, Sequence

from appmetrics_wavefront.core.errors import UnknownMetricKindError
from appmetrics_wavefront.core.models import MetricKind

TagPairs = Sequence[tuple[str, str]]

METRIC_TYPE_TAG_KEY = "mtype"
WAVEFRONT_METRIC_TYPE_TAG_KEY = "wavefrontMetricType"
DELTA_COUNTER_TAG_VALUE = "deltaCounter"
WAVEFRONT_HISTOGRAM_TAG_VALUE = "wavefrontHistogram"

# Delta counters created by name carry this prefix instead of a marker tag.
DELTA_PREFIX = "∆"

INTERNAL_TAG_KEYS = frozenset({METRIC_TYPE_TAG_KEY, WAVEFRONT_METRIC_TYPE_TAG_KEY})

_KINDS_BY_TAG = {kind.value: kind for kind in MetricKind}


def resolve_kind(tags: TagPairs) -> MetricKind:
    """Return the metric type declared by the ``mtype`` tag.

    Raises:
        UnknownMetricKindError: If the tag is absent or its value is not a
            known metric type.
    """
    for key, value in tags:
        if key == METRIC_TYPE_TAG_KEY:
            kind = _KINDS_BY_TAG.get(value)
            if kind is None:
                raise UnknownMetricKindError(f"Unrecognized metric type: {value!r}")
            return kind
    raise UnknownMetricKindError(f"Missing {METRIC_TYPE_TAG_KEY!r} tag")


def _has_wavefront_metric_type(tags: TagPairs, marker: str) -> bool:
    return any(
        key == WAVEFRONT_METRIC_TYPE_TAG_KEY and value == marker for key, value in tags
    )


def is_delta_counter(name: str, tags: TagPairs) -> bool:
    """Whether a counter is reported as a Wavefront delta counter."""
    return name.startswith(DELTA_PREFIX) or _has_wavefront_metric_type(
        tags, DELTA_COUNTER_TAG_VALUE
    )


def is_wavefront_histogram(tags: TagPairs) -> bool:
    """Whether a histogram is reported as a Wavefront distribution."""
    return _has_wavefront_metric_type(tags, WAVEFRONT_HISTOGRAM_TAG_VALUE)


def strip_internal_tags(tags: Iterable[tuple[str, str]]) -> tuple[tuple[str, str], ...]:
    """Drop the metric type and marker tags, keeping order and duplicates."""
    return tuple((key, value) for key, value in tags if key not in INTERNAL_TAG_KEYS)


def filter_tags(
    tags: Iterable[tuple[str, str]],
    global_tags: Mapping[str, str] | None = None,
) -> dict[str, str]:
    """Build the tags sent to Wavefront for one point.

    Global tags come first and point tags override them. When a point tag key
    repeats, the last occurrence wins. Internal tags are never included.

    Args:
        tags: Point tags in snapshot order.
        global_tags: Tags applied to every point.

    Returns:
        A new dict of tag key to value.
    """
    merged = dict(global_tags) if global_tags else {}
    for key, value in tags:
        if key not in INTERNAL_TAG_KEYS:
            merged[key] = value
    return merged


def delta_counter_tags(tags: TagPairs = ()) -> tuple[tuple[str, str], ...]:
    """Append the marker that identifies a counter as a delta counter."""
    return (*tags, (WAVEFRONT_METRIC_TYPE_TAG_KEY, DELTA_COUNTER_TAG_VALUE))


def wavefront_histogram_tags(tags: TagPairs = ()) -> tuple[tuple[str, str], ...]:
    """Append the marker that identifies a histogram as a Wavefront histogram."""
    return (*tags, (WAVEFRONT_METRIC_TYPE_TAG_KEY, WAVEFRONT_HISTOGRAM_TAG_VALUE))
