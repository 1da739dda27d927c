"""Field-name mappings between metric field roles and snapshot column names.

The metrics framework reports each metric as a set of named columns. These
tables say which column holds which role (e.g. the 99th percentile of a
histogram) so the writer can pick out the columns it reports.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType


class ApdexFields(Enum):
    SAMPLES = "samples"
    SCORE = "score"
    SATISFIED = "satisfied"
    TOLERATING = "tolerating"
    FRUSTRATING = "frustrating"


class CounterFields(Enum):
    VALUE = "value"
    TOTAL = "total"
    SET_ITEM_PERCENT = "set_item_percent"


class GaugeFields(Enum):
    VALUE = "value"


class HistogramFields(Enum):
    COUNT = "count"
    SUM = "sum"
    MIN = "min"
    MAX = "max"
    MEAN = "mean"
    MEDIAN = "median"
    STD_DEV = "std_dev"
    P75 = "p75"
    P95 = "p95"
    P98 = "p98"
    P99 = "p99"
    P999 = "p999"
    SAMPLES = "samples"
    LAST_VALUE = "last_value"
    USER_LAST_VALUE = "user_last_value"
    USER_MAX_VALUE = "user_max_value"
    USER_MIN_VALUE = "user_min_value"


class MeterFields(Enum):
    COUNT = "count"
    RATE_1M = "rate_1m"
    RATE_5M = "rate_5m"
    RATE_15M = "rate_15m"
    RATE_MEAN = "rate_mean"
    SET_ITEM_PERCENT = "set_item_percent"


# Histogram roles whose columns carry strings, never numbers.
USER_VALUE_FIELDS = frozenset(
    {
        HistogramFields.USER_LAST_VALUE,
        HistogramFields.USER_MAX_VALUE,
        HistogramFields.USER_MIN_VALUE,
    }
)

GAUGE_VALUE_COLUMN = "value"


def _frozen(mapping: Mapping) -> Mapping:
    return MappingProxyType(dict(mapping))


def _default_apdex() -> Mapping[ApdexFields, str]:
    return _frozen({role: role.value for role in ApdexFields})


def _default_counter() -> Mapping[CounterFields, str]:
    return _frozen(
        {
            CounterFields.VALUE: "value",
            CounterFields.TOTAL: "total",
            CounterFields.SET_ITEM_PERCENT: "percent",
        }
    )


def _default_gauge() -> Mapping[GaugeFields, str]:
    return _frozen({GaugeFields.VALUE: GAUGE_VALUE_COLUMN})


def _default_histogram() -> Mapping[HistogramFields, str]:
    return _frozen(
        {
            HistogramFields.COUNT: "count.hist",
            HistogramFields.SUM: "sum",
            HistogramFields.MIN: "min",
            HistogramFields.MAX: "max",
            HistogramFields.MEAN: "mean",
            HistogramFields.MEDIAN: "median",
            HistogramFields.STD_DEV: "stddev",
            HistogramFields.P75: "p75",
            HistogramFields.P95: "p95",
            HistogramFields.P98: "p98",
            HistogramFields.P99: "p99",
            HistogramFields.P999: "p999",
            HistogramFields.SAMPLES: "samples",
            HistogramFields.LAST_VALUE: "last",
            HistogramFields.USER_LAST_VALUE: "user.last",
            HistogramFields.USER_MAX_VALUE: "user.max",
            HistogramFields.USER_MIN_VALUE: "user.min",
        }
    )


def _default_meter() -> Mapping[MeterFields, str]:
    return _frozen(
        {
            MeterFields.COUNT: "count.meter",
            MeterFields.RATE_1M: "rate1m",
            MeterFields.RATE_5M: "rate5m",
            MeterFields.RATE_15M: "rate15m",
            MeterFields.RATE_MEAN: "rate.mean",
            MeterFields.SET_ITEM_PERCENT: "percent",
        }
    )


@dataclass(frozen=True)
class MetricFields:
    """Column names reported for each metric type, keyed by field role.

    Each mapping preserves insertion order, which is the order points are
    sent in. Pass a subset to report fewer fields, or different names to
    match a customised metrics framework.

    Example:
        ```python
        fields = MetricFields(gauge={GaugeFields.VALUE: "value"})
        ```
    """

    apdex: Mapping[ApdexFields, str] = field(default_factory=_default_apdex)
    counter: Mapping[CounterFields, str] = field(default_factory=_default_counter)
    gauge: Mapping[GaugeFields, str] = field(default_factory=_default_gauge)
    histogram: Mapping[HistogramFields, str] = field(
        default_factory=_default_histogram
    )
    meter: Mapping[MeterFields, str] = field(default_factory=_default_meter)

    def __post_init__(self) -> None:
        # Callers may pass plain dicts; freeze them so the mapping stays read-only.
        for name in ("apdex", "counter", "gauge", "histogram", "meter"):
            object.__setattr__(self, name, _frozen(getattr(self, name)))

    def histogram_column(self, role: HistogramFields) -> str | None:
        """Return the column name of a histogram role, or None if unmapped."""
        return self.histogram.get(role)
