"""Tests for tag handling."""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from appmetrics_wavefront.core.errors import UnknownMetricKindError
from appmetrics_wavefront.core.models import MetricKind
from appmetrics_wavefront.core.tags import (
    DELTA_PREFIX,
    INTERNAL_TAG_KEYS,
    METRIC_TYPE_TAG_KEY,
    WAVEFRONT_METRIC_TYPE_TAG_KEY,
    delta_counter_tags,
    filter_tags,
    is_delta_counter,
    is_wavefront_histogram,
    resolve_kind,
    strip_internal_tags,
    wavefront_histogram_tags,
)

tag_keys = st.text(
    alphabet="abcdefghijklmnopqrstuvwxyz", min_size=1, max_size=8
).filter(lambda k: k not in INTERNAL_TAG_KEYS)
tag_pairs = st.lists(st.tuples(tag_keys, st.text(max_size=8)), max_size=10)


class TestResolveKind:
    """Tests for resolve_kind()."""

    @pytest.mark.core
    @pytest.mark.parametrize("kind", list(MetricKind))
    def test_resolves_every_kind(self, kind: MetricKind) -> None:
        """Every type tag value maps to its kind."""
        assert resolve_kind([("env", "dev"), (METRIC_TYPE_TAG_KEY, kind.value)]) is kind

    @pytest.mark.core
    def test_missing_type_tag_raises(self) -> None:
        """A tag list without a type tag is rejected."""
        with pytest.raises(UnknownMetricKindError, match="Missing"):
            resolve_kind([("env", "dev")])

    @pytest.mark.core
    def test_unknown_type_raises(self) -> None:
        """An unrecognized type tag value is rejected."""
        with pytest.raises(UnknownMetricKindError, match="'bucket'"):
            resolve_kind([(METRIC_TYPE_TAG_KEY, "bucket")])

    @pytest.mark.core
    def test_unknown_kind_is_a_value_error(self) -> None:
        """Contract violations can be caught as ValueError."""
        with pytest.raises(ValueError):
            resolve_kind([])


class TestMarkers:
    """Tests for delta counter and Wavefront histogram markers."""

    @pytest.mark.core
    def test_delta_counter_marker_tag(self) -> None:
        """The delta counter marker tag identifies a delta counter."""
        assert is_delta_counter("requests", delta_counter_tags([("env", "dev")]))

    @pytest.mark.core
    def test_delta_prefix_on_name(self) -> None:
        """The delta prefix on a name identifies a delta counter."""
        assert is_delta_counter(DELTA_PREFIX + "requests", [])

    @pytest.mark.core
    def test_plain_counter_is_not_delta(self) -> None:
        """A counter without marker or prefix is a regular counter."""
        assert not is_delta_counter("requests", [(METRIC_TYPE_TAG_KEY, "counter")])

    @pytest.mark.core
    def test_histogram_marker_is_not_delta(self) -> None:
        """The Wavefront histogram marker does not mark a delta counter."""
        assert not is_delta_counter("requests", wavefront_histogram_tags())

    @pytest.mark.core
    def test_wavefront_histogram_marker(self) -> None:
        """The Wavefront histogram marker tag identifies a distribution."""
        assert is_wavefront_histogram(wavefront_histogram_tags([("env", "dev")]))
        assert not is_wavefront_histogram([("env", "dev")])

    @pytest.mark.core
    def test_marker_helpers_append_to_existing_tags(self) -> None:
        """Marker helpers keep the given tags in front of the marker."""
        tags = delta_counter_tags([("env", "dev")])
        assert tags[0] == ("env", "dev")
        assert tags[-1][0] == WAVEFRONT_METRIC_TYPE_TAG_KEY


class TestStripInternalTags:
    """Tests for strip_internal_tags()."""

    @pytest.mark.core
    def test_removes_type_and_marker_tags(self) -> None:
        """Type and marker tags are removed, everything else is kept in order."""
        tags = [
            ("env", "dev"),
            (METRIC_TYPE_TAG_KEY, "counter"),
            (WAVEFRONT_METRIC_TYPE_TAG_KEY, "deltaCounter"),
            ("env", "prod"),
        ]
        assert strip_internal_tags(tags) == (("env", "dev"), ("env", "prod"))


class TestFilterTags:
    """Tests for filter_tags()."""

    @pytest.mark.core
    def test_point_tags_override_globals_and_last_duplicate_wins(self) -> None:
        """Global and point tags merge; duplicate keys resolve to the last value."""
        global_tags = {"globalKey1": "globalVal1", "globalKey2": "globalVal2"}
        point_tags = [
            ("globalKey1", "pointValue1"),
            ("env", "dev"),
            ("location", "sf"),
            ("env", "prod"),
        ]

        result = filter_tags(point_tags, global_tags)

        assert result == {
            "globalKey1": "pointValue1",
            "globalKey2": "globalVal2",
            "env": "prod",
            "location": "sf",
        }
        assert len(result) == 4

    @pytest.mark.core
    def test_internal_tags_never_forwarded(self) -> None:
        """Type and marker tags are dropped even when they are the only tags."""
        tags = [
            (METRIC_TYPE_TAG_KEY, "histogram"),
            (WAVEFRONT_METRIC_TYPE_TAG_KEY, "wavefrontHistogram"),
        ]
        assert filter_tags(tags, None) == {}

    @pytest.mark.core
    def test_does_not_mutate_global_tags(self) -> None:
        """The global tag mapping is copied, not updated."""
        global_tags = {"env": "dev"}
        filter_tags([("env", "prod")], global_tags)
        assert global_tags == {"env": "dev"}

    @pytest.mark.core
    @given(tags=tag_pairs, global_tags=st.dictionaries(tag_keys, st.text(max_size=8)))
    def test_last_occurrence_wins(
        self, tags: list[tuple[str, str]], global_tags: dict[str, str]
    ) -> None:
        """Each key maps to its last point value, or its global value if absent."""
        result = filter_tags(tags, global_tags)

        expected = dict(global_tags)
        for key, value in tags:
            expected[key] = value
        assert result == expected

    @pytest.mark.core
    @given(tags=tag_pairs)
    def test_filtering_is_idempotent(self, tags: list[tuple[str, str]]) -> None:
        """Filtering an already filtered tag set changes nothing."""
        once = filter_tags(tags)
        assert filter_tags(once.items()) == once
