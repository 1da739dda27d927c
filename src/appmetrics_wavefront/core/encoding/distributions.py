"""JSON codec for distributions carried through histogram snapshots.

A Wavefront histogram has no user values, so its snapshot repurposes the
user max/min value columns to carry its distributions: the max column holds
the timestamps and the min column holds the centroid lists, one per
timestamp.

Example:
    key   = '[1700000000000, 1700000060000]'
    value = '[[[1.5, 2], [3.0, 1]], [[2.0, 4]]]'
"""

import json
from collections.abc import Iterable

from appmetrics_wavefront.core.errors import DistributionDecodeError
from appmetrics_wavefront.core.models import Centroid, Distribution, DistributionPayload


def serialize_distributions(
    distributions: Iterable[Distribution],
) -> DistributionPayload:
    """Encode distributions into the two snapshot carrier strings.

    Args:
        distributions: Distributions to encode, in reporting order.

    Returns:
        DistributionPayload with timestamps in ``key`` and centroids in ``value``.
    """
    timestamps = []
    centroid_lists = []
    for distribution in distributions:
        timestamps.append(distribution.timestamp)
        centroid_lists.append(
            [[centroid.value, centroid.weight] for centroid in distribution.centroids]
        )
    return DistributionPayload(key=json.dumps(timestamps), value=json.dumps(centroid_lists))


def _decode_centroid(raw: object) -> Centroid:
    if not isinstance(raw, list) or len(raw) != 2:
        raise DistributionDecodeError(f"Malformed centroid: {raw!r}")
    value, weight = raw
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise DistributionDecodeError(f"Malformed centroid value: {value!r}")
    if isinstance(weight, bool) or not isinstance(weight, int):
        raise DistributionDecodeError(f"Malformed centroid weight: {weight!r}")
    return Centroid(value=float(value), weight=weight)


def deserialize_distributions(payload: DistributionPayload) -> list[Distribution]:
    """Decode the snapshot carrier strings back into distributions.

    Args:
        payload: Serialized timestamps and centroid lists.

    Returns:
        Distributions in the order they were serialized.

    Raises:
        DistributionDecodeError: If either string is not valid JSON, the two
            arrays differ in length, or an entry is malformed.
    """
    try:
        timestamps = json.loads(payload.key)
        centroid_lists = json.loads(payload.value)
    except (json.JSONDecodeError, TypeError) as e:
        raise DistributionDecodeError(f"Invalid distribution payload: {e}") from e

    if not isinstance(timestamps, list) or not isinstance(centroid_lists, list):
        raise DistributionDecodeError("Distribution payload must hold two JSON arrays")
    if len(timestamps) != len(centroid_lists):
        raise DistributionDecodeError(
            f"Got {len(timestamps)} timestamps for {len(centroid_lists)} centroid lists"
        )

    distributions = []
    for timestamp, centroids in zip(timestamps, centroid_lists):
        if isinstance(timestamp, bool) or not isinstance(timestamp, int):
            raise DistributionDecodeError(f"Malformed timestamp: {timestamp!r}")
        if not isinstance(centroids, list):
            raise DistributionDecodeError(f"Malformed centroid list: {centroids!r}")
        distributions.append(
            Distribution(
                timestamp=timestamp,
                centroids=tuple(_decode_centroid(raw) for raw in centroids),
            )
        )
    return distributions
