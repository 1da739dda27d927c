"""Encoders for data carried through metric snapshots."""

from appmetrics_wavefront.core.encoding.distributions import (
    deserialize_distributions,
    serialize_distributions,
)

__all__ = ["deserialize_distributions", "serialize_distributions"]
