"""Sender adapters implementing WavefrontSenderPort."""

from appmetrics_wavefront.adapters.senders.in_memory import (
    InMemoryWavefrontSender,
    SentDeltaCounter,
    SentDistribution,
    SentMetric,
)

__all__ = [
    "InMemoryWavefrontSender",
    "SentDeltaCounter",
    "SentDistribution",
    "SentMetric",
]
