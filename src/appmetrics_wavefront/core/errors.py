"""Exceptions raised while translating metric snapshots."""


class WavefrontWriterError(Exception):
    """Base class for snapshot translation errors."""


class ContractViolationError(WavefrontWriterError, ValueError):
    """The snapshot producer passed a record the writer cannot interpret."""


class UnknownMetricKindError(ContractViolationError):
    """The metric type tag is missing or names no known metric type."""


class MissingFieldError(ContractViolationError):
    """A field the metric type requires is absent from the record."""


class DistributionDecodeError(WavefrontWriterError, ValueError):
    """A serialized distribution payload could not be decoded."""


class InvalidOptionsError(ValueError):
    """Reporter configuration failed validation."""
