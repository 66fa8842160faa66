"""Custom exceptions for the bridge fee adapter.

Absence of a network from a prefetch result is not an error: the metric
mapper resolves it to zero. Only query failures and configuration defects
raise.
"""


class FeeAdapterError(Exception):
    """Base exception for all fee adapter errors."""


class DataSourceError(FeeAdapterError):
    """Raised when the query service fails or returns malformed data.

    Never retried internally; the caller decides whether to retry the
    whole window or mark its days as unavailable.
    """


class ConfigurationError(FeeAdapterError):
    """Raised for an unregistered network or missing service credentials."""
