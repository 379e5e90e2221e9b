"""
Exception hierarchy for table synchronization.

All errors are precondition failures raised at the point of detection.
Nothing here is retried or recovered internally.
"""


class TableSyncError(Exception):
    """Base class for all table synchronization errors."""


class ConfigurationError(TableSyncError):
    """Raised when a descriptor, renderer or setting is misconfigured."""


class MissingTableNameError(ConfigurationError):
    """Raised when a record type resolves to an empty table name."""

    def __init__(self, record_type: object = None):
        self.record_type = record_type
        if record_type is None:
            message = "Table name cannot be empty"
        else:
            message = f"Table name cannot be empty for {record_type!r}"
        super().__init__(message)


class RendererNotConfiguredError(ConfigurationError):
    """Raised when statements are rendered without a dialect generator."""

    def __init__(self):
        super().__init__("Statement renderer not configured: dialect generator is missing")


class UnsupportedProviderError(ConfigurationError):
    """Raised when no dialect generator is registered for a provider."""

    def __init__(self, provider: object):
        self.provider = provider
        super().__init__(f"No dialect generator registered for provider {provider!r}")


class UnsupportedDirectionError(TableSyncError, NotImplementedError):
    """Raised for a synchronization direction that has no implementation."""

    def __init__(self, direction: object):
        self.direction = direction
        super().__init__(f"Unsupported synchronization direction: {direction!r}")


class ReconciliationError(TableSyncError):
    """Raised when input collections cannot be reconciled."""


class DuplicateKeyError(ReconciliationError):
    """Raised when one side holds two records with the same key."""

    def __init__(self, side: str, key: tuple):
        self.side = side
        self.key = key
        super().__init__(f"Duplicate key {key!r} in {side} collection")
