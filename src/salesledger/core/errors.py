class SalesLedgerError(Exception):
    """Base exception for SalesLedger."""


class ConfigError(SalesLedgerError):
    """Raised when configuration is invalid."""


class RecordError(SalesLedgerError):
    """Raised when an order or return record is malformed."""


class FilterError(SalesLedgerError):
    """Raised when a date filter or selector is invalid."""
