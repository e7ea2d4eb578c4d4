"""Custom exceptions for the glucose log."""


class GlucoseLogError(Exception):
    """Base exception for all glucose log errors."""

    pass


class ConfigurationError(GlucoseLogError):
    """Raised when there is a configuration error."""

    pass


class ValidationError(GlucoseLogError):
    """Raised when a reading draft or user input is missing required data."""

    pass


class StorageError(GlucoseLogError):
    """Raised when the key-value backend fails."""

    pass


class StorageReadError(StorageError):
    """Raised when a stored slot cannot be read."""

    pass


class StorageWriteError(StorageError):
    """Raised when a slot cannot be written."""

    pass


class ReportUnavailable(GlucoseLogError):
    """Raised when the PDF drawing library cannot be obtained."""

    pass
