"""Custom exceptions for Calendar Mirror application."""


class CalendarSyncError(Exception):
    """Base exception for calendar mirror errors."""


class AuthenticationError(CalendarSyncError):
    """Raised when authentication fails."""


class ConfigurationError(CalendarSyncError):
    """Raised when configuration is invalid."""


class CursorStoreError(CalendarSyncError):
    """Raised when the sync cursor store cannot be read or written."""


class CalendarReadError(CalendarSyncError):
    """Raised when reading calendar fails."""


class CursorInvalidError(CalendarReadError):
    """Raised when the provider rejects a sync token and requires a full sync."""


class CalendarWriteError(CalendarSyncError):
    """Raised when writing calendar fails."""


class LockedResourceError(CalendarWriteError):
    """Raised when the provider forbids modifying an event."""
