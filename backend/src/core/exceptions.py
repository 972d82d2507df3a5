"""
Domain exceptions for availability and booking.

Services raise these instead of HTTP errors so the same code paths can be
used from the API, scripts and tests. ``main.py`` maps each one to an HTTP
response.
"""


class BookingPlatformError(Exception):
    """Base class for all booking platform errors."""


class ConfigurationError(BookingPlatformError):
    """A clinic is configured with an unknown or incomplete management system."""

    def __init__(self, message: str, identifier: str | None = None):
        super().__init__(message)
        self.identifier = identifier


class NotFoundError(BookingPlatformError):
    """A clinic, doctor or appointment identifier does not resolve."""

    def __init__(self, resource: str, identifier: object):
        super().__init__(f"{resource} not found: {identifier}")
        self.resource = resource
        self.identifier = identifier


class ExternalAdapterError(BookingPlatformError):
    """
    The external practice-management system failed.

    Raised for network errors, timeouts, non-2xx responses and payloads that
    cannot be translated. Never converted into an empty slot list.
    """

    def __init__(self, system: str, message: str, status_code: int | None = None):
        super().__init__(f"{system}: {message}")
        self.system = system
        self.status_code = status_code


class BookingConflictError(BookingPlatformError):
    """The requested interval was taken by another booking before commit."""
