"""
Custom exception classes for better error handling.
Provides specific error types instead of generic exceptions.
"""


class DatabaseError(Exception):
    """Base exception for database operations."""

    pass


class ConfigurationError(DatabaseError):
    """Raised when a stored salon or staff document cannot be parsed."""

    pass


class AppointmentNotFoundError(DatabaseError):
    """Raised when an appointment is not found."""

    pass


class ServiceNotFoundError(DatabaseError):
    """Raised when a catalog service is not found."""

    pass


class SlotNotAvailableError(DatabaseError):
    """Raised when attempting to book a slot that is no longer available."""

    pass


class BookingCreationError(DatabaseError):
    """Raised when booking creation fails."""

    pass


class ValidationError(Exception):
    """Raised when input validation fails."""

    pass
