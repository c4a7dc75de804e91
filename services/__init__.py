"""Application services."""

from .booking import AvailabilitySnapshot, BookingService

__all__ = ["AvailabilitySnapshot", "BookingService"]
