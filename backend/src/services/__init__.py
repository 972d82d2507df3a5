"""
Services package for shared business logic.

This package contains service classes that encapsulate business logic
shared across the adapters and API endpoints.
"""

from .schedule_service import ScheduleService
from .occupancy_service import OccupancyService
from .availability_service import AvailabilityService
from .booking_service import BookingService

__all__ = [
    "ScheduleService",
    "OccupancyService",
    "AvailabilityService",
    "BookingService",
]
