"""
Occupancy service: which parts of a doctor's day are already booked.
"""

import logging
from datetime import date as date_type
from typing import Iterable, List, Protocol

from sqlalchemy.orm import Session

from core.constants import APPOINTMENT_STATUS_CANCELLED
from models import Appointment
from utils.interval_utils import Interval, merge_intervals

logger = logging.getLogger(__name__)


class OccupyingRecord(Protocol):
    """Anything with a start, a duration and a lifecycle status."""
    status: str

    @property
    def start_minutes(self) -> int: ...

    @property
    def duration_minutes(self) -> int: ...


class OccupancyService:
    """
    Service class for occupancy (booked time) operations.

    Read-only: nothing here writes to the database.
    """

    @staticmethod
    def occupied_intervals(appointments: Iterable[OccupyingRecord]) -> List[Interval]:
        """
        Build the disjoint occupied intervals from appointment records.

        Cancelled appointments are ignored. Overlapping appointments (a data
        anomaly) are union-merged instead of raising, and records with a
        non-positive duration occupy nothing.

        Returns:
            Sorted, disjoint [start, end) intervals in minutes since midnight
        """
        intervals: List[Interval] = []
        for appointment in appointments:
            if appointment.status == APPOINTMENT_STATUS_CANCELLED:
                continue
            if appointment.duration_minutes <= 0:
                logger.warning(f"Ignoring appointment with non-positive duration: {appointment!r}")
                continue
            start = appointment.start_minutes
            intervals.append(Interval(start, start + appointment.duration_minutes))
        return merge_intervals(intervals)

    @staticmethod
    def get_active_appointments(
        db: Session,
        doctor_id: int,
        requested_date: date_type
    ) -> List[Appointment]:
        """Fetch the doctor's non-cancelled appointments on a calendar day."""
        return db.query(Appointment).filter(
            Appointment.doctor_id == doctor_id,
            Appointment.date == requested_date,
            Appointment.status != APPOINTMENT_STATUS_CANCELLED
        ).order_by(Appointment.start_time).all()

    @staticmethod
    def get_occupied_intervals(
        db: Session,
        doctor_id: int,
        requested_date: date_type
    ) -> List[Interval]:
        """Occupied intervals for a doctor on a calendar day, from the local store."""
        appointments = OccupancyService.get_active_appointments(db, doctor_id, requested_date)
        return OccupancyService.occupied_intervals(appointments)
