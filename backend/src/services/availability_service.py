"""
Availability service: slot generation for a doctor's day.

Combines nominal availability (schedule service), occupied intervals
(occupancy service) and a requested duration into the ordered list of
bookable start times. The generator itself is pure; the ``*_for_doctor``
method is the database-backed composition used by the local adapter.
"""

import logging
from datetime import datetime, date as date_type
from typing import List, Optional

from sqlalchemy.orm import Session

from adapters.base import TimeSlot
from core.config import SLOT_STEP_MINUTES
from models import Clinic, Doctor
from services.occupancy_service import OccupancyService
from services.schedule_service import ScheduleService
from utils.datetime_utils import clinic_now, format_minutes, parse_date_string
from utils.interval_utils import Interval, overlaps_any

logger = logging.getLogger(__name__)


class AvailabilityService:
    """
    Service class for availability operations.

    Contains the slot generation algorithm shared by the local adapter and the
    API.
    """

    @staticmethod
    def validate_request(date: str, duration_minutes: int) -> date_type:
        """
        Validate a slot query.

        Args:
            date: Date string in YYYY-MM-DD format
            duration_minutes: Requested service duration

        Returns:
            Parsed date object

        Raises:
            ValueError: If the date is malformed or the duration is not positive
        """
        try:
            requested_date = parse_date_string(date)
        except ValueError:
            raise ValueError(f"Invalid date format (use YYYY-MM-DD): {date!r}")
        if duration_minutes <= 0:
            raise ValueError(f"Service duration must be positive, got {duration_minutes}")
        return requested_date

    @staticmethod
    def generate_candidate_slots(
        nominal: List[Interval],
        duration_minutes: int,
        step_minutes: int = SLOT_STEP_MINUTES
    ) -> List[Interval]:
        """
        Walk each nominal interval from its start in steps of ``step_minutes``.

        The step is the clinic grid, never the service duration, so services
        of different lengths share the same start times. A candidate is kept
        only if the whole ``[start, start + duration)`` fits inside the
        interval.
        """
        candidates: List[Interval] = []
        for interval in nominal:
            start = interval.start
            while start + duration_minutes <= interval.end:
                candidates.append(Interval(start, start + duration_minutes))
                start += step_minutes
        return candidates

    @staticmethod
    def generate_slots(
        nominal: List[Interval],
        occupied: List[Interval],
        duration_minutes: int,
        requested_date: date_type,
        now: datetime,
        step_minutes: int = SLOT_STEP_MINUTES
    ) -> List[TimeSlot]:
        """
        Produce the ordered bookable slots for one day.

        Args:
            nominal: Disjoint nominal availability intervals
            occupied: Occupied intervals from active appointments
            duration_minutes: Requested service duration
            requested_date: Calendar day the slots are for
            now: Current clinic-local datetime
            step_minutes: Grid step, independent of the service duration

        Returns:
            Slots strictly ascending by start. Empty for past dates, or when
            nothing fits.
        """
        if duration_minutes <= 0:
            raise ValueError(f"Service duration must be positive, got {duration_minutes}")
        if step_minutes <= 0:
            raise ValueError(f"Slot step must be positive, got {step_minutes}")

        today = now.date()
        if requested_date < today:
            return []
        # Same-day requests only offer starts strictly after the current minute
        earliest_start = now.hour * 60 + now.minute if requested_date == today else -1

        starts: set[int] = set()
        slots: List[TimeSlot] = []
        for candidate in AvailabilityService.generate_candidate_slots(nominal, duration_minutes, step_minutes):
            if candidate.start <= earliest_start:
                continue
            if overlaps_any(candidate, occupied):
                continue
            if candidate.start in starts:
                continue
            starts.add(candidate.start)
            slots.append(TimeSlot(start=format_minutes(candidate.start), end=format_minutes(candidate.end)))

        slots.sort(key=lambda s: s.start)
        return slots

    @staticmethod
    def get_available_slots_for_doctor(
        db: Session,
        clinic: Clinic,
        doctor: Doctor,
        requested_date: date_type,
        duration_minutes: int,
        now: Optional[datetime] = None,
        step_minutes: int = SLOT_STEP_MINUTES
    ) -> List[TimeSlot]:
        """
        Compute slots for a doctor from the local store.

        Loads the doctor's schedule, the clinic's working hours and the day's
        active appointments, then runs ``generate_slots``. Nothing is cached:
        every call reads current data.
        """
        if now is None:
            now = clinic_now(clinic.timezone)

        if requested_date < now.date():
            # Past dates are never computed
            return []

        nominal = ScheduleService.nominal_availability(
            ScheduleService.get_doctor_schedule(db, doctor.id),
            ScheduleService.get_clinic_working_hours(db, clinic.id),
            requested_date,
        )
        if not nominal:
            logger.debug(f"No nominal availability for doctor {doctor.id} on {requested_date}")
            return []

        occupied = OccupancyService.get_occupied_intervals(db, doctor.id, requested_date)
        return AvailabilityService.generate_slots(
            nominal, occupied, duration_minutes, requested_date, now, step_minutes
        )
