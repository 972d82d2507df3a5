"""
Schedule service: weekly doctor schedules, clinic working hours and the
nominal availability derived from both.

Nominal availability for a calendar day is the doctor's schedule for that
weekday intersected with the clinic's working hours for the same weekday.
"""

import logging
from datetime import date as date_type
from typing import Iterable, List

from pydantic import BaseModel, Field, field_validator, model_validator
from sqlalchemy.orm import Session

from models import Clinic, ClinicWorkingHours, Doctor, DoctorSchedule
from utils.datetime_utils import (
    day_of_week, format_minutes, minutes_to_time, parse_time_to_minutes, stored_end_to_minutes,
    time_to_minutes,
)
from utils.interval_utils import Interval, intersect_intervals, merge_intervals

logger = logging.getLogger(__name__)


def _validate_time_string(value: str) -> str:
    # Raises ValueError for anything that is not HH:MM
    parse_time_to_minutes(value)
    return value


class WeeklyScheduleEntry(BaseModel):
    """One recurring working period of a doctor (0=Sunday)."""
    day: int = Field(ge=0, le=6)
    start_time: str  # Format: "HH:MM"
    end_time: str    # Format: "HH:MM", "24:00" allowed

    @field_validator('start_time', 'end_time')
    @classmethod
    def validate_time_format(cls, v: str) -> str:
        return _validate_time_string(v)

    @model_validator(mode='after')
    def validate_order(self) -> 'WeeklyScheduleEntry':
        if parse_time_to_minutes(self.start_time) >= parse_time_to_minutes(self.end_time):
            raise ValueError(f"start_time must be before end_time ({self.start_time}-{self.end_time})")
        return self

    @property
    def interval(self) -> Interval:
        return Interval(parse_time_to_minutes(self.start_time), parse_time_to_minutes(self.end_time))


class ClinicWorkingHoursEntry(BaseModel):
    """Opening hours of a clinic for one weekday (0=Sunday)."""
    day: int = Field(ge=0, le=6)
    open: str   # Format: "HH:MM"
    close: str  # Format: "HH:MM", "24:00" allowed

    @field_validator('open', 'close')
    @classmethod
    def validate_time_format(cls, v: str) -> str:
        return _validate_time_string(v)

    @model_validator(mode='after')
    def validate_order(self) -> 'ClinicWorkingHoursEntry':
        if parse_time_to_minutes(self.open) >= parse_time_to_minutes(self.close):
            raise ValueError(f"open must be before close ({self.open}-{self.close})")
        return self

    @property
    def interval(self) -> Interval:
        return Interval(parse_time_to_minutes(self.open), parse_time_to_minutes(self.close))


class ScheduleService:
    """
    Service class for schedule and working-hours operations.
    """

    @staticmethod
    def validate_working_hours(entries: Iterable[ClinicWorkingHoursEntry]) -> List[ClinicWorkingHoursEntry]:
        """
        Check that a clinic has at most one working-hours entry per day.

        Raises:
            ValueError: If a day appears more than once
        """
        result = list(entries)
        seen: set[int] = set()
        for entry in result:
            if entry.day in seen:
                raise ValueError(f"Duplicate working hours for day {entry.day}")
            seen.add(entry.day)
        return result

    @staticmethod
    def nominal_availability(
        doctor_entries: Iterable[WeeklyScheduleEntry],
        clinic_hours: Iterable[ClinicWorkingHoursEntry],
        target_date: date_type
    ) -> List[Interval]:
        """
        Compute the doctor's nominal availability for a calendar day.

        Overlapping doctor entries are union-merged before intersecting with
        the clinic's hours, so the result is sorted and disjoint.

        Args:
            doctor_entries: The doctor's weekly schedule
            clinic_hours: The clinic's working hours (one entry per day at most)
            target_date: Calendar day to compute availability for

        Returns:
            Disjoint [start, end) intervals in minutes since midnight. Empty if
            either the clinic or the doctor has nothing on that weekday.
        """
        weekday = day_of_week(target_date)

        doctor_intervals = merge_intervals(e.interval for e in doctor_entries if e.day == weekday)
        if not doctor_intervals:
            return []

        clinic_intervals = [h.interval for h in clinic_hours if h.day == weekday]
        if not clinic_intervals:
            # Clinic closed that day
            return []

        return intersect_intervals(doctor_intervals, clinic_intervals)

    @staticmethod
    def schedule_entries_from_rows(rows: Iterable[DoctorSchedule]) -> List[WeeklyScheduleEntry]:
        """Convert stored schedule rows into validated entries."""
        return [
            WeeklyScheduleEntry(
                day=row.day_of_week,
                start_time=format_minutes(time_to_minutes(row.start_time)),
                end_time=format_minutes(stored_end_to_minutes(row.end_time)),
            )
            for row in rows
        ]

    @staticmethod
    def working_hours_from_rows(rows: Iterable[ClinicWorkingHours]) -> List[ClinicWorkingHoursEntry]:
        """Convert stored working-hours rows into validated entries."""
        return [
            ClinicWorkingHoursEntry(
                day=row.day_of_week,
                open=format_minutes(time_to_minutes(row.open_time)),
                close=format_minutes(stored_end_to_minutes(row.close_time)),
            )
            for row in rows
        ]

    @staticmethod
    def get_doctor_schedule(db: Session, doctor_id: int) -> List[WeeklyScheduleEntry]:
        rows = db.query(DoctorSchedule).filter(
            DoctorSchedule.doctor_id == doctor_id
        ).order_by(DoctorSchedule.day_of_week, DoctorSchedule.start_time).all()
        return ScheduleService.schedule_entries_from_rows(rows)

    @staticmethod
    def get_clinic_working_hours(db: Session, clinic_id: int) -> List[ClinicWorkingHoursEntry]:
        rows = db.query(ClinicWorkingHours).filter(
            ClinicWorkingHours.clinic_id == clinic_id
        ).order_by(ClinicWorkingHours.day_of_week).all()
        return ScheduleService.working_hours_from_rows(rows)

    @staticmethod
    def replace_doctor_schedule(
        db: Session,
        doctor: Doctor,
        entries: List[WeeklyScheduleEntry]
    ) -> List[WeeklyScheduleEntry]:
        """
        Replace a doctor's whole weekly schedule.

        Overlapping entries are stored as given; they are merged at
        computation time.
        """
        db.query(DoctorSchedule).filter(DoctorSchedule.doctor_id == doctor.id).delete()
        for entry in entries:
            interval = entry.interval
            db.add(DoctorSchedule(
                doctor_id=doctor.id,
                day_of_week=entry.day,
                start_time=minutes_to_time(interval.start),
                end_time=minutes_to_time(interval.end),
            ))
        db.commit()
        logger.info(f"Replaced schedule for doctor {doctor.id} ({len(entries)} entries)")
        return ScheduleService.get_doctor_schedule(db, doctor.id)

    @staticmethod
    def replace_clinic_working_hours(
        db: Session,
        clinic: Clinic,
        entries: List[ClinicWorkingHoursEntry]
    ) -> List[ClinicWorkingHoursEntry]:
        """
        Replace a clinic's working hours.

        Raises:
            ValueError: If a day appears more than once
        """
        entries = ScheduleService.validate_working_hours(entries)
        db.query(ClinicWorkingHours).filter(ClinicWorkingHours.clinic_id == clinic.id).delete()
        # Flush deletes before inserts so the (clinic_id, day_of_week) constraint holds
        db.flush()
        for entry in entries:
            interval = entry.interval
            db.add(ClinicWorkingHours(
                clinic_id=clinic.id,
                day_of_week=entry.day,
                open_time=minutes_to_time(interval.start),
                close_time=minutes_to_time(interval.end),
            ))
        db.commit()
        logger.info(f"Replaced working hours for clinic {clinic.id} ({len(entries)} days)")
        return ScheduleService.get_clinic_working_hours(db, clinic.id)
