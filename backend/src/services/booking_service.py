"""
Booking service for the local appointment store.

Creating an appointment is a conditional write: the doctor's day is
re-checked inside the booking transaction and the insert is backed by the
partial unique index on (doctor_id, date, start_time), so two concurrent
requests for the same interval cannot both succeed.
"""

import logging
from datetime import date as date_type
from typing import List, Optional

from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Session

from core.constants import (
    APPOINTMENT_STATUS_CANCELLED, APPOINTMENT_STATUS_CONFIRMED, APPOINTMENT_STATUS_TRANSITIONS,
    APPOINTMENT_STATUSES,
)
from core.exceptions import BookingConflictError, NotFoundError
from models import Appointment, Clinic, Doctor
from services.occupancy_service import OccupancyService
from utils.datetime_utils import format_minutes, minutes_to_time, utc_now
from utils.interval_utils import Interval, overlaps_any

logger = logging.getLogger(__name__)


class BookingService:
    """
    Service class for appointment writes.
    """

    @staticmethod
    def _lock_doctor(db: Session, doctor_id: int) -> Doctor:
        """
        Lock the doctor row for the rest of the transaction.

        Fails fast with ``BookingConflictError`` when another transaction holds
        the lock. SQLite ignores FOR UPDATE and relies on its single-writer
        lock instead.
        """
        try:
            doctor = db.query(Doctor).filter(Doctor.id == doctor_id).with_for_update(nowait=True).first()
        except OperationalError as e:
            db.rollback()
            logger.warning(f"Could not lock doctor {doctor_id} for booking: {e}")
            raise BookingConflictError("Doctor schedule is being modified, please retry")
        if doctor is None:
            raise NotFoundError("Doctor", doctor_id)
        return doctor

    @staticmethod
    def find_conflicts(
        db: Session,
        doctor_id: int,
        requested_date: date_type,
        requested: Interval,
        exclude_appointment_id: Optional[int] = None
    ) -> List[Appointment]:
        """Active appointments of the doctor that overlap ``requested``."""
        appointments = OccupancyService.get_active_appointments(db, doctor_id, requested_date)
        return [
            a for a in appointments
            if a.id != exclude_appointment_id
            and overlaps_any(requested, [Interval(a.start_minutes, a.end_minutes)])
        ]

    @staticmethod
    def reserve(
        db: Session,
        clinic: Clinic,
        doctor: Doctor,
        requested_date: date_type,
        start_minutes: int,
        duration_minutes: int,
        patient_name: str,
        patient_phone: str,
        service: str,
        patient_email: Optional[str] = None,
        notes: Optional[str] = None,
        external_id: Optional[str] = None,
        status: str = APPOINTMENT_STATUS_CONFIRMED
    ) -> Appointment:
        """
        Reserve ``[start, start + duration)`` for a doctor if it is still free.

        Raises:
            BookingConflictError: If an active appointment overlaps the
                interval, either found by the re-check or by the unique index
                at commit time
            NotFoundError: If the doctor no longer exists
        """
        if duration_minutes <= 0:
            raise ValueError(f"Service duration must be positive, got {duration_minutes}")

        requested = Interval(start_minutes, start_minutes + duration_minutes)
        try:
            BookingService._lock_doctor(db, doctor.id)

            conflicts = BookingService.find_conflicts(db, doctor.id, requested_date, requested)
            if conflicts:
                raise BookingConflictError(
                    f"Slot {requested_date} {format_minutes(start_minutes)} is no longer available"
                )

            appointment = Appointment(
                clinic_id=clinic.id,
                doctor_id=doctor.id,
                patient_name=patient_name,
                patient_phone=patient_phone,
                patient_email=patient_email,
                service=service,
                date=requested_date,
                start_time=minutes_to_time(start_minutes),
                duration_minutes=duration_minutes,
                status=status,
                notes=notes,
                external_id=external_id,
            )
            db.add(appointment)
            db.commit()
            db.refresh(appointment)

        except BookingConflictError:
            db.rollback()
            logger.warning(f"Booking conflict for doctor {doctor.id} on {requested_date} at {format_minutes(start_minutes)}")
            raise
        except IntegrityError as e:
            # Another writer committed the same slot between our check and commit
            db.rollback()
            logger.warning(f"Appointment booking conflict: {e}")
            raise BookingConflictError("Slot is no longer available")

        logger.info(f"Created appointment {appointment.id} for doctor {doctor.id} on {requested_date}")
        return appointment

    @staticmethod
    def get_appointment(db: Session, clinic_id: int, appointment_id: int) -> Appointment:
        appointment = db.query(Appointment).filter(
            Appointment.id == appointment_id,
            Appointment.clinic_id == clinic_id
        ).first()
        if appointment is None:
            raise NotFoundError("Appointment", appointment_id)
        return appointment

    @staticmethod
    def cancel(db: Session, clinic_id: int, appointment_id: int) -> Appointment:
        """
        Cancel an appointment, freeing its slot.

        Idempotent: cancelling an already cancelled appointment is a no-op.
        Completed appointments cannot be cancelled.
        """
        appointment = BookingService.get_appointment(db, clinic_id, appointment_id)
        if appointment.status == APPOINTMENT_STATUS_CANCELLED:
            return appointment
        return BookingService.change_status(db, clinic_id, appointment_id, APPOINTMENT_STATUS_CANCELLED)

    @staticmethod
    def change_status(db: Session, clinic_id: int, appointment_id: int, new_status: str) -> Appointment:
        """
        Apply an admin status change.

        Raises:
            ValueError: If the status is unknown or the transition is not allowed
            NotFoundError: If the appointment does not belong to the clinic
        """
        if new_status not in APPOINTMENT_STATUSES:
            raise ValueError(f"Unknown appointment status: {new_status}")

        appointment = BookingService.get_appointment(db, clinic_id, appointment_id)
        if new_status == appointment.status:
            return appointment

        allowed = APPOINTMENT_STATUS_TRANSITIONS[appointment.status]
        if new_status not in allowed:
            raise ValueError(f"Cannot change appointment status from '{appointment.status}' to '{new_status}'")

        appointment.status = new_status
        if new_status == APPOINTMENT_STATUS_CANCELLED:
            appointment.canceled_at = utc_now()
        db.commit()
        db.refresh(appointment)

        logger.info(f"Appointment {appointment.id} status changed to {new_status}")
        return appointment
