"""
ManualAdapter: availability and bookings from the platform's own database.

Slots are computed from the doctor's weekly schedule, the clinic's working
hours and existing appointments. Bookings go through
``BookingService.reserve`` so double-booking is rejected at commit time.
"""

import logging
from datetime import datetime
from typing import Callable, List, Optional

from sqlalchemy.orm import Session

from adapters.base import AppointmentData, CreatedAppointment, DoctorData, TimeSlot
from adapters.helpers import get_clinic_doctor
from core.config import SLOT_STEP_MINUTES
from core.exceptions import NotFoundError
from models import Appointment, Clinic, Doctor
from services.availability_service import AvailabilityService
from services.booking_service import BookingService
from services.schedule_service import ScheduleService
from utils.datetime_utils import clinic_now, parse_date_string, parse_time_to_minutes

logger = logging.getLogger(__name__)


class ManualAdapter:
    """Adapter for clinics that manage their agenda on this platform."""

    system = "manual"

    def __init__(
        self,
        db: Session,
        clinic: Clinic,
        clock: Optional[Callable[[], datetime]] = None,
        step_minutes: int = SLOT_STEP_MINUTES
    ):
        self.db = db
        self.clinic = clinic
        self.step_minutes = step_minutes
        self._clock = clock or (lambda: clinic_now(clinic.timezone))

    def get_available_slots(self, doctor_identifier: str, date: str, service_duration: int) -> List[TimeSlot]:
        requested_date = AvailabilityService.validate_request(date, service_duration)
        doctor = get_clinic_doctor(self.db, self.clinic, doctor_identifier)
        return AvailabilityService.get_available_slots_for_doctor(
            self.db, self.clinic, doctor, requested_date, service_duration,
            now=self._clock(), step_minutes=self.step_minutes,
        )

    def _validate_requested_start(self, doctor: Doctor, data: AppointmentData) -> None:
        """
        Check that the requested start is a slot the doctor could offer on an
        empty day. Occupancy is checked later, inside the booking transaction.

        Raises:
            ValueError: If the start time is outside availability, off-grid or in the past
        """
        requested_date = parse_date_string(data.date)
        nominal = ScheduleService.nominal_availability(
            ScheduleService.get_doctor_schedule(self.db, doctor.id),
            ScheduleService.get_clinic_working_hours(self.db, self.clinic.id),
            requested_date,
        )
        offered = AvailabilityService.generate_slots(
            nominal, [], data.duration, requested_date, self._clock(), self.step_minutes
        )
        if data.time not in {slot.start for slot in offered}:
            raise ValueError(f"Selected time {data.date} {data.time} is not bookable for this doctor")

    def create_appointment(self, data: AppointmentData) -> CreatedAppointment:
        doctor = get_clinic_doctor(self.db, self.clinic, data.doctor_slug)
        self._validate_requested_start(doctor, data)

        appointment = BookingService.reserve(
            self.db,
            self.clinic,
            doctor,
            requested_date=parse_date_string(data.date),
            start_minutes=parse_time_to_minutes(data.time),
            duration_minutes=data.duration,
            patient_name=data.patient_name,
            patient_phone=data.patient_phone,
            patient_email=data.patient_email,
            service=data.service,
            notes=data.notes,
        )
        return self.to_created_appointment(appointment, doctor)

    def cancel_appointment(self, appointment_id: str) -> None:
        try:
            local_id = int(appointment_id)
        except (TypeError, ValueError):
            raise NotFoundError("Appointment", appointment_id)
        BookingService.cancel(self.db, self.clinic.id, local_id)

    def sync_doctors(self) -> List[DoctorData]:
        doctors = self.db.query(Doctor).filter(
            Doctor.clinic_id == self.clinic.id,
            Doctor.is_active == True
        ).order_by(Doctor.name).all()
        return [
            DoctorData(slug=d.slug, name=d.name, specialization=d.specialization or {}, external_id=d.external_id)
            for d in doctors
        ]

    def close(self) -> None:
        """Nothing to release; the session belongs to the caller."""

    def to_created_appointment(self, appointment: Appointment, doctor: Doctor) -> CreatedAppointment:
        return CreatedAppointment(
            id=str(appointment.id),
            external_id=appointment.external_id,
            clinic_slug=self.clinic.slug,
            doctor_slug=doctor.slug,
            patient_name=appointment.patient_name,
            patient_phone=appointment.patient_phone,
            patient_email=appointment.patient_email,
            service=appointment.service,
            date=appointment.date.isoformat(),
            time=appointment.time_label,
            duration=appointment.duration_minutes,
            notes=appointment.notes,
            status=appointment.status,
            created_at=appointment.created_at,
        )
