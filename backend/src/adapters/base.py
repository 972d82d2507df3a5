"""
Adapter layer types for clinic management system integration.

Every adapter, local or external, implements ``ClinicManagementAdapter`` and
returns the same shapes, so callers never need to know which system answered.
"""

from datetime import datetime
from typing import List, Optional, Dict, Protocol, runtime_checkable

from pydantic import BaseModel, Field, field_validator

from utils.datetime_utils import parse_date_string, parse_time_to_minutes


class TimeSlot(BaseModel):
    """A bookable start time. ``end`` is start + requested duration."""
    start: str  # Format: "HH:MM"
    end: str    # Format: "HH:MM"


class AppointmentData(BaseModel):
    """Booking request passed to ``create_appointment``."""
    clinic_slug: str
    doctor_slug: str
    patient_name: str
    patient_phone: str
    patient_email: Optional[str] = None
    service: str
    date: str  # Format: "YYYY-MM-DD"
    time: str  # Format: "HH:MM"
    duration: int = Field(gt=0)  # minutes
    notes: Optional[str] = Field(default=None, max_length=1000)

    @field_validator('patient_name', 'patient_phone', 'service', 'doctor_slug')
    @classmethod
    def validate_required(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError('Field is required')
        return v.strip()

    @field_validator('date')
    @classmethod
    def validate_date(cls, v: str) -> str:
        parse_date_string(v)
        return v

    @field_validator('time')
    @classmethod
    def validate_time(cls, v: str) -> str:
        parse_time_to_minutes(v)
        return v


class CreatedAppointment(BaseModel):
    """Appointment as returned by any adapter after booking."""
    id: str
    external_id: Optional[str] = None
    clinic_slug: str
    doctor_slug: str
    patient_name: str
    patient_phone: str
    patient_email: Optional[str] = None
    service: str
    date: str
    time: str
    duration: int
    notes: Optional[str] = None
    status: str  # 'pending', 'confirmed', 'cancelled' or 'completed'
    created_at: Optional[datetime] = None


class DoctorData(BaseModel):
    """Doctor as known to a management system."""
    slug: str
    name: str
    specialization: Dict[str, str] = {}
    external_id: Optional[str] = None


@runtime_checkable
class ClinicManagementAdapter(Protocol):
    """
    Source of availability and bookings for one clinic.

    Implementations must return slots strictly ascending by start time and
    without duplicates, and must raise ``ExternalAdapterError`` rather than
    return an empty list when their backing system fails.
    """

    system: str

    def get_available_slots(self, doctor_identifier: str, date: str, service_duration: int) -> List[TimeSlot]:
        ...

    def create_appointment(self, data: AppointmentData) -> CreatedAppointment:
        ...

    def cancel_appointment(self, appointment_id: str) -> None:
        ...

    def sync_doctors(self) -> List[DoctorData]:
        ...

    def close(self) -> None:
        """Release resources held for the current request."""
        ...
