"""
Shared response models for API endpoints.

This module contains Pydantic response models that are shared across
multiple API endpoints to ensure consistency and reduce duplication.
"""

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel

from adapters.base import TimeSlot
from services.schedule_service import ClinicWorkingHoursEntry, WeeklyScheduleEntry


class AvailableSlotsResponse(BaseModel):
    """Response model for available time slots."""
    slots: List[TimeSlot]


class AppointmentResponse(BaseModel):
    """Response model for a booked appointment."""
    id: str
    external_id: Optional[str] = None
    clinic_slug: str
    doctor_slug: str
    patient_name: str
    patient_phone: str
    patient_email: Optional[str] = None
    service: str
    date: str  # Format: "YYYY-MM-DD"
    time: str  # Format: "HH:MM"
    duration: int
    notes: Optional[str] = None
    status: str
    created_at: Optional[datetime] = None


class AppointmentStatusResponse(BaseModel):
    """Response model for appointment status changes."""
    id: int
    status: str
    date: date
    time: str  # Format: "HH:MM"
    canceled_at: Optional[datetime] = None


class CancelAppointmentResponse(BaseModel):
    """Response model for cancellations."""
    success: bool
    appointment_id: str


class DoctorScheduleResponse(BaseModel):
    """Response model for a doctor's weekly schedule."""
    doctor_slug: str
    entries: List[WeeklyScheduleEntry]


class WorkingHoursResponse(BaseModel):
    """Response model for a clinic's working hours."""
    clinic_slug: str
    entries: List[ClinicWorkingHoursEntry]
