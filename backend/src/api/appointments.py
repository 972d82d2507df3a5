# pyright: reportMissingTypeStubs=false
"""
Appointment API endpoints: booking, cancellation and admin status changes.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from adapters.base import AppointmentData, ClinicManagementAdapter
from api.dependencies import get_clinic, get_clinic_adapter
from api.responses import AppointmentResponse, AppointmentStatusResponse, CancelAppointmentResponse
from core.database import get_db
from models import Clinic
from services.booking_service import BookingService

logger = logging.getLogger(__name__)

router = APIRouter()


class AppointmentCreateRequest(BaseModel):
    """Request model for booking an appointment."""
    doctor_slug: str
    patient_name: str
    patient_phone: str
    patient_email: Optional[str] = None
    service: str
    date: str  # Format: "YYYY-MM-DD"
    time: str  # Format: "HH:MM"
    duration: int
    notes: Optional[str] = None


class AppointmentStatusRequest(BaseModel):
    """Request model for admin status changes."""
    status: str = Field(..., description="One of: pending, confirmed, cancelled, completed")


@router.post("/clinics/{clinic_slug}/appointments",
             summary="Book an appointment",
             status_code=status.HTTP_201_CREATED,
             response_model=AppointmentResponse)
def create_appointment(
    request: AppointmentCreateRequest,
    clinic: Clinic = Depends(get_clinic),
    adapter: ClinicManagementAdapter = Depends(get_clinic_adapter)
) -> AppointmentResponse:
    """
    Book an appointment through the clinic's management system.

    Returns 409 if the slot was taken in the meantime; the client should
    reload availability and let the patient choose again.
    """
    # Field validation errors surface as ValueError (400)
    data = AppointmentData(clinic_slug=clinic.slug, **request.model_dump())
    created = adapter.create_appointment(data)
    return AppointmentResponse(**created.model_dump())


@router.post("/clinics/{clinic_slug}/appointments/{appointment_id}/cancel",
             summary="Cancel an appointment",
             response_model=CancelAppointmentResponse)
def cancel_appointment(
    appointment_id: str,
    adapter: ClinicManagementAdapter = Depends(get_clinic_adapter)
) -> CancelAppointmentResponse:
    adapter.cancel_appointment(appointment_id)
    return CancelAppointmentResponse(success=True, appointment_id=appointment_id)


@router.patch("/clinics/{clinic_slug}/appointments/{appointment_id}/status",
              summary="Change an appointment's status",
              response_model=AppointmentStatusResponse)
def change_appointment_status(
    appointment_id: int,
    request: AppointmentStatusRequest,
    clinic: Clinic = Depends(get_clinic),
    db: Session = Depends(get_db)
) -> AppointmentStatusResponse:
    """
    Admin status change on a locally stored appointment.

    Cancelled and completed are terminal states.
    """
    appointment = BookingService.change_status(db, clinic.id, appointment_id, request.status)
    return AppointmentStatusResponse(
        id=appointment.id,
        status=appointment.status,
        date=appointment.date,
        time=appointment.time_label,
        canceled_at=appointment.canceled_at,
    )
