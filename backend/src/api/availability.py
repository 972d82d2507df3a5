# pyright: reportMissingTypeStubs=false
"""
Availability & schedule API endpoints.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from adapters.base import ClinicManagementAdapter
from api.dependencies import get_clinic, get_clinic_adapter, get_doctor
from api.responses import AvailableSlotsResponse, DoctorScheduleResponse, WorkingHoursResponse
from core.database import get_db
from models import Clinic, Doctor
from services.schedule_service import ClinicWorkingHoursEntry, ScheduleService, WeeklyScheduleEntry

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/clinics/{clinic_slug}/doctors/{doctor_slug}/slots",
            summary="Get available slots for a doctor on a date",
            response_model=AvailableSlotsResponse)
def get_available_slots(
    doctor_slug: str,
    date: str = Query(..., description="Date in YYYY-MM-DD format"),
    duration: int = Query(..., description="Service duration in minutes"),
    clinic: Clinic = Depends(get_clinic),
    adapter: ClinicManagementAdapter = Depends(get_clinic_adapter)
) -> AvailableSlotsResponse:
    """
    Get bookable start times for a doctor.

    The clinic's configured management system answers the query; the result
    is ascending by start time and may be empty.
    """
    slots = adapter.get_available_slots(doctor_slug, date, duration)
    logger.debug(f"{len(slots)} slots for {clinic.slug}/{doctor_slug} on {date} ({adapter.system})")
    return AvailableSlotsResponse(slots=slots)


@router.get("/clinics/{clinic_slug}/doctors/{doctor_slug}/schedule",
            summary="Get a doctor's weekly schedule",
            response_model=DoctorScheduleResponse)
def get_doctor_schedule(
    doctor: Doctor = Depends(get_doctor),
    db: Session = Depends(get_db)
) -> DoctorScheduleResponse:
    return DoctorScheduleResponse(
        doctor_slug=doctor.slug,
        entries=ScheduleService.get_doctor_schedule(db, doctor.id),
    )


@router.put("/clinics/{clinic_slug}/doctors/{doctor_slug}/schedule",
            summary="Replace a doctor's weekly schedule",
            response_model=DoctorScheduleResponse)
def update_doctor_schedule(
    entries: List[WeeklyScheduleEntry],
    doctor: Doctor = Depends(get_doctor),
    db: Session = Depends(get_db)
) -> DoctorScheduleResponse:
    """
    Replace the whole weekly schedule with the provided entries.

    Multiple entries per day are allowed and may overlap.
    """
    saved = ScheduleService.replace_doctor_schedule(db, doctor, entries)
    return DoctorScheduleResponse(doctor_slug=doctor.slug, entries=saved)


@router.get("/clinics/{clinic_slug}/working-hours",
            summary="Get a clinic's working hours",
            response_model=WorkingHoursResponse)
def get_working_hours(
    clinic: Clinic = Depends(get_clinic),
    db: Session = Depends(get_db)
) -> WorkingHoursResponse:
    return WorkingHoursResponse(
        clinic_slug=clinic.slug,
        entries=ScheduleService.get_clinic_working_hours(db, clinic.id),
    )


@router.put("/clinics/{clinic_slug}/working-hours",
            summary="Replace a clinic's working hours",
            response_model=WorkingHoursResponse)
def update_working_hours(
    entries: List[ClinicWorkingHoursEntry],
    clinic: Clinic = Depends(get_clinic),
    db: Session = Depends(get_db)
) -> WorkingHoursResponse:
    """
    Replace the clinic's working hours. At most one entry per day; days
    without an entry are closed.
    """
    saved = ScheduleService.replace_clinic_working_hours(db, clinic, entries)
    return WorkingHoursResponse(clinic_slug=clinic.slug, entries=saved)
