"""
Shared FastAPI dependencies for clinic-scoped endpoints.
"""

from typing import Generator

from fastapi import Depends
from sqlalchemy.orm import Session

from adapters.base import ClinicManagementAdapter
from adapters.factory import get_adapter
from adapters.helpers import get_clinic_doctor
from core.database import get_db
from core.exceptions import NotFoundError
from models import Clinic, Doctor


def get_clinic(clinic_slug: str, db: Session = Depends(get_db)) -> Clinic:
    """Resolve the clinic from the ``clinic_slug`` path parameter."""
    clinic = db.query(Clinic).filter(Clinic.slug == clinic_slug).first()
    if clinic is None:
        raise NotFoundError("Clinic", clinic_slug)
    return clinic


def get_doctor(
    doctor_slug: str,
    clinic: Clinic = Depends(get_clinic),
    db: Session = Depends(get_db)
) -> Doctor:
    """Resolve an active doctor of the clinic from the ``doctor_slug`` path parameter."""
    return get_clinic_doctor(db, clinic, doctor_slug)


def get_clinic_adapter(
    clinic: Clinic = Depends(get_clinic),
    db: Session = Depends(get_db)
) -> Generator[ClinicManagementAdapter, None, None]:
    """
    Provide the clinic's management-system adapter for one request.

    The adapter is closed when the request finishes, including when the
    handler raised.
    """
    adapter = get_adapter(clinic, db)
    try:
        yield adapter
    finally:
        adapter.close()
