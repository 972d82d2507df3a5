"""
Helpers shared by the external adapters.
"""

import logging
from datetime import date as date_type, datetime
from typing import Iterable, List, Tuple

from sqlalchemy.orm import Session

from adapters.base import TimeSlot
from core.exceptions import ExternalAdapterError, NotFoundError
from models import Clinic, Doctor
from utils.datetime_utils import format_minutes, parse_time_to_minutes

logger = logging.getLogger(__name__)


def get_clinic_doctor(db: Session, clinic: Clinic, doctor_slug: str) -> Doctor:
    """
    Resolve a doctor slug within a clinic.

    Raises:
        NotFoundError: If the clinic has no active doctor with that slug
    """
    doctor = db.query(Doctor).filter(
        Doctor.clinic_id == clinic.id,
        Doctor.slug == doctor_slug,
        Doctor.is_active == True
    ).first()
    if doctor is None:
        raise NotFoundError("Doctor", doctor_slug)
    return doctor


def external_doctor_id(doctor: Doctor) -> str:
    """Identifier to send to the external system; the slug when none was synced."""
    return doctor.external_id or doctor.slug


def parse_external_time(system: str, value: object) -> int:
    """
    Parse an "HH:MM" value received from an external system.

    Raises:
        ExternalAdapterError: If the value is not a valid time string
    """
    if not isinstance(value, str):
        raise ExternalAdapterError(system, f"unexpected time value {value!r}")
    try:
        # Accept "HH:MM:SS" by ignoring seconds
        return parse_time_to_minutes(value[:5])
    except ValueError:
        raise ExternalAdapterError(system, f"unexpected time value {value!r}")


def build_time_slots(
    intervals: Iterable[Tuple[int, int]],
    requested_date: date_type,
    now: datetime
) -> List[TimeSlot]:
    """
    Normalize translated external slots into the common contract.

    Sorts ascending, removes duplicate starts, drops empty intervals and,
    for today, starts that are not strictly after the current minute.
    """
    if requested_date < now.date():
        return []
    earliest_start = now.hour * 60 + now.minute if requested_date == now.date() else -1

    by_start = {}
    for start, end in intervals:
        if end <= start or start <= earliest_start:
            continue
        by_start.setdefault(start, end)

    return [
        TimeSlot(start=format_minutes(start), end=format_minutes(by_start[start]))
        for start in sorted(by_start)
    ]
