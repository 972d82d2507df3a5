"""
Test configuration and shared fixtures for the dental booking test suite.

Uses an in-memory SQLite database created from the SQLAlchemy models. Each
test function gets its own engine, so every test starts from an empty schema.
"""

import pytest
from datetime import date, datetime, time, timedelta
from typing import Generator
from zoneinfo import ZoneInfo

from sqlalchemy.orm import Session

from core.database import Database, build_engine
from models.clinic import Clinic
from models.clinic_working_hours import ClinicWorkingHours
from models.doctor import Doctor
from models.doctor_schedule import DoctorSchedule
from models.appointment import Appointment


CLINIC_TZ = ZoneInfo("Europe/Madrid")

# A Monday well in the future, so slots are never filtered as past
FUTURE_MONDAY = date(2099, 6, 1)


@pytest.fixture
def database() -> Generator[Database, None, None]:
    """
    Fresh in-memory database with all tables created.

    ``build_engine`` uses a StaticPool for memory URLs, so every session
    opened from this handle sees the same data.
    """
    db = Database(engine=build_engine("sqlite://"))
    db.create_tables()

    yield db

    db.drop_tables()
    db.dispose()


@pytest.fixture
def db_session(database: Database) -> Generator[Session, None, None]:
    """Provide a database session for a test."""
    session = database.session()
    yield session
    session.rollback()
    session.close()


@pytest.fixture
def fixed_now():
    """Clinic-local 'now' far before FUTURE_MONDAY."""
    return datetime(2099, 5, 1, 8, 0, tzinfo=CLINIC_TZ)


@pytest.fixture
def clock(fixed_now):
    return lambda: fixed_now


@pytest.fixture
def clinic(db_session: Session) -> Clinic:
    """Manual clinic open 09:00-18:00 Monday to Friday."""
    clinic = create_clinic(db_session, slug="sonrisa-madrid", name="Clínica Sonrisa")
    for day in range(1, 6):
        create_working_hours(db_session, clinic, day, time(9, 0), time(18, 0))
    db_session.commit()
    return clinic


@pytest.fixture
def doctor(db_session: Session, clinic: Clinic) -> Doctor:
    """Doctor working 09:00-13:00 Monday to Friday."""
    doctor = create_doctor(db_session, clinic, slug="dra-garcia", name="Dra. García")
    for day in range(1, 6):
        create_schedule(db_session, doctor, day, time(9, 0), time(13, 0))
    db_session.commit()
    return doctor


# Helper functions for creating test data
def create_clinic(
    db_session: Session,
    slug: str = "test-clinic",
    name: str = "Test Clinic",
    management_system: str = "manual",
    management_config: dict | None = None,
    timezone: str = "Europe/Madrid"
) -> Clinic:
    clinic = Clinic(
        slug=slug,
        name=name,
        management_system=management_system,
        management_config=management_config or {},
        timezone=timezone,
    )
    db_session.add(clinic)
    db_session.flush()
    return clinic


def create_working_hours(
    db_session: Session,
    clinic: Clinic,
    day_of_week: int,
    open_time: time,
    close_time: time
) -> ClinicWorkingHours:
    """
    Helper to create ClinicWorkingHours for a clinic.

    Args:
        day_of_week: Day of week (0=Sunday, 6=Saturday)
    """
    hours = ClinicWorkingHours(
        clinic_id=clinic.id,
        day_of_week=day_of_week,
        open_time=open_time,
        close_time=close_time,
    )
    db_session.add(hours)
    return hours


def create_doctor(
    db_session: Session,
    clinic: Clinic,
    slug: str = "test-doctor",
    name: str = "Test Doctor",
    external_id: str | None = None,
    is_active: bool = True
) -> Doctor:
    doctor = Doctor(
        clinic_id=clinic.id,
        slug=slug,
        name=name,
        specialization={"es": "Odontología general"},
        external_id=external_id,
        is_active=is_active,
    )
    db_session.add(doctor)
    db_session.flush()
    return doctor


def create_schedule(
    db_session: Session,
    doctor: Doctor,
    day_of_week: int,
    start_time: time,
    end_time: time
) -> DoctorSchedule:
    """
    Helper to create one DoctorSchedule period.

    Args:
        day_of_week: Day of week (0=Sunday, 6=Saturday)
    """
    schedule = DoctorSchedule(
        doctor_id=doctor.id,
        day_of_week=day_of_week,
        start_time=start_time,
        end_time=end_time,
    )
    db_session.add(schedule)
    return schedule


def create_appointment(
    db_session: Session,
    doctor: Doctor,
    appointment_date: date,
    start_time: time,
    duration_minutes: int = 30,
    status: str = "confirmed",
    patient_name: str = "Ana López"
) -> Appointment:
    appointment = Appointment(
        clinic_id=doctor.clinic_id,
        doctor_id=doctor.id,
        patient_name=patient_name,
        patient_phone="+34600111222",
        service="Limpieza dental",
        date=appointment_date,
        start_time=start_time,
        duration_minutes=duration_minutes,
        status=status,
    )
    db_session.add(appointment)
    db_session.commit()
    return appointment


def slot_starts(slots) -> list[str]:
    return [slot.start for slot in slots]


def next_weekday(start: date, weekday: int) -> date:
    """First date on or after ``start`` with Python ``weekday()`` == weekday."""
    return start + timedelta(days=(weekday - start.weekday()) % 7)
