"""
Appointment model representing booked appointments between patients and doctors.

Appointments are the occupancy source for slot availability: every appointment
whose status is not 'cancelled' occupies ``[start_time, start_time + duration)``
of its doctor's day. Appointments are never deleted; cancellation is a status
change that frees the slot.
"""

from datetime import date as date_type, datetime, time
from typing import Optional
from sqlalchemy import String, ForeignKey, Index, TIMESTAMP, Date, Time, CheckConstraint, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from core.constants import MAX_STRING_LENGTH, MAX_NOTES_LENGTH, APPOINTMENT_STATUS_CONFIRMED
from core.database import Base
from utils.datetime_utils import time_to_minutes, format_minutes


class Appointment(Base):
    """
    Appointment entity for a single booked visit.

    The partial unique index ``uq_appointments_active_slot`` guarantees at most
    one active appointment per (doctor, date, start_time), which backs up the
    overlap check done at booking time.
    """

    __tablename__ = "appointments"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)

    clinic_id: Mapped[int] = mapped_column(ForeignKey("clinics.id"))
    """Reference to the clinic that owns the appointment."""

    doctor_id: Mapped[int] = mapped_column(ForeignKey("doctors.id"))
    """Reference to the doctor whose time is occupied."""

    patient_name: Mapped[str] = mapped_column(String(MAX_STRING_LENGTH))
    patient_phone: Mapped[str] = mapped_column(String(50))
    patient_email: Mapped[Optional[str]] = mapped_column(String(MAX_STRING_LENGTH), nullable=True)

    service: Mapped[str] = mapped_column(String(MAX_STRING_LENGTH))
    """Name of the booked service as shown to the patient."""

    date: Mapped[date_type] = mapped_column(Date)
    """Calendar day of the appointment (clinic-local)."""

    start_time: Mapped[time] = mapped_column(Time)
    """Clinic-local start time."""

    duration_minutes: Mapped[int] = mapped_column()

    status: Mapped[str] = mapped_column(String(50), default=APPOINTMENT_STATUS_CONFIRMED)
    """Valid values: 'pending', 'confirmed', 'cancelled', 'completed'."""

    external_id: Mapped[Optional[str]] = mapped_column(String(MAX_STRING_LENGTH), nullable=True)
    """Identifier assigned by an external management system, if any."""

    notes: Mapped[Optional[str]] = mapped_column(String(MAX_NOTES_LENGTH), nullable=True)
    """Optional patient-provided notes."""

    canceled_at: Mapped[Optional[datetime]] = mapped_column(TIMESTAMP(timezone=True), nullable=True)

    created_at: Mapped[Optional[datetime]] = mapped_column(TIMESTAMP(timezone=True), nullable=True)
    updated_at: Mapped[Optional[datetime]] = mapped_column(TIMESTAMP(timezone=True), nullable=True)

    # Relationships
    clinic = relationship("Clinic", back_populates="appointments")
    doctor = relationship("Doctor", back_populates="appointments")

    @property
    def start_minutes(self) -> int:
        return time_to_minutes(self.start_time)

    @property
    def end_minutes(self) -> int:
        return self.start_minutes + self.duration_minutes

    @property
    def time_label(self) -> str:
        """Start time as "HH:MM"."""
        return format_minutes(self.start_minutes)

    # Table indexes for performance
    __table_args__ = (
        Index('idx_appointments_doctor_date', 'doctor_id', 'date'),
        Index('idx_appointments_status', 'status'),
        Index(
            'uq_appointments_active_slot', 'doctor_id', 'date', 'start_time',
            unique=True,
            sqlite_where=text("status != 'cancelled'"),
            postgresql_where=text("status != 'cancelled'"),
        ),
        CheckConstraint('duration_minutes > 0', name='ck_appointments_duration_positive'),
    )

    def __repr__(self) -> str:
        return f"<Appointment(id={self.id}, doctor_id={self.doctor_id}, {self.date} {self.start_time}, status='{self.status}')>"
