"""
Doctor model.

Doctors belong to exactly one clinic and own a recurring weekly schedule
(``DoctorSchedule`` rows). Doctors synced from an external practice-management
system keep that system's identifier in ``external_id``.
"""

from datetime import datetime
from typing import Optional, Dict

from sqlalchemy import String, ForeignKey, Boolean, TIMESTAMP, UniqueConstraint, JSON
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship

from core.constants import MAX_STRING_LENGTH
from core.database import Base

JSONType = JSON().with_variant(JSONB(), "postgresql")


class Doctor(Base):
    """Doctor working at a clinic."""

    __tablename__ = "doctors"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)

    clinic_id: Mapped[int] = mapped_column(ForeignKey("clinics.id"), index=True)
    """Reference to the clinic the doctor works at."""

    slug: Mapped[str] = mapped_column(String(MAX_STRING_LENGTH))
    """URL-safe identifier, unique within the clinic."""

    name: Mapped[str] = mapped_column(String(MAX_STRING_LENGTH))

    specialization: Mapped[Dict[str, str]] = mapped_column(JSONType, default=dict)
    """Localized specialization, e.g. {"es": "Ortodoncia", "en": "Orthodontics"}."""

    external_id: Mapped[Optional[str]] = mapped_column(String(MAX_STRING_LENGTH), nullable=True)
    """Identifier of this doctor in the clinic's external management system."""

    is_active: Mapped[bool] = mapped_column(Boolean, default=True)

    created_at: Mapped[Optional[datetime]] = mapped_column(TIMESTAMP(timezone=True), nullable=True)

    # Relationships
    clinic = relationship("Clinic", back_populates="doctors")
    schedule = relationship(
        "DoctorSchedule", back_populates="doctor", cascade="all, delete-orphan",
        order_by="[DoctorSchedule.day_of_week, DoctorSchedule.start_time]",
    )
    appointments = relationship("Appointment", back_populates="doctor")

    __table_args__ = (
        UniqueConstraint('clinic_id', 'slug', name='uq_doctors_clinic_slug'),
    )

    def __repr__(self) -> str:
        return f"<Doctor(id={self.id}, slug='{self.slug}', clinic_id={self.clinic_id})>"
