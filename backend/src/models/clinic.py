"""
Clinic model representing a dental clinic.

A clinic is the top-level tenant that owns its doctors, services, working
hours and appointments. Each clinic chooses which practice-management system
is the source of truth for availability (``management_system``).
"""

from datetime import datetime
from typing import Optional, Dict, Any

from pydantic import BaseModel, Field
from sqlalchemy import String, TIMESTAMP, JSON
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship

from core.config import DEFAULT_TIMEZONE, EXTERNAL_API_TIMEOUT_SECONDS
from core.constants import MAX_STRING_LENGTH, DEFAULT_MANAGEMENT_SYSTEM
from core.database import Base

JSONType = JSON().with_variant(JSONB(), "postgresql")


class ManagementConfig(BaseModel):
    """Schema for external management-system connection settings."""
    base_url: Optional[str] = Field(default=None, description="Base URL of the external system's API.")
    api_key: Optional[str] = Field(default=None, description="Credential sent with every request.")
    timeout_seconds: float = Field(default=EXTERNAL_API_TIMEOUT_SECONDS, gt=0, le=120)


class Clinic(Base):
    """
    Clinic entity.

    ``management_system`` is the adapter registry key ('manual', 'gesden',
    'klinicare', ...). ``management_config`` stores connection settings for
    external systems and is validated through ``ManagementConfig``.
    """

    __tablename__ = "clinics"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    """Unique identifier for the clinic."""

    slug: Mapped[str] = mapped_column(String(MAX_STRING_LENGTH), unique=True, index=True)
    """URL-safe public identifier (e.g. 'sonrisa-madrid')."""

    name: Mapped[str] = mapped_column(String(MAX_STRING_LENGTH))
    """Display name of the clinic."""

    email: Mapped[Optional[str]] = mapped_column(String(MAX_STRING_LENGTH), nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)

    management_system: Mapped[str] = mapped_column(String(50), default=DEFAULT_MANAGEMENT_SYSTEM)
    """Key of the availability adapter used for this clinic."""

    management_config: Mapped[Dict[str, Any]] = mapped_column(JSONType, default=dict)
    """Connection settings for external management systems."""

    timezone: Mapped[str] = mapped_column(String(64), default=DEFAULT_TIMEZONE)
    """IANA timezone used to interpret dates and times for this clinic."""

    created_at: Mapped[Optional[datetime]] = mapped_column(TIMESTAMP(timezone=True), nullable=True)
    updated_at: Mapped[Optional[datetime]] = mapped_column(TIMESTAMP(timezone=True), nullable=True)

    # Relationships
    working_hours = relationship(
        "ClinicWorkingHours", back_populates="clinic", cascade="all, delete-orphan",
        order_by="ClinicWorkingHours.day_of_week",
    )
    doctors = relationship("Doctor", back_populates="clinic", cascade="all, delete-orphan")
    services = relationship("Service", back_populates="clinic", cascade="all, delete-orphan")
    appointments = relationship("Appointment", back_populates="clinic")

    def get_management_config(self) -> ManagementConfig:
        """
        Get validated management-system settings.

        Raises:
            pydantic.ValidationError: If the stored settings are invalid
        """
        return ManagementConfig.model_validate(self.management_config or {})

    def __repr__(self) -> str:
        return f"<Clinic(id={self.id}, slug='{self.slug}', system='{self.management_system}')>"
