"""
Service model (treatments offered by a clinic).

The service duration drives how long a booked slot occupies a doctor; slot
spacing itself comes from the clinic-wide grid, not from the duration.
"""

from decimal import Decimal
from typing import Optional, Dict

from sqlalchemy import ForeignKey, Numeric, CheckConstraint, JSON
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship

from core.database import Base

JSONType = JSON().with_variant(JSONB(), "postgresql")


class Service(Base):
    """A bookable treatment with a fixed duration."""

    __tablename__ = "services"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)

    clinic_id: Mapped[int] = mapped_column(ForeignKey("clinics.id"), index=True)

    name: Mapped[Dict[str, str]] = mapped_column(JSONType, default=dict)
    """Localized name, e.g. {"es": "Limpieza dental", "en": "Dental cleaning"}."""

    duration_minutes: Mapped[int] = mapped_column()

    price: Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 2), nullable=True)

    clinic = relationship("Clinic", back_populates="services")

    __table_args__ = (
        CheckConstraint('duration_minutes > 0', name='ck_services_duration_positive'),
    )

    def display_name(self, language: str = "es") -> str:
        """Name in the requested language, falling back to any available translation."""
        if language in self.name:
            return self.name[language]
        return next(iter(self.name.values()), "")

    def __repr__(self) -> str:
        return f"<Service(id={self.id}, name={self.name}, duration={self.duration_minutes})>"
