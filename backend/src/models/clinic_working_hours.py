"""
Clinic working hours by day of week.

At most one row per clinic and day. A day without a row means the clinic is
closed that day, and no doctor can be offered slots on it.
"""

from datetime import time
from sqlalchemy import Time, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from core.constants import DAY_NAMES
from core.database import Base


class ClinicWorkingHours(Base):
    """Opening hours of a clinic for one day of the week."""

    __tablename__ = "clinic_working_hours"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)

    clinic_id: Mapped[int] = mapped_column(ForeignKey("clinics.id"), index=True)
    """Reference to the owning clinic."""

    day_of_week: Mapped[int] = mapped_column()
    """Day of the week (0=Sunday, 1=Monday, ..., 6=Saturday)."""

    open_time: Mapped[time] = mapped_column(Time)
    close_time: Mapped[time] = mapped_column(Time)
    """Closing time. 23:59:59 stands for end of day (24:00)."""

    clinic = relationship("Clinic", back_populates="working_hours")

    __table_args__ = (
        UniqueConstraint('clinic_id', 'day_of_week', name='uq_clinic_working_hours_day'),
    )

    @property
    def day_name(self) -> str:
        return DAY_NAMES[self.day_of_week]

    def __repr__(self) -> str:
        return f"<ClinicWorkingHours(clinic_id={self.clinic_id}, day={self.day_name}, {self.open_time}-{self.close_time})>"
