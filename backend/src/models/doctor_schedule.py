"""
Doctor schedule model for the recurring weekly schedule.

Doctors can set multiple working periods per day (e.g., 9am-1pm, 3pm-7pm)
for split morning and afternoon sessions. Periods are not assumed to be
contiguous or non-overlapping; overlaps are merged when availability is
computed.
"""

from datetime import time
from sqlalchemy import Time, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship

from core.constants import DAY_NAMES
from core.database import Base


class DoctorSchedule(Base):
    """
    One working period of a doctor's default week.

    No unique constraints: multiple intervals per day are allowed.
    """

    __tablename__ = "doctor_schedules"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    """Unique identifier for the schedule record."""

    doctor_id: Mapped[int] = mapped_column(ForeignKey("doctors.id"))
    """Reference to the doctor."""

    day_of_week: Mapped[int] = mapped_column()
    """Day of the week (0=Sunday, 1=Monday, ..., 6=Saturday)."""

    start_time: Mapped[time] = mapped_column(Time)
    """Start time of the working period."""

    end_time: Mapped[time] = mapped_column(Time)
    """End time of the working period. 23:59:59 stands for end of day (24:00)."""

    # Relationships
    doctor = relationship("Doctor", back_populates="schedule")

    # Table indexes for performance
    __table_args__ = (
        Index('idx_doctor_schedules_doctor_day', 'doctor_id', 'day_of_week'),
    )

    @property
    def day_name(self) -> str:
        """Get the day name for display."""
        return DAY_NAMES[self.day_of_week]

    def __repr__(self) -> str:
        return f"<DoctorSchedule(doctor_id={self.doctor_id}, day={self.day_name}, {self.start_time}-{self.end_time})>"
