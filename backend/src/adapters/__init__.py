# Package initialization
# Only the shared types are exported here; import concrete adapters from
# their modules or resolve them through adapters.factory.get_adapter.
from .base import (
    AppointmentData,
    ClinicManagementAdapter,
    CreatedAppointment,
    DoctorData,
    TimeSlot,
)

__all__ = [
    "AppointmentData",
    "ClinicManagementAdapter",
    "CreatedAppointment",
    "DoctorData",
    "TimeSlot",
]
