# Package initialization
# Import all models to ensure relationships are properly established
from .clinic import Clinic
from .clinic_working_hours import ClinicWorkingHours
from .doctor import Doctor
from .doctor_schedule import DoctorSchedule
from .service import Service
from .appointment import Appointment

__all__ = [
    "Clinic",
    "ClinicWorkingHours",
    "Doctor",
    "DoctorSchedule",
    "Service",
    "Appointment",
]
