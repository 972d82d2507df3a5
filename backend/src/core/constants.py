"""Application constants and configuration values."""

from core.config import FRONTEND_URL

# Database field lengths
MAX_STRING_LENGTH = 255
MAX_NOTES_LENGTH = 1000

# Database connection settings
DB_POOL_RECYCLE_SECONDS = 300  # 5 minutes

# CORS origins for development and production
_CORS_ORIGINS_RAW = [
    "http://localhost:5173",      # Frontend dev server (Vite)
    FRONTEND_URL,
]

# Filter out None values and empty strings to avoid CORS errors
CORS_ORIGINS = [origin for origin in _CORS_ORIGINS_RAW if origin and origin.strip()]

# Scheduling
MINUTES_PER_DAY = 24 * 60
DAYS_PER_WEEK = 7
# Day-of-week convention for schedules and working hours: 0=Sunday ... 6=Saturday
DAY_NAMES = ['Sunday', 'Monday', 'Tuesday', 'Wednesday', 'Thursday', 'Friday', 'Saturday']

# Management systems
DEFAULT_MANAGEMENT_SYSTEM = "manual"

# Appointment lifecycle
APPOINTMENT_STATUS_PENDING = "pending"
APPOINTMENT_STATUS_CONFIRMED = "confirmed"
APPOINTMENT_STATUS_CANCELLED = "cancelled"
APPOINTMENT_STATUS_COMPLETED = "completed"

APPOINTMENT_STATUSES = (
    APPOINTMENT_STATUS_PENDING,
    APPOINTMENT_STATUS_CONFIRMED,
    APPOINTMENT_STATUS_CANCELLED,
    APPOINTMENT_STATUS_COMPLETED,
)

# Allowed admin status changes. Cancelled and completed are terminal.
APPOINTMENT_STATUS_TRANSITIONS = {
    APPOINTMENT_STATUS_PENDING: {APPOINTMENT_STATUS_CONFIRMED, APPOINTMENT_STATUS_CANCELLED},
    APPOINTMENT_STATUS_CONFIRMED: {APPOINTMENT_STATUS_CANCELLED, APPOINTMENT_STATUS_COMPLETED},
    APPOINTMENT_STATUS_CANCELLED: set(),
    APPOINTMENT_STATUS_COMPLETED: set(),
}
