"""
KlinicareAdapter: availability and bookings delegated to the Klinicare REST API.

Klinicare reports availability as ISO-8601 datetimes with offsets
(``startsAt``/``endsAt``). They are converted to the clinic's timezone and
only entries falling on the requested day are kept.
"""

import logging
from datetime import datetime
from typing import Callable, List, Optional

import httpx
from sqlalchemy.orm import Session

from adapters.base import AppointmentData, CreatedAppointment, DoctorData, TimeSlot
from adapters.helpers import build_time_slots, external_doctor_id, get_clinic_doctor
from adapters.http_client import ExternalApiClient
from core.exceptions import ExternalAdapterError
from models import Clinic
from services.availability_service import AvailabilityService
from utils.datetime_utils import clinic_now, get_timezone

logger = logging.getLogger(__name__)

KLINICARE_STATUS_MAP = {
    "requested": "pending",
    "booked": "confirmed",
    "cancelled": "cancelled",
    "fulfilled": "completed",
}


class KlinicareAdapter:
    """Adapter for clinics whose agenda lives in Klinicare."""

    system = "klinicare"

    def __init__(
        self,
        db: Session,
        clinic: Clinic,
        transport: Optional[httpx.BaseTransport] = None,
        clock: Optional[Callable[[], datetime]] = None
    ):
        self.db = db
        self.clinic = clinic
        self.tz = get_timezone(clinic.timezone)
        self.client = ExternalApiClient(self.system, clinic.get_management_config(), transport=transport)
        self._clock = clock or (lambda: clinic_now(clinic.timezone))

    def _parse_datetime(self, value: object) -> datetime:
        if not isinstance(value, str):
            raise ExternalAdapterError(self.system, f"unexpected datetime value {value!r}")
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            raise ExternalAdapterError(self.system, f"unexpected datetime value {value!r}")
        if parsed.tzinfo is None:
            # Naive values are clinic-local
            return parsed.replace(tzinfo=self.tz)
        return parsed.astimezone(self.tz)

    def get_available_slots(self, doctor_identifier: str, date: str, service_duration: int) -> List[TimeSlot]:
        requested_date = AvailabilityService.validate_request(date, service_duration)
        doctor = get_clinic_doctor(self.db, self.clinic, doctor_identifier)
        now = self._clock()
        if requested_date < now.date():
            return []

        payload = self.client.request(
            "GET",
            "/v1/availability",
            params={
                "practitionerId": external_doctor_id(doctor),
                "date": date,
                "duration": service_duration,
            },
        )
        if not isinstance(payload, dict) or not isinstance(payload.get("data"), list):
            raise ExternalAdapterError(self.system, "availability response without 'data' list")

        intervals = []
        for item in payload["data"]:
            if not isinstance(item, dict):
                raise ExternalAdapterError(self.system, f"unexpected availability entry {item!r}")
            starts_at = self._parse_datetime(item.get("startsAt"))
            if starts_at.date() != requested_date:
                continue
            start = starts_at.hour * 60 + starts_at.minute
            intervals.append((start, start + service_duration))

        return build_time_slots(intervals, requested_date, now)

    def create_appointment(self, data: AppointmentData) -> CreatedAppointment:
        doctor = get_clinic_doctor(self.db, self.clinic, data.doctor_slug)
        starts_at = datetime.fromisoformat(f"{data.date}T{data.time}:00").replace(tzinfo=self.tz)
        payload = self.client.request(
            "POST",
            "/v1/appointments",
            json={
                "practitionerId": external_doctor_id(doctor),
                "startsAt": starts_at.isoformat(),
                "durationMinutes": data.duration,
                "serviceName": data.service,
                "comment": data.notes,
                "patient": {
                    "fullName": data.patient_name,
                    "phone": data.patient_phone,
                    "email": data.patient_email,
                },
            },
            conflict_on_409=True,
        )
        body = payload.get("data") if isinstance(payload, dict) else None
        if not isinstance(body, dict) or not body.get("id"):
            raise ExternalAdapterError(self.system, "booking response without appointment id")

        external_id = str(body["id"])
        logger.info(f"Created Klinicare appointment {external_id} for clinic {self.clinic.id}")
        return CreatedAppointment(
            id=external_id,
            external_id=external_id,
            clinic_slug=self.clinic.slug,
            doctor_slug=doctor.slug,
            patient_name=data.patient_name,
            patient_phone=data.patient_phone,
            patient_email=data.patient_email,
            service=data.service,
            date=data.date,
            time=data.time,
            duration=data.duration,
            notes=data.notes,
            status=KLINICARE_STATUS_MAP.get(body.get("status", ""), "confirmed"),
            created_at=self._clock(),
        )

    def cancel_appointment(self, appointment_id: str) -> None:
        self.client.request("POST", f"/v1/appointments/{appointment_id}/cancel")
        logger.info(f"Cancelled Klinicare appointment {appointment_id} for clinic {self.clinic.id}")

    def close(self) -> None:
        """Release the HTTP connection pool."""
        self.client.close()

    def sync_doctors(self) -> List[DoctorData]:
        payload = self.client.request("GET", "/v1/practitioners")
        if not isinstance(payload, dict) or not isinstance(payload.get("data"), list):
            raise ExternalAdapterError(self.system, "response without 'data' list")
        doctors = []
        for item in payload["data"]:
            try:
                external_id = str(item["id"])
                name = item["fullName"]
            except (KeyError, TypeError):
                raise ExternalAdapterError(self.system, f"unexpected practitioner entry {item!r}")
            specialty = item.get("specialty")
            doctors.append(DoctorData(
                slug=f"klinicare-{external_id}",
                name=name,
                specialization={"en": specialty} if specialty else {},
                external_id=external_id,
            ))
        return doctors
