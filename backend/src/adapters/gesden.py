"""
GesdenAdapter: availability and bookings delegated to a Gesden agenda API.

Gesden exposes free gaps ("huecos") per professional and day as local
"HH:MM" pairs; they are translated into ``TimeSlot``s.
"""

import logging
from datetime import datetime
from typing import Callable, List, Optional

import httpx
from sqlalchemy.orm import Session

from adapters.base import AppointmentData, CreatedAppointment, DoctorData, TimeSlot
from adapters.helpers import build_time_slots, external_doctor_id, get_clinic_doctor, parse_external_time
from adapters.http_client import ExternalApiClient
from core.exceptions import ExternalAdapterError
from models import Clinic
from services.availability_service import AvailabilityService
from utils.datetime_utils import clinic_now

logger = logging.getLogger(__name__)

# Gesden appointment states mapped onto platform statuses
GESDEN_STATUS_MAP = {
    "pendiente": "pending",
    "confirmada": "confirmed",
    "anulada": "cancelled",
    "realizada": "completed",
}


class GesdenAdapter:
    """Adapter for clinics whose agenda lives in Gesden."""

    system = "gesden"

    def __init__(
        self,
        db: Session,
        clinic: Clinic,
        transport: Optional[httpx.BaseTransport] = None,
        clock: Optional[Callable[[], datetime]] = None
    ):
        self.db = db
        self.clinic = clinic
        self.client = ExternalApiClient(
            self.system, clinic.get_management_config(), transport=transport,
            auth_header="X-Api-Key", auth_prefix="",
        )
        self._clock = clock or (lambda: clinic_now(clinic.timezone))

    def get_available_slots(self, doctor_identifier: str, date: str, service_duration: int) -> List[TimeSlot]:
        requested_date = AvailabilityService.validate_request(date, service_duration)
        doctor = get_clinic_doctor(self.db, self.clinic, doctor_identifier)
        now = self._clock()
        if requested_date < now.date():
            return []

        payload = self.client.request(
            "GET",
            f"/agenda/{external_doctor_id(doctor)}/huecos",
            params={"fecha": date, "duracion": service_duration},
        )
        if not isinstance(payload, dict) or not isinstance(payload.get("huecos"), list):
            raise ExternalAdapterError(self.system, "availability response without 'huecos' list")

        intervals = []
        for gap in payload["huecos"]:
            if not isinstance(gap, dict):
                raise ExternalAdapterError(self.system, f"unexpected gap entry {gap!r}")
            start = parse_external_time(self.system, gap.get("hora_inicio"))
            # Gaps may be longer than the service; only the start is offered
            end = start + service_duration
            gap_end = parse_external_time(self.system, gap.get("hora_fin"))
            if end <= gap_end:
                intervals.append((start, end))

        return build_time_slots(intervals, requested_date, now)

    def create_appointment(self, data: AppointmentData) -> CreatedAppointment:
        doctor = get_clinic_doctor(self.db, self.clinic, data.doctor_slug)
        payload = self.client.request(
            "POST",
            "/citas",
            json={
                "profesional": external_doctor_id(doctor),
                "fecha": data.date,
                "hora": data.time,
                "duracion": data.duration,
                "tratamiento": data.service,
                "observaciones": data.notes,
                "paciente": {
                    "nombre": data.patient_name,
                    "telefono": data.patient_phone,
                    "email": data.patient_email,
                },
            },
            conflict_on_409=True,
        )
        if not isinstance(payload, dict) or not payload.get("id_cita"):
            raise ExternalAdapterError(self.system, "booking response without 'id_cita'")

        external_id = str(payload["id_cita"])
        logger.info(f"Created Gesden appointment {external_id} for clinic {self.clinic.id}")
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
            status=GESDEN_STATUS_MAP.get(payload.get("estado", ""), "confirmed"),
            created_at=self._clock(),
        )

    def cancel_appointment(self, appointment_id: str) -> None:
        self.client.request("DELETE", f"/citas/{appointment_id}")
        logger.info(f"Cancelled Gesden appointment {appointment_id} for clinic {self.clinic.id}")

    def close(self) -> None:
        """Release the HTTP connection pool."""
        self.client.close()

    def sync_doctors(self) -> List[DoctorData]:
        payload = self.client.request("GET", "/profesionales")
        if not isinstance(payload, dict) or not isinstance(payload.get("profesionales"), list):
            raise ExternalAdapterError(self.system, "response without 'profesionales' list")
        doctors = []
        for item in payload["profesionales"]:
            try:
                external_id = str(item["id"])
                name = item["nombre"]
            except (KeyError, TypeError):
                raise ExternalAdapterError(self.system, f"unexpected professional entry {item!r}")
            specialty = item.get("especialidad")
            doctors.append(DoctorData(
                slug=f"gesden-{external_id}",
                name=name,
                specialization={"es": specialty} if specialty else {},
                external_id=external_id,
            ))
        return doctors
