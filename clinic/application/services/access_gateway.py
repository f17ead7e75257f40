from dataclasses import dataclass
from datetime import date, datetime
from typing import Dict, List, Optional, Tuple

from ..ports.appointments_repo import AppointmentDto
from ..ports.audit_logger import AuditLogger
from ..principal import Principal, ADMIN, DOCTOR, PATIENT
from ..time_ranges import TimeRange
from .availability_service import AvailabilityService
from .scheduling_service import SchedulingService
from .token_service import TokenService

# Roles accepted by each protected entry point.
POLICIES: Dict[str, Tuple[str, ...]] = {
    "dashboard.admin": (ADMIN,),
    "dashboard.doctor": (DOCTOR,),
    "appointment.book": (PATIENT, ADMIN),
    "appointment.reschedule": (PATIENT, ADMIN),
    "appointment.cancel": (PATIENT, ADMIN),
    "appointment.complete": (DOCTOR, ADMIN),
    "availability.read": (PATIENT, DOCTOR, ADMIN),
    "doctor.manage": (ADMIN,),
    "doctor.appointments": (DOCTOR,),
    "patient.profile": (PATIENT,),
    "prescription.write": (DOCTOR,),
    "prescription.read": (DOCTOR, PATIENT, ADMIN),
}

DASHBOARD_VIEWS = {
    ADMIN: "admin/adminDashboard",
    DOCTOR: "doctor/doctorDashboard",
}


@dataclass
class AccessGateway:
    tokens: TokenService
    scheduling: Optional[SchedulingService] = None
    availability: Optional[AvailabilityService] = None
    audit: Optional[AuditLogger] = None

    def authorize(self, token: Optional[str], action: str) -> Principal:
        """Validate ``token`` for ``action`` or raise the token error kind."""
        outcome = self.tokens.validate(token, POLICIES[action])
        if not outcome.valid and self.audit:
            self.audit.log("access.denied", success=False, details={"action": action, "kind": outcome.reason})
        return outcome.unwrap()

    def dashboard(self, token: Optional[str], role: str) -> str:
        self.authorize(token, f"dashboard.{role}")
        return DASHBOARD_VIEWS[role]

    def book_appointment(self, token: Optional[str], doctor_id: int, patient_id: int, start: datetime) -> AppointmentDto:
        actor = self.authorize(token, "appointment.book")
        return self.scheduling.book_appointment(doctor_id, patient_id, start, actor=actor)

    def reschedule_appointment(self, token: Optional[str], appointment_id: int, new_start: datetime) -> AppointmentDto:
        actor = self.authorize(token, "appointment.reschedule")
        return self.scheduling.reschedule_appointment(appointment_id, new_start, actor=actor)

    def cancel_appointment(self, token: Optional[str], appointment_id: int) -> None:
        actor = self.authorize(token, "appointment.cancel")
        self.scheduling.cancel_appointment(appointment_id, actor=actor)

    def complete_appointment(self, token: Optional[str], appointment_id: int) -> AppointmentDto:
        actor = self.authorize(token, "appointment.complete")
        return self.scheduling.complete_appointment(appointment_id, actor=actor)

    def available_slots(self, token: Optional[str], doctor_id: int, day: date) -> List[TimeRange]:
        self.authorize(token, "availability.read")
        return self.availability.available_slots(doctor_id, day)
