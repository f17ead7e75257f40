from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional
import logging

from ..errors import ConflictError, ForbiddenError, InvalidArgumentError, InvalidStateError, NotFoundError
from ..ports.appointments_repo import AppointmentsRepository, AppointmentDto, AppointmentStatus
from ..ports.audit_logger import AuditLogger
from ..ports.doctor_repo import DoctorRepository, DoctorDto
from ..ports.patient_repo import PatientRepository
from ..ports.slot_lock import SlotLocks
from ..principal import Principal, DOCTOR, PATIENT
from ..time_ranges import slot_for
from .availability_service import AvailabilityService

logger = logging.getLogger(__name__)


@dataclass
class SchedulingService:
    appointments_repo: AppointmentsRepository
    doctor_repo: DoctorRepository
    patient_repo: PatientRepository
    availability: AvailabilityService
    locks: SlotLocks
    audit: Optional[AuditLogger] = None
    now: Callable[[], datetime] = datetime.now

    def book_appointment(self, doctor_id: int, patient_id: int, start: datetime, actor: Optional[Principal] = None) -> AppointmentDto:
        if actor and actor.role == PATIENT and not actor.is_(PATIENT, patient_id):
            raise ForbiddenError("Patients can only book appointments for themselves")
        start = self._require_future(start)

        doctor = self._doctor(doctor_id)
        if not self.patient_repo.get_patient(patient_id):
            raise NotFoundError("Patient not found")

        with self.locks.hold(doctor_id):
            if not self.availability.is_free(doctor, slot_for(start)):
                self._audit("appointment.book", actor, False, doctor_id=doctor_id, start=start.isoformat())
                raise ConflictError("Requested slot is unavailable")
            appt = self.appointments_repo.create(doctor_id, patient_id, start)

        logger.info(f"Booked appointment {appt.id} with doctor {doctor_id} at {start.isoformat()}")
        self._audit("appointment.book", actor, True, appointment_id=appt.id, doctor_id=doctor_id)
        return appt

    def reschedule_appointment(self, appointment_id: int, new_start: datetime, actor: Optional[Principal] = None) -> AppointmentDto:
        appt = self._appointment(appointment_id)
        if actor and actor.role == PATIENT and not actor.is_(PATIENT, appt.patient_id):
            raise ForbiddenError("Patients can only reschedule their own appointments")
        self._require_scheduled(appt, "rescheduled")
        new_start = self._require_future(new_start)
        doctor = self._doctor(appt.doctor_id)

        with self.locks.hold(appt.doctor_id):
            appt = self._appointment(appointment_id)
            self._require_scheduled(appt, "rescheduled")
            if not self.availability.is_free(doctor, slot_for(new_start), exclude_appointment_id=appt.id):
                self._audit("appointment.reschedule", actor, False, appointment_id=appt.id, start=new_start.isoformat())
                raise ConflictError("Requested slot is unavailable")
            updated = self.appointments_repo.update_start(appt.id, new_start)

        logger.info(f"Rescheduled appointment {appt.id} from {appt.start.isoformat()} to {new_start.isoformat()}")
        self._audit("appointment.reschedule", actor, True, appointment_id=appt.id)
        return updated

    def cancel_appointment(self, appointment_id: int, actor: Optional[Principal] = None) -> None:
        appt = self._appointment(appointment_id)
        if actor and actor.role == PATIENT and not actor.is_(PATIENT, appt.patient_id):
            raise ForbiddenError("Patients can only cancel their own appointments")

        with self.locks.hold(appt.doctor_id):
            # re-read under the lock: a concurrent cancel may have won
            self._appointment(appointment_id)
            self.appointments_repo.delete(appointment_id)

        logger.info(f"Cancelled appointment {appointment_id}")
        self._audit("appointment.cancel", actor, True, appointment_id=appointment_id)

    def complete_appointment(self, appointment_id: int, actor: Optional[Principal] = None) -> AppointmentDto:
        appt = self._appointment(appointment_id)
        if actor and actor.role == DOCTOR and not actor.is_(DOCTOR, appt.doctor_id):
            raise ForbiddenError("Doctors can only complete their own appointments")

        with self.locks.hold(appt.doctor_id):
            appt = self._appointment(appointment_id)
            self._require_scheduled(appt, "completed")
            updated = self.appointments_repo.update_status(appt.id, AppointmentStatus.COMPLETED)

        self._audit("appointment.complete", actor, True, appointment_id=appointment_id)
        return updated

    def _require_future(self, start: datetime) -> datetime:
        if start.tzinfo is not None:
            start = start.astimezone().replace(tzinfo=None)
        if start <= self.now():
            raise InvalidArgumentError("Appointment time must be in the future")
        return start

    def _require_scheduled(self, appt: AppointmentDto, action: str) -> None:
        if appt.status != AppointmentStatus.SCHEDULED:
            raise InvalidStateError(f"Only scheduled appointments can be {action}")

    def _doctor(self, doctor_id: int) -> DoctorDto:
        doctor = self.doctor_repo.get_doctor(doctor_id)
        if not doctor:
            raise NotFoundError("Doctor not found")
        return doctor

    def _appointment(self, appointment_id: int) -> AppointmentDto:
        appt = self.appointments_repo.get_by_id(appointment_id)
        if not appt:
            raise NotFoundError("Appointment not found")
        return appt

    def _audit(self, action: str, actor: Optional[Principal], success: bool, **details) -> None:
        if not self.audit:
            return
        self.audit.log(
            action,
            subject_id=actor.subject_id if actor else None,
            role=actor.role if actor else None,
            success=success,
            details=details,
        )
