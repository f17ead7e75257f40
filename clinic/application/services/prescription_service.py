from dataclasses import dataclass
from typing import Optional
import logging

from ..errors import ConflictError, ForbiddenError, InvalidArgumentError, NotFoundError
from ..ports.appointments_repo import AppointmentsRepository
from ..ports.prescription_repo import PrescriptionRepository, PrescriptionDto
from ..principal import Principal, PATIENT
from .. import validators

logger = logging.getLogger(__name__)


@dataclass
class PrescriptionService:
    prescription_repo: PrescriptionRepository
    appointments_repo: AppointmentsRepository

    def save(self, appointment_id: int, patient_name: str, medication: str, dosage: str, doctor_notes: Optional[str] = None) -> PrescriptionDto:
        # the appointment reference is kept as-is; it is not looked up
        if appointment_id is None or appointment_id <= 0:
            raise InvalidArgumentError("appointment_id is required")
        patient_name = validators.validate_name(patient_name, field="patient_name")
        medication = validators.validate_length("medication", medication, 3, 100)
        dosage = validators.validate_length("dosage", dosage, 1)
        doctor_notes = validators.validate_length("doctor_notes", doctor_notes, 0, 200, required=False)

        if self.prescription_repo.get_by_appointment(appointment_id):
            raise ConflictError("A prescription already exists for this appointment")

        prescription = self.prescription_repo.create(appointment_id, patient_name, medication, dosage, doctor_notes)
        logger.info(f"Saved prescription {prescription.id} for appointment {appointment_id}")
        return prescription

    def get_for_appointment(self, appointment_id: int, actor: Optional[Principal] = None) -> PrescriptionDto:
        if actor and actor.role == PATIENT:
            appt = self.appointments_repo.get_by_id(appointment_id)
            if not appt or not actor.is_(PATIENT, appt.patient_id):
                raise ForbiddenError("Patients can only view their own prescriptions")
        prescription = self.prescription_repo.get_by_appointment(appointment_id)
        if not prescription:
            raise NotFoundError("Prescription not found")
        return prescription
