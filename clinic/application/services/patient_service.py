from dataclasses import dataclass
from datetime import datetime
from typing import Callable, List, Optional

from ..errors import InvalidArgumentError, NotFoundError
from ..ports.appointments_repo import AppointmentsRepository, AppointmentDetail
from ..ports.doctor_repo import DoctorRepository
from ..ports.patient_repo import PatientRepository, PatientDto

CONDITIONS = ("past", "future")


@dataclass
class PatientService:
    patient_repo: PatientRepository
    appointments_repo: AppointmentsRepository
    doctor_repo: DoctorRepository
    now: Callable[[], datetime] = datetime.now

    def get_patient(self, patient_id: int) -> PatientDto:
        patient = self.patient_repo.get_patient(patient_id)
        if not patient:
            raise NotFoundError("Patient not found")
        return patient

    def appointments(self, patient_id: int, condition: Optional[str] = None, doctor_name: Optional[str] = None) -> List[AppointmentDetail]:
        """A patient's appointments, earliest first.

        ``condition`` keeps only ``past`` or ``future`` appointments relative
        to now; ``doctor_name`` is a case-insensitive substring filter.
        """
        patient = self.get_patient(patient_id)
        if condition is not None and condition not in CONDITIONS:
            raise InvalidArgumentError("condition must be 'past' or 'future'")
        now = self.now()
        needle = (doctor_name or "").strip().lower()
        names = {}
        result = []
        for appt in self.appointments_repo.list_for_patient(patient_id):
            if condition == "past" and appt.start >= now:
                continue
            if condition == "future" and appt.start < now:
                continue
            if appt.doctor_id not in names:
                doctor = self.doctor_repo.get_doctor(appt.doctor_id)
                names[appt.doctor_id] = doctor.name if doctor else "Unknown Doctor"
            if needle and needle not in names[appt.doctor_id].lower():
                continue
            result.append(AppointmentDetail(appt, names[appt.doctor_id], patient.name, patient.email, patient.phone))
        return result
