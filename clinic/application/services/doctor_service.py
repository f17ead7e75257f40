from dataclasses import dataclass
from datetime import date
from typing import Dict, List, Optional
import logging

from ..errors import ConflictError, InvalidArgumentError, NotFoundError
from ..ports.appointments_repo import AppointmentsRepository, AppointmentDetail
from ..ports.audit_logger import AuditLogger
from ..ports.doctor_repo import DoctorRepository, DoctorDto
from ..ports.password_hasher import PasswordHasher
from ..ports.patient_repo import PatientRepository
from ..time_ranges import overlaps_afternoon, overlaps_morning
from .. import validators

logger = logging.getLogger(__name__)

TIME_FILTERS = {
    "AM": overlaps_morning,
    "PM": overlaps_afternoon,
}


@dataclass
class DoctorService:
    doctor_repo: DoctorRepository
    appointments_repo: AppointmentsRepository
    patient_repo: PatientRepository
    hasher: PasswordHasher
    audit: Optional[AuditLogger] = None

    def list_doctors(self) -> List[DoctorDto]:
        return self.doctor_repo.list_all()

    def get_doctor(self, doctor_id: int) -> DoctorDto:
        doctor = self.doctor_repo.get_doctor(doctor_id)
        if not doctor:
            raise NotFoundError("Doctor not found")
        return doctor

    def search(self, name: Optional[str] = None, specialty: Optional[str] = None, time_of_day: Optional[str] = None) -> List[DoctorDto]:
        """Filter doctors by name substring, specialty and working period.

        ``time_of_day`` is ``AM`` (some range starts before noon) or ``PM``
        (some range ends after noon).
        """
        name = (name or "").strip() or None
        specialty = (specialty or "").strip() or None
        doctors = self.doctor_repo.search(name, specialty)
        if not time_of_day:
            return doctors
        check = TIME_FILTERS.get(time_of_day.strip().upper())
        if check is None:
            raise InvalidArgumentError("time must be AM or PM")
        return [
            d for d in doctors
            if any(check(r) for ranges in d.working_hours.values() for r in ranges)
        ]

    def add_doctor(self, name: str, specialty: str, email: str, password: str, phone: str, working_hours: Dict[object, List[str]]) -> DoctorDto:
        name = validators.validate_name(name)
        specialty = validators.validate_length("specialty", specialty, 3, 50)
        email = validators.validate_email(email)
        password = validators.validate_password(password)
        phone = validators.validate_phone(phone)
        hours = validators.validate_working_hours(working_hours)

        if self.doctor_repo.get_by_email(email):
            raise ConflictError("Doctor with this email already exists")

        doctor = self.doctor_repo.create(name, specialty, email, phone, self.hasher.hash(password), hours)
        logger.info(f"Added doctor {doctor.id} ({specialty})")
        if self.audit:
            self.audit.log("doctor.create", details={"doctor_id": doctor.id})
        return doctor

    def update_doctor(self, doctor_id: int, name: Optional[str] = None, specialty: Optional[str] = None, email: Optional[str] = None, phone: Optional[str] = None, working_hours: Optional[Dict[object, List[str]]] = None) -> DoctorDto:
        self.get_doctor(doctor_id)
        fields: Dict[str, object] = {}
        if name is not None:
            fields["name"] = validators.validate_name(name)
        if specialty is not None:
            fields["specialty"] = validators.validate_length("specialty", specialty, 3, 50)
        if email is not None:
            email = validators.validate_email(email)
            other = self.doctor_repo.get_by_email(email)
            if other and other.id != doctor_id:
                raise ConflictError("Doctor with this email already exists")
            fields["email"] = email
        if phone is not None:
            fields["phone"] = validators.validate_phone(phone)
        if working_hours is not None:
            fields["working_hours"] = validators.validate_working_hours(working_hours)
        return self.doctor_repo.update(doctor_id, fields)

    def delete_doctor(self, doctor_id: int) -> None:
        self.get_doctor(doctor_id)
        if self.appointments_repo.exists_for_doctor(doctor_id):
            raise ConflictError("Doctor has appointments and cannot be deleted")
        self.doctor_repo.delete(doctor_id)
        logger.info(f"Deleted doctor {doctor_id}")
        if self.audit:
            self.audit.log("doctor.delete", details={"doctor_id": doctor_id})

    def appointments_on(self, doctor_id: int, day: date, patient_name: Optional[str] = None) -> List[AppointmentDetail]:
        doctor = self.get_doctor(doctor_id)
        needle = (patient_name or "").strip().lower()
        result = []
        for appt in self.appointments_repo.list_for_doctor_on_date(doctor_id, day):
            patient = self.patient_repo.get_patient(appt.patient_id)
            if not patient:
                continue
            if needle and needle not in patient.name.lower():
                continue
            result.append(AppointmentDetail(appt, doctor.name, patient.name, patient.email, patient.phone))
        return result
