from dataclasses import dataclass
from typing import Optional
import logging

from ..errors import AuthenticationError, ConflictError
from ..ports.admin_repo import AdminRepository
from ..ports.audit_logger import AuditLogger
from ..ports.doctor_repo import DoctorRepository
from ..ports.password_hasher import PasswordHasher
from ..ports.patient_repo import PatientRepository, PatientDto
from ..principal import ADMIN, DOCTOR, PATIENT
from .. import validators
from .token_service import TokenService

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"


@dataclass
class AuthService:
    admin_repo: AdminRepository
    doctor_repo: DoctorRepository
    patient_repo: PatientRepository
    hasher: PasswordHasher
    tokens: TokenService
    audit: Optional[AuditLogger] = None

    def login_admin(self, username: str, password: str) -> str:
        admin = self.admin_repo.get_by_username((username or "").strip())
        return self._issue(ADMIN, admin.id if admin else None, admin.password_hash if admin else None, password)

    def login_doctor(self, email: str, password: str) -> str:
        doctor = self.doctor_repo.get_by_email((email or "").strip().lower())
        return self._issue(DOCTOR, doctor.id if doctor else None, doctor.password_hash if doctor else None, password)

    def login_patient(self, email: str, password: str) -> str:
        patient = self.patient_repo.get_by_email((email or "").strip().lower())
        return self._issue(PATIENT, patient.id if patient else None, patient.password_hash if patient else None, password)

    def signup_patient(self, name: str, email: str, password: str, phone: str, address: str) -> PatientDto:
        name = validators.validate_name(name)
        email = validators.validate_email(email)
        password = validators.validate_password(password)
        phone = validators.validate_phone(phone)
        address = validators.validate_address(address)

        if self.patient_repo.get_by_email(email) or self.patient_repo.get_by_phone(phone):
            raise ConflictError("Patient with this email or phone already exists")

        patient = self.patient_repo.create(name, email, phone, address, self.hasher.hash(password))
        logger.info(f"Registered patient {patient.id}")
        if self.audit:
            self.audit.log("patient.signup", subject_id=str(patient.id), role=PATIENT)
        return patient

    def _issue(self, role: str, subject_id: Optional[int], password_hash: Optional[str], password: str) -> str:
        if subject_id is None or not password_hash or not self.hasher.verify(password or "", password_hash):
            if self.audit:
                self.audit.log("auth.login", role=role, success=False)
            raise AuthenticationError(INVALID_CREDENTIALS)
        if self.audit:
            self.audit.log("auth.login", subject_id=str(subject_id), role=role)
        return self.tokens.issue(subject_id, role)
