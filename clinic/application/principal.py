from dataclasses import dataclass

ADMIN = "admin"
DOCTOR = "doctor"
PATIENT = "patient"

ROLES = (ADMIN, DOCTOR, PATIENT)


@dataclass(frozen=True)
class Principal:
    subject_id: str
    role: str

    def is_(self, role: str, subject_id: object) -> bool:
        return self.role == role and self.subject_id == str(subject_id)
