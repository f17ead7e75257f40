from dataclasses import dataclass
from typing import Optional, Protocol


@dataclass
class PatientDto:
    id: int
    name: str
    email: str
    phone: str
    address: str
    password_hash: Optional[str] = None


class PatientRepository(Protocol):
    def get_patient(self, patient_id: int) -> Optional[PatientDto]:
        ...

    def get_by_email(self, email: str) -> Optional[PatientDto]:
        ...

    def get_by_phone(self, phone: str) -> Optional[PatientDto]:
        ...

    def create(self, name: str, email: str, phone: str, address: str, password_hash: str) -> PatientDto:
        ...
