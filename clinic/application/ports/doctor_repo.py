from dataclasses import dataclass, field
from typing import Dict, List, Optional, Protocol


@dataclass
class DoctorDto:
    id: int
    name: str
    specialty: str
    email: str
    phone: str
    working_hours: Dict[int, List[str]] = field(default_factory=dict)
    password_hash: Optional[str] = None


class DoctorRepository(Protocol):
    def get_doctor(self, doctor_id: int) -> Optional[DoctorDto]:
        ...

    def get_by_email(self, email: str) -> Optional[DoctorDto]:
        ...

    def list_all(self) -> List[DoctorDto]:
        ...

    def search(self, name: Optional[str], specialty: Optional[str]) -> List[DoctorDto]:
        ...

    def create(self, name: str, specialty: str, email: str, phone: str, password_hash: str, working_hours: Dict[int, List[str]]) -> DoctorDto:
        ...

    def update(self, doctor_id: int, fields: Dict[str, object]) -> DoctorDto:
        ...

    def delete(self, doctor_id: int) -> None:
        ...
