# Models package (re-export feature modules for stable imports)
from .people.doctor import Doctor
from .people.patient import Patient
from .people.admin import Admin
from .care.appointment import Appointment
from .care.prescription import Prescription

__all__ = [
    "Doctor",
    "Patient",
    "Admin",
    "Appointment",
    "Prescription",
]
