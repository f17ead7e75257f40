# Schemas package (re-export feature modules for stable imports)
from .auth.auth import *
from .doctors.doctor import *
from .appointments.appointment import *
from .patients.patient import *
from .prescriptions.prescription import *
from .common.common import *
