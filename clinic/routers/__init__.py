# Routers package
from . import auth_router
from . import appointments_router
from . import dashboard_router
from . import doctors_router
from . import patients_router
from . import prescriptions_router

__all__ = [
    "auth_router",
    "appointments_router",
    "dashboard_router",
    "doctors_router",
    "patients_router",
    "prescriptions_router",
]
