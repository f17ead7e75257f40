"""FastAPI dependency factories.

Process-wide collaborators (token service, slot locks, audit logger,
password hasher) are built once in ``build_state`` and stored on
``app.state``; everything bound to a database session is built per request.
"""
import logging
from typing import Callable, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlmodel import Session

from .application.principal import Principal
from .application.services.access_gateway import AccessGateway
from .application.services.auth_service import AuthService
from .application.services.availability_service import AvailabilityService
from .application.services.doctor_service import DoctorService
from .application.services.patient_service import PatientService
from .application.services.prescription_service import PrescriptionService
from .application.services.scheduling_service import SchedulingService
from .application.services.token_service import TokenService
from .core.config import Settings
from .database import get_session
from .infrastructure.audit.std_logger import StdAuditLogger
from .infrastructure.locks.memory_slot_locks import InMemorySlotLocks
from .infrastructure.locks.redis_slot_locks import RedisSlotLocks
from .infrastructure.persistence.sqlalchemy.repositories.admin_repository_sql import SqlAdminRepository
from .infrastructure.persistence.sqlalchemy.repositories.appointments_repository_sql import SqlAppointmentsRepository
from .infrastructure.persistence.sqlalchemy.repositories.doctor_repository_sql import SqlDoctorRepository
from .infrastructure.persistence.sqlalchemy.repositories.patient_repository_sql import SqlPatientRepository
from .infrastructure.persistence.sqlalchemy.repositories.prescription_repository_sql import SqlPrescriptionRepository
from .infrastructure.security.passlib_hasher import PasslibPasswordHasher

logger = logging.getLogger(__name__)

oauth2_scheme = HTTPBearer(auto_error=False)


def build_slot_locks(settings: Settings):
    if settings.REDIS_URL:
        logger.info("Using Redis schedule locks")
        return RedisSlotLocks(settings.REDIS_URL, timeout=settings.SLOT_LOCK_TIMEOUT_SECONDS)
    logger.warning("REDIS_URL is not set; schedule locks only cover this process, run a single worker")
    return InMemorySlotLocks()


def build_state(app, settings: Settings) -> None:
    app.state.token_service = TokenService(
        secret_key=settings.SECRET_KEY,
        algorithm=settings.ALGORITHM,
        expire_minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES,
    )
    app.state.slot_locks = build_slot_locks(settings)
    app.state.audit_logger = StdAuditLogger()
    app.state.password_hasher = PasslibPasswordHasher()


def get_bearer_token(credentials: Optional[HTTPAuthorizationCredentials] = Depends(oauth2_scheme)) -> Optional[str]:
    if credentials and credentials.credentials:
        return credentials.credentials
    return None


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


def get_availability_service(session: Session = Depends(get_session)) -> AvailabilityService:
    return AvailabilityService(
        doctor_repo=SqlDoctorRepository(session),
        appointments_repo=SqlAppointmentsRepository(session),
    )


def get_scheduling_service(
    request: Request,
    session: Session = Depends(get_session),
    availability: AvailabilityService = Depends(get_availability_service),
) -> SchedulingService:
    return SchedulingService(
        appointments_repo=availability.appointments_repo,
        doctor_repo=availability.doctor_repo,
        patient_repo=SqlPatientRepository(session),
        availability=availability,
        locks=request.app.state.slot_locks,
        audit=request.app.state.audit_logger,
    )


def get_access_gateway(
    request: Request,
    scheduling: SchedulingService = Depends(get_scheduling_service),
) -> AccessGateway:
    return AccessGateway(
        tokens=request.app.state.token_service,
        scheduling=scheduling,
        availability=scheduling.availability,
        audit=request.app.state.audit_logger,
    )


def get_token_gateway(request: Request) -> AccessGateway:
    # token checks only; no database session is opened
    return AccessGateway(tokens=request.app.state.token_service, audit=request.app.state.audit_logger)


def require(action: str) -> Callable[..., Principal]:
    """Dependency that admits the request only for the roles of ``action``."""
    def dependency(
        token: Optional[str] = Depends(get_bearer_token),
        gateway: AccessGateway = Depends(get_token_gateway),
    ) -> Principal:
        return gateway.authorize(token, action)
    return dependency


def get_auth_service(request: Request, session: Session = Depends(get_session)) -> AuthService:
    return AuthService(
        admin_repo=SqlAdminRepository(session),
        doctor_repo=SqlDoctorRepository(session),
        patient_repo=SqlPatientRepository(session),
        hasher=request.app.state.password_hasher,
        tokens=request.app.state.token_service,
        audit=request.app.state.audit_logger,
    )


def get_doctor_service(request: Request, session: Session = Depends(get_session)) -> DoctorService:
    return DoctorService(
        doctor_repo=SqlDoctorRepository(session),
        appointments_repo=SqlAppointmentsRepository(session),
        patient_repo=SqlPatientRepository(session),
        hasher=request.app.state.password_hasher,
        audit=request.app.state.audit_logger,
    )


def get_patient_service(session: Session = Depends(get_session)) -> PatientService:
    return PatientService(
        patient_repo=SqlPatientRepository(session),
        appointments_repo=SqlAppointmentsRepository(session),
        doctor_repo=SqlDoctorRepository(session),
    )


def get_prescription_service(session: Session = Depends(get_session)) -> PrescriptionService:
    return PrescriptionService(
        prescription_repo=SqlPrescriptionRepository(session),
        appointments_repo=SqlAppointmentsRepository(session),
    )
