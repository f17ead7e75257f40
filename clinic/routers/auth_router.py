from fastapi import APIRouter, Depends
import logging

from ..application.principal import ADMIN, DOCTOR, PATIENT
from ..application.services.auth_service import AuthService
from ..dependencies import get_auth_service
from ..schemas.auth.auth import AdminLoginRequest, LoginRequest, PatientSignupRequest, TokenResponse
from ..schemas.patients.patient import PatientResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/admin/login", response_model=TokenResponse)
def admin_login(body: AdminLoginRequest, auth: AuthService = Depends(get_auth_service)):
    return TokenResponse(token=auth.login_admin(body.username, body.password), role=ADMIN)


@router.post("/doctor/login", response_model=TokenResponse)
def doctor_login(body: LoginRequest, auth: AuthService = Depends(get_auth_service)):
    return TokenResponse(token=auth.login_doctor(body.email, body.password), role=DOCTOR)


@router.post("/patient/login", response_model=TokenResponse)
def patient_login(body: LoginRequest, auth: AuthService = Depends(get_auth_service)):
    return TokenResponse(token=auth.login_patient(body.email, body.password), role=PATIENT)


@router.post("/patient/signup", response_model=PatientResponse, status_code=201)
def patient_signup(body: PatientSignupRequest, auth: AuthService = Depends(get_auth_service)):
    p = auth.signup_patient(body.name, body.email, body.password, body.phone, body.address)
    return PatientResponse(id=p.id, name=p.name, email=p.email, phone=p.phone, address=p.address)
