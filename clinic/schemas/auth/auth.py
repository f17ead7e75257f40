# clinic/schemas/auth/auth.py
from pydantic import BaseModel, Field


class AdminLoginRequest(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class LoginRequest(BaseModel):
    email: str = Field(..., description="Account email address")
    password: str = Field(..., min_length=1)


class PatientSignupRequest(BaseModel):
    name: str
    email: str
    password: str
    phone: str = Field(..., description="10 digit phone number")
    address: str


class TokenResponse(BaseModel):
    token: str
    role: str
    token_type: str = "bearer"
