# clinic/schemas/common/common.py
from pydantic import BaseModel
from typing import Any, Optional


class ErrorResponse(BaseModel):
    success: bool = False
    data: Optional[Any] = None
    error: str
    kind: Optional[str] = None


class MessageResponse(BaseModel):
    success: bool = True
    message: str


class DashboardResponse(BaseModel):
    view: str
