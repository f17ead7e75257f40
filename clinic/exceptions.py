import logging
from typing import Optional

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse

from .application.errors import ClinicError
from .schemas.common.common import ErrorResponse

logger = logging.getLogger(__name__)

STATUS_BY_KIND = {
    "not_found": 404,
    "invalid_argument": 400,
    "conflict": 409,
    "invalid_state": 409,
    "malformed": 401,
    "expired": 401,
    "unauthenticated": 401,
    "forbidden": 403,
}


def create_error_response(error_message: str, kind: Optional[str] = None) -> dict:
    """Create a standardized error response"""
    return ErrorResponse(error=error_message, kind=kind).model_dump()


async def clinic_exception_handler(request: Request, exc: ClinicError) -> JSONResponse:
    """Translate a domain failure into its HTTP status and the error envelope"""
    status_code = STATUS_BY_KIND.get(exc.kind, 500)
    if status_code >= 500:
        logger.error(f"Unmapped clinic error on {request.url.path}: {exc.kind}")
    headers = {"WWW-Authenticate": "Bearer"} if status_code == 401 else None
    return JSONResponse(
        status_code=status_code,
        content=create_error_response(exc.message, exc.kind),
        headers=headers,
    )


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Custom exception handler for HTTPException"""
    return JSONResponse(
        status_code=exc.status_code,
        content=create_error_response(str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )
