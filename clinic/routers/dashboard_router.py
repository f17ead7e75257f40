from fastapi import APIRouter, Depends
from fastapi.responses import RedirectResponse
import logging

from ..application.errors import ClinicError
from ..application.principal import ADMIN, DOCTOR
from ..application.services.access_gateway import AccessGateway
from ..dependencies import get_token_gateway
from ..schemas.common.common import DashboardResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Dashboards"])


def _dashboard(gateway: AccessGateway, token: str, role: str):
    try:
        return DashboardResponse(view=gateway.dashboard(token, role))
    except ClinicError as e:
        logger.info(f"{role} dashboard rejected: {e.kind}")
        return RedirectResponse(url="/", status_code=302)


@router.get("/adminDashboard/{token}", response_model=DashboardResponse)
def admin_dashboard(token: str, gateway: AccessGateway = Depends(get_token_gateway)):
    return _dashboard(gateway, token, ADMIN)


@router.get("/doctorDashboard/{token}", response_model=DashboardResponse)
def doctor_dashboard(token: str, gateway: AccessGateway = Depends(get_token_gateway)):
    return _dashboard(gateway, token, DOCTOR)
