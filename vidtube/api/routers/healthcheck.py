from __future__ import annotations

from fastapi import APIRouter

from vidtube.api.responses import ApiResponse, api_response
from vidtube.api.schemas.users import HealthcheckResponse


router = APIRouter(prefix="/api/v1", tags=["healthcheck"])


@router.get("/healthcheck", response_model=ApiResponse[HealthcheckResponse])
def healthcheck():
    return api_response(200, HealthcheckResponse(status="ok"), "OK")
