"""
Alerts API Router
HTTP trigger for the missed-medication alerting job
"""

import logging
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse, PlainTextResponse

from api.deps import get_missed_dose_service
from api.schemas.alert import AlertErrorResponse, CheckMissedMedsResponse
from services.missed_dose_service import AlertJobError, MissedDoseService


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/alerts", tags=["alerts"])


# Paths below this router that answer CORS themselves, preflight included
SELF_CORS_PATHS = ("/check-missed-meds",)

# Permissive CORS so the caretaker dashboard can trigger a run from the browser
CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
}


@router.options("/check-missed-meds", include_in_schema=False)
async def check_missed_meds_preflight():
    """CORS preflight"""
    return PlainTextResponse("ok", headers=CORS_HEADERS)


@router.api_route(
    "/check-missed-meds",
    methods=["GET", "POST"],
    response_model=CheckMissedMedsResponse,
    responses={status.HTTP_400_BAD_REQUEST: {"model": AlertErrorResponse}}
)
async def check_missed_meds(
    service: MissedDoseService = Depends(get_missed_dose_service)
):
    """
    Run one missed-dose alerting pass

    Used by the external scheduler and by the caretaker's
    "send reminder now" button. No payload is required.

    - **processed**: one entry per dose attempted, with status
      `sent`, `skipped_no_config` or `failed`
    - **time_ms**: wall-clock duration of the run
    """
    try:
        report = await service.run()
    except AlertJobError as e:
        logger.error(f"Missed dose check aborted: {e}")
        error = AlertErrorResponse(error=str(e))
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=error.model_dump(),
            headers=CORS_HEADERS
        )

    response = CheckMissedMedsResponse(**report.to_dict())
    return JSONResponse(content=response.model_dump(), headers=CORS_HEADERS)
