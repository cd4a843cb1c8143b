"""
Endpoints de cron: detección de checks no informados y rescate de link FX
"""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import JSONResponse

import config
from database.store import ReservationStore
from endpoints._http import error_response, preflight_response
from schemas.reconciliacion import (
    DetectUnreportedRequest,
    DetectUnreportedResponse,
    ErrorResponse,
    RescueFxResponse,
)
from services.fx_rescue_service import RescateFxConfigError, disparar_rescate_fx
from services.unreported_checks_service import detectar_checks_no_informados
from utils.dependencies import get_auth_token, get_clock, get_store, verify_cron_token
from utils.logging_utils import log_error, log_event
from utils.rate_limiter import limiter
from utils.timezone import HotelClock

router = APIRouter(prefix="/api/cron", tags=["Cron"])


# ===== CHECKS NO INFORMADOS =====

@router.options("/detectUnreportedChecks", include_in_schema=False)
def detect_unreported_preflight():
    return preflight_response()


@router.post(
    "/detectUnreportedChecks",
    response_model=DetectUnreportedResponse,
    responses={500: {"model": ErrorResponse}},
    dependencies=[Depends(verify_cron_token)],
)
@limiter.limit(config.JOBS_RATE_LIMIT)
def detect_unreported_checks(
    request: Request,
    payload: Optional[DetectUnreportedRequest] = None,
    store: ReservationStore = Depends(get_store),
    clock: HotelClock = Depends(get_clock),
):
    """Marca checkin_not_informed / checkout_not_informed en reservas vencidas"""
    payload = payload or DetectUnreportedRequest()
    try:
        resultado = detectar_checks_no_informados(
            store,
            clock,
            dry_run=payload.dry_run,
            limit=payload.limit,
        )
    except Exception as e:
        log_error("unreported_checks", config.WRITER_DETECT_UNREPORTED, "Error", str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e) or "Error interno",
        )
    return resultado.to_dict()


# ===== RESCATE FX =====

@router.options("/rescue-link-fx", include_in_schema=False)
def rescue_fx_preflight():
    return preflight_response()


# Vercel Cron invoca con GET
@router.api_route(
    "/rescue-link-fx",
    methods=["GET", "POST"],
    response_model=RescueFxResponse,
    responses={500: {"model": ErrorResponse}},
)
def rescue_link_fx(
    clock: HotelClock = Depends(get_clock),
    auth_token: Optional[str] = Depends(get_auth_token),
):
    """Dispara /api/linkUsdFxToReservations para hoy y los 2 días previos"""
    log_event("rescue_fx", "cron", "Endpoint de cron invocado")
    try:
        resultado = disparar_rescate_fx(
            clock,
            config.get_rescue_base_url(),
            auth_token=auth_token,
            property_ids=config.get_property_ids(),
        )
    except RescateFxConfigError as e:
        log_error("rescue_fx", "cron", "Config", str(e))
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, str(e))

    return JSONResponse(status_code=resultado.status_code, content=resultado.payload)
