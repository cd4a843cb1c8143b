"""
Endpoint de recalculo de hosting_status
"""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, status

from config import JOBS_RATE_LIMIT, WRITER_RECOMPUTE
from database.store import ReservationStore
from endpoints._http import preflight_response
from schemas.reconciliacion import ErrorResponse, RecomputeRequest, RecomputeResponse
from services.hosting_status_service import recalcular_hosting_status
from utils.dependencies import get_store, verify_cron_token
from utils.logging_utils import log_error
from utils.rate_limiter import limiter

router = APIRouter(prefix="/api", tags=["Hosting Status"])


@router.options("/recomputeHostingStatus", include_in_schema=False)
def recompute_preflight():
    return preflight_response()


@router.post(
    "/recomputeHostingStatus",
    response_model=RecomputeResponse,
    responses={500: {"model": ErrorResponse}},
    dependencies=[Depends(verify_cron_token)],
)
@limiter.limit(JOBS_RATE_LIMIT)
def recompute_hosting_status(
    request: Request,
    payload: Optional[RecomputeRequest] = None,
    store: ReservationStore = Depends(get_store),
):
    """Re-deriva hosting_status de toda la colección Reservas"""
    payload = payload or RecomputeRequest()
    try:
        resultado = recalcular_hosting_status(
            store,
            dry_run=payload.dry_run,
            batch_size=payload.batch_size,
        )
    except Exception as e:
        log_error("hosting_status", WRITER_RECOMPUTE, "Error", str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e) or "Error interno",
        )
    return resultado.to_dict()
