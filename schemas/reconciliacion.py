from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from config import (
    RECOMPUTE_BATCH_SIZE_DEFAULT,
    RECOMPUTE_BATCH_SIZE_MAX,
    UNREPORTED_LIMIT_DEFAULT,
)


# ===== DETECT UNREPORTED CHECKS =====

class DetectUnreportedRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    dry_run: bool = Field(False, alias="dryRun")
    limit: int = Field(UNREPORTED_LIMIT_DEFAULT, ge=1)


class UnreportedSummary(BaseModel):
    checkin_scanned: int
    checkin_marked: int
    checkout_scanned: int
    checkout_marked: int


class DetectUnreportedResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    ok: bool = True
    dry_run: bool = Field(..., alias="dryRun")
    today_iso: str = Field(..., alias="todayISO")
    summary: UnreportedSummary


# ===== RECOMPUTE HOSTING STATUS =====

class RecomputeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    dry_run: bool = Field(False, alias="dryRun")
    batch_size: int = Field(RECOMPUTE_BATCH_SIZE_DEFAULT, alias="batchSize", ge=1, le=RECOMPUTE_BATCH_SIZE_MAX)


class RecomputeResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    ok: bool = True
    processed: int
    updated: int
    dry_run: bool = Field(..., alias="dryRun")


# ===== RESCUE FX =====

class RescueFxBody(BaseModel):
    """Body que se envía a /api/linkUsdFxToReservations"""
    model_config = ConfigDict(populate_by_name=True)

    since: str
    until: str
    dry_run: bool = Field(False, alias="dryRun")
    force: bool = False
    page_size: int = Field(500, alias="pageSize")
    property_ids: Optional[List[str]] = Field(None, alias="propertyIds")


class RescueFxResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    ok: bool
    error: Optional[str] = None
    data: Optional[Dict[str, Any]] = None


class ErrorResponse(BaseModel):
    error: str
