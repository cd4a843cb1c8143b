"""
Rescate de link FX (cron)
Arma la ventana de los últimos 3 días calendario (hoy y 2 días atrás, hora AR)
y hace un único POST al endpoint que linkea la cotización USD a las reservas.
Sin reintentos: el error se informa tal cual.
"""

from typing import List, Optional

import requests

from config import RESCUE_PAGE_SIZE, RESCUE_TIMEOUT_SECONDS, RESCUE_WINDOW_DAYS
from schemas.reconciliacion import RescueFxBody
from utils.logging_utils import log_error, log_event
from utils.timezone import HotelClock

LINK_FX_PATH = "/api/linkUsdFxToReservations"
_USUARIO = "system_rescueFx"


class RescateFxConfigError(RuntimeError):
    """No hay base URL para la llamada interna"""


class RescateFxResult:
    """Respuesta a devolver al cron: status HTTP + payload"""

    def __init__(self, status_code: int, payload: dict):
        self.status_code = status_code
        self.payload = payload

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


def ventana_rescate(clock: HotelClock, dias: int = RESCUE_WINDOW_DAYS) -> dict:
    return {"since": clock.days_before_iso(dias), "until": clock.today_iso()}


def armar_body(clock: HotelClock, property_ids: Optional[List[str]] = None) -> dict:
    body = RescueFxBody(
        **ventana_rescate(clock),
        dry_run=False,
        force=False,
        page_size=RESCUE_PAGE_SIZE,
        property_ids=list(property_ids) if property_ids else None,
    )
    return body.model_dump(by_alias=True, exclude_none=True)


def _leer_json(resp: requests.Response) -> dict:
    try:
        data = resp.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {"data": data}


def disparar_rescate_fx(
    clock: HotelClock,
    base_url: Optional[str],
    auth_token: Optional[str] = None,
    property_ids: Optional[List[str]] = None,
    timeout: float = RESCUE_TIMEOUT_SECONDS,
    session: Optional[requests.Session] = None,
) -> RescateFxResult:
    """
    POST {base_url}/api/linkUsdFxToReservations con la ventana de rescate.

    Raises:
        RescateFxConfigError: si no hay base_url
    """
    if not base_url:
        raise RescateFxConfigError("No RESCUE_BASE_URL/VERCEL_URL available")

    url = f"{base_url.rstrip('/')}{LINK_FX_PATH}"
    body = armar_body(clock, property_ids)
    headers = {"Content-Type": "application/json"}
    if auth_token:
        headers["Authorization"] = f"Bearer {auth_token}"

    log_event("rescue_fx", _USUARIO, "POST", f"url={url}, body={body}, auth={'si' if auth_token else 'no'}")

    http = session or requests
    try:
        resp = http.post(url, json=body, headers=headers, timeout=timeout)
    except requests.RequestException as e:
        log_error("rescue_fx", _USUARIO, "Error en fetch interno", str(e))
        return RescateFxResult(500, {"ok": False, "error": str(e) or "Internal error"})

    data = _leer_json(resp)
    if not 200 <= resp.status_code < 300:
        log_error("rescue_fx", _USUARIO, "Respuesta no exitosa", f"status={resp.status_code}, body={data}")
        return RescateFxResult(resp.status_code, {"ok": False, "data": data})

    log_event(
        "rescue_fx",
        _USUARIO,
        "OK",
        f"range={data.get('range')}, totals={data.get('totals')}, lastQuoteDate={data.get('lastQuoteDate')}",
    )
    return RescateFxResult(200, {**data, "ok": True})
