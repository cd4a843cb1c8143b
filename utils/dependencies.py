"""
Dependencias de los endpoints: store, reloj y token de cron
"""
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

import config
from database.store import ReservationStore
from utils.logging_utils import log_event
from utils.timezone import HotelClock

_bearer = HTTPBearer(auto_error=False)
_clock = HotelClock()


def get_store(request: Request) -> ReservationStore:
    """Store creado por el entry point (lifespan) y guardado en app.state"""
    store = getattr(request.app.state, "store", None)
    if store is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Store de reservas no inicializado",
        )
    return store


def get_clock() -> HotelClock:
    return _clock


def get_auth_token() -> Optional[str]:
    return config.AUTH_TOKEN


def verify_cron_token(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer),
    auth_token: Optional[str] = Depends(get_auth_token),
) -> None:
    """
    Si AUTH_TOKEN está definido se valida el Bearer; si no, se permite
    (modo prueba / preview).
    """
    if not auth_token:
        return

    if credentials is None or credentials.credentials != auth_token:
        log_event("auth", "cron", "Token invalido", f"path={request.url.path}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="unauthorized",
            headers={"WWW-Authenticate": "Bearer"},
        )
