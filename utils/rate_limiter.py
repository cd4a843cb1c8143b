"""
Límite de invocaciones de los jobs de reconciliación
Los jobs recorren la colección entera; dispararlos en ráfaga solo multiplica
lecturas y escrituras. El límite es por IP de origen.
"""
from fastapi import Request
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from config import RATE_LIMIT_DEFAULT, REDIS_URL
from endpoints._http import error_response
from utils.logging_utils import log_event

limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[RATE_LIMIT_DEFAULT],
    storage_uri=REDIS_URL,
    strategy="fixed-window",
)


def job_rate_limit_handler(request: Request, exc: RateLimitExceeded):
    """429 con el mismo formato {error} que el resto de la API"""
    log_event("rate_limit", get_remote_address(request), "Rechazado", f"path={request.url.path}, limite={exc.detail}")
    return error_response(429, f"Rate limit exceeded: {exc.detail}")


def setup_rate_limiting(app):
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, job_rate_limit_handler)
    return limiter
