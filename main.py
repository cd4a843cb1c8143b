from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from database.store import crear_store_desde_config
from endpoints._http import error_response
from utils.logging_utils import log_error, log_event
from utils.rate_limiter import setup_rate_limiting


@asynccontextmanager
async def lifespan(app: FastAPI):
    # El store se crea una sola vez por proceso y se inyecta con get_store
    app.state.store = crear_store_desde_config()
    log_event("app", "system", "Store inicializado", type(app.state.store).__name__)
    try:
        yield
    finally:
        app.state.store.close()
        app.state.store = None


app = FastAPI(title="Reservas - Reconciliacion", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["POST", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)

setup_rate_limiting(app)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
        return error_response(exc.status_code, "Método no permitido")
    response = error_response(exc.status_code, str(exc.detail))
    if getattr(exc, "headers", None):
        response.headers.update(exc.headers)
    return response


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errores = "; ".join(
        f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg')}" for err in exc.errors()
    )
    return error_response(status.HTTP_400_BAD_REQUEST, errores or "Request inválido")


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    log_error("app", "system", "Error no manejado", f"path={request.url.path}, error={exc}")
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, str(exc) or "Error interno")


from endpoints import cron, hosting_status  # noqa: E402
app.include_router(cron.router)
app.include_router(hosting_status.router)


@app.get("/")
def read_root():
    return {"message": "Reservas - Reconciliacion"}
