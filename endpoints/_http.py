from fastapi.responses import JSONResponse

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST,OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
}


def preflight_response() -> JSONResponse:
    """Respuesta a OPTIONS sin pasar por el middleware de CORS"""
    return JSONResponse(status_code=200, content={"ok": True}, headers=CORS_HEADERS)


def error_response(status_code: int, error: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": error}, headers=CORS_HEADERS)
