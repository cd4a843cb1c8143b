"""
Log de los jobs de reconciliación
Una línea por evento: AREA | Writer | Accion | Detalle
El writer es el mismo tag que queda en lastUpdatedBy, así se puede cruzar
el log con los documentos tocados.
"""
import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from config import LOG_ECHO_CONSOLE, LOG_FILE, LOG_LEVEL

_LOGGER_NAME = "reservas_reconciliacion"
_FORMATO = "%(asctime)s | %(levelname)s | %(message)s"


def _handler_archivo(ruta: Path) -> logging.Handler:
    try:
        return RotatingFileHandler(ruta, maxBytes=1_000_000, backupCount=3, encoding="utf-8")
    except OSError:
        # filesystem de solo lectura (serverless)
        return logging.StreamHandler(sys.stderr)


def _crear_logger() -> logging.Logger:
    logger = logging.getLogger(_LOGGER_NAME)
    if logger.handlers:
        return logger

    logger.setLevel(getattr(logging, LOG_LEVEL.upper(), logging.INFO))
    logger.propagate = False

    handlers = [_handler_archivo(Path(LOG_FILE))]
    if LOG_ECHO_CONSOLE and isinstance(handlers[0], RotatingFileHandler):
        handlers.append(logging.StreamHandler(sys.stdout))

    for handler in handlers:
        handler.setFormatter(logging.Formatter(_FORMATO))
        logger.addHandler(handler)
    return logger


_logger = _crear_logger()


def _linea(area: str, writer: str, accion: str, detalle: str) -> str:
    partes = [area.upper(), f"Writer: {writer}", f"Accion: {accion}"]
    if detalle:
        partes.append(f"Detalle: {detalle}")
    return " | ".join(partes)


def log_event(area: str, writer: str, accion: str, detalle: str = "") -> None:
    _logger.info(_linea(area, writer, accion, detalle))


def log_error(area: str, writer: str, accion: str, detalle: str = "") -> None:
    _logger.error(_linea(area, writer, accion, detalle))
