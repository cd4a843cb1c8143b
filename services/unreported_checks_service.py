"""
Detección de check-ins / check-outs no informados
Marca reservas cuya fecha de llegada (o salida) ya pasó sin que se haya
registrado el check-in (o check-out).
"""

from typing import Any, Dict, Optional

from config import UNREPORTED_LIMIT_DEFAULT, WRITER_DETECT_UNREPORTED
from database.store import SERVER_TIMESTAMP, ReservationStore
from models.reserva import HostingStatus
from utils.logging_utils import log_event
from utils.timezone import HotelClock


class UnreportedChecksResult:
    """Resultado de una corrida del detector"""

    def __init__(self, dry_run: bool, today_iso: str):
        self.dry_run = dry_run
        self.today_iso = today_iso
        self.summary = {
            "checkin_scanned": 0,
            "checkin_marked": 0,
            "checkout_scanned": 0,
            "checkout_marked": 0,
        }

    def to_dict(self) -> dict:
        return {
            "ok": True,
            "dryRun": self.dry_run,
            "todayISO": self.today_iso,
            "summary": dict(self.summary),
        }


def _fecha_pasada(valor: Optional[str], today_iso: str) -> bool:
    return bool(valor) and valor < today_iso


def checkout_pendiente(data: Dict[str, Any], today_iso: str) -> bool:
    """La salida ya pasó y no hay check-out registrado"""
    return _fecha_pasada(data.get("departure_iso"), today_iso) and not data.get("checkout_at")


def flag_para_checkin(data: Dict[str, Any], today_iso: str) -> Optional[HostingStatus]:
    """
    Flag que la pasada de check-in tiene que escribir, o None si no hay nada
    que hacer. Si también falta el check-out de una salida pasada, gana
    checkout_not_informed.
    """
    if data.get("checkin_at"):
        return None
    if checkout_pendiente(data, today_iso):
        estado = HostingStatus.CHECKOUT_NOT_INFORMED
    else:
        estado = HostingStatus.CHECKIN_NOT_INFORMED
    if data.get("hosting_status") == estado.value:
        return None
    return estado


def requiere_flag_checkout(data: Dict[str, Any]) -> bool:
    if data.get("checkout_at"):
        return False
    return data.get("hosting_status") != HostingStatus.CHECKOUT_NOT_INFORMED.value


def _marcar(store: ReservationStore, doc, estado: HostingStatus) -> None:
    store.update(doc, {
        "hosting_status": estado.value,
        "lastUpdatedAt": SERVER_TIMESTAMP,
        "lastUpdatedBy": WRITER_DETECT_UNREPORTED,
    })


def detectar_checks_no_informados(
    store: ReservationStore,
    clock: HotelClock,
    dry_run: bool = False,
    limit: int = UNREPORTED_LIMIT_DEFAULT,
) -> UnreportedChecksResult:
    """
    Dos pasadas independientes (check-in y check-out), cada una sobre una única
    página de hasta `limit` documentos. Sin cursor: para cubrir más documentos
    hay que volver a correr con un limit mayor.
    """
    if limit < 1:
        raise ValueError("limit debe ser >= 1")

    today_iso = clock.today_iso()
    resultado = UnreportedChecksResult(dry_run, today_iso)
    summary = resultado.summary

    log_event("unreported_checks", WRITER_DETECT_UNREPORTED, "Inicio deteccion", f"today={today_iso}, dry_run={dry_run}, limit={limit}")

    # CHECKINS no informados (arrival_iso < hoy)
    marcados = set()
    for doc in store.query_before("arrival_iso", today_iso, limit):
        summary["checkin_scanned"] += 1
        estado = flag_para_checkin(doc.data, today_iso)
        if estado is not None:
            if not dry_run:
                _marcar(store, doc, estado)
            marcados.add(doc.id)
            summary["checkin_marked"] += 1

    # CHECKOUTS no informados (departure_iso < hoy)
    for doc in store.query_before("departure_iso", today_iso, limit):
        summary["checkout_scanned"] += 1
        if doc.id in marcados:
            continue
        if requiere_flag_checkout(doc.data):
            if not dry_run:
                _marcar(store, doc, HostingStatus.CHECKOUT_NOT_INFORMED)
            summary["checkout_marked"] += 1

    log_event("unreported_checks", WRITER_DETECT_UNREPORTED, "Fin deteccion", f"summary={summary}, dry_run={dry_run}")
    return resultado
