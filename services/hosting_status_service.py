"""
Recalculo de hosting_status
El estado de hosting no se setea libremente: se deriva de los timestamps del
ciclo (no_show_at, checkout_at, checkin_at, contacted_at). Este servicio
recorre toda la colección y corrige los documentos donde el estado guardado
no coincide con el derivado.
"""

from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

from config import RECOMPUTE_BATCH_SIZE_DEFAULT, WRITER_RECOMPUTE
from database.store import DELETE_FIELD, SERVER_TIMESTAMP, ReservaDoc, ReservationStore
from models.reserva import HostingStatus
from utils.logging_utils import log_event

# Prioridad: el primer timestamp presente define el estado
PRIORIDAD_ESTADOS: Tuple[Tuple[str, HostingStatus], ...] = (
    ("no_show_at", HostingStatus.NO_SHOW),
    ("checkout_at", HostingStatus.CHECKED_OUT),
    ("checkin_at", HostingStatus.CHECKED_IN),
    ("contacted_at", HostingStatus.CONTACTADO),
)

Correccion = Tuple[ReservaDoc, Dict[str, Any]]
AplicarPagina = Callable[[List[Correccion]], None]


class RecomputeResult:
    """Resultado de una corrida de recalculo"""

    def __init__(self, dry_run: bool):
        self.dry_run = dry_run
        self.processed = 0
        self.updated = 0
        self.pages = 0

    def to_dict(self) -> dict:
        return {
            "ok": True,
            "processed": self.processed,
            "updated": self.updated,
            "dryRun": self.dry_run,
        }


def derivar_hosting_status(data: Dict[str, Any]) -> Optional[HostingStatus]:
    for campo, estado in PRIORIDAD_ESTADOS:
        if data.get(campo):
            return estado
    return None


def correccion_para(data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """
    Campos a escribir para que hosting_status coincida con el derivado.
    Ausente, null y "" son equivalentes. Retorna None si ya está correcto.
    """
    deseado = derivar_hosting_status(data)
    actual = data.get("hosting_status") or None
    deseado_valor = deseado.value if deseado else None

    if actual == deseado_valor:
        return None

    return {
        "hosting_status": deseado_valor if deseado_valor else DELETE_FIELD,
        "lastUpdatedAt": SERVER_TIMESTAMP,
        "lastUpdatedBy": WRITER_RECOMPUTE,
    }


def iterar_paginas(store: ReservationStore, batch_size: int) -> Iterator[List[ReservaDoc]]:
    """
    Paginado por cursor (keyset) ordenado por id. Cada página arranca después
    del último documento de la anterior; termina con una página vacía o más
    corta que batch_size. La siguiente página se lee recién cuando el
    consumidor terminó con la actual.
    """
    if batch_size < 1:
        raise ValueError("batch_size debe ser >= 1")

    cursor = None
    while True:
        pagina = store.page_after(cursor, batch_size)
        if not pagina:
            return
        yield pagina
        if len(pagina) < batch_size:
            return
        cursor = pagina[-1]


def aplicar_pagina_en_batch(store: ReservationStore) -> AplicarPagina:
    """Aplica las correcciones de una página como un único batch atómico"""

    def aplicar(correcciones: List[Correccion]) -> None:
        if not correcciones:
            return
        batch = store.batch()
        for doc, fields in correcciones:
            batch.update(doc, fields)
        batch.commit()

    return aplicar


def recalcular_hosting_status(
    store: ReservationStore,
    dry_run: bool = False,
    batch_size: int = RECOMPUTE_BATCH_SIZE_DEFAULT,
    aplicar_pagina: Optional[AplicarPagina] = None,
) -> RecomputeResult:
    """
    Recorre la colección completa y corrige hosting_status.

    En dry_run no se escribe nada pero los contadores reflejan lo que cambiaría.
    Un error de lectura/escritura corta la corrida; las páginas ya commiteadas
    quedan aplicadas.
    """
    aplicar = aplicar_pagina or aplicar_pagina_en_batch(store)
    resultado = RecomputeResult(dry_run)

    log_event("hosting_status", WRITER_RECOMPUTE, "Inicio recalculo", f"dry_run={dry_run}, batch_size={batch_size}")

    for pagina in iterar_paginas(store, batch_size):
        resultado.pages += 1
        correcciones: List[Correccion] = []

        for doc in pagina:
            resultado.processed += 1
            fields = correccion_para(doc.data)
            if fields is not None:
                correcciones.append((doc, fields))

        resultado.updated += len(correcciones)
        if not dry_run:
            aplicar(correcciones)

        log_event(
            "hosting_status",
            WRITER_RECOMPUTE,
            "Pagina procesada",
            f"pagina={resultado.pages}, docs={len(pagina)}, correcciones={len(correcciones)}, ultimo_id={pagina[-1].id}",
        )

    log_event(
        "hosting_status",
        WRITER_RECOMPUTE,
        "Fin recalculo",
        f"processed={resultado.processed}, updated={resultado.updated}, dry_run={dry_run}",
    )
    return resultado
