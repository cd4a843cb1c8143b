"""
Corre los jobs de reconciliación en secuencia, sin pasar por HTTP.

1) detección de checks no informados
2) recalculo de hosting_status

Cada paso se loguea con su duración; si uno falla se sigue con el siguiente
y el proceso termina con código 1.

Usage:
    python scripts/run_reconciliacion.py --dry-run
    python scripts/run_reconciliacion.py --solo recompute --batch-size 200
"""
from __future__ import annotations

import argparse
import json
import sys
import time
from pathlib import Path
from typing import Any, Callable, Dict, List

sys.path.insert(0, str(Path(__file__).parent.parent))

from config import RECOMPUTE_BATCH_SIZE_DEFAULT, RECOMPUTE_BATCH_SIZE_MAX, UNREPORTED_LIMIT_DEFAULT  # noqa: E402
from database.store import ReservationStore, crear_store_desde_config  # noqa: E402
from services.hosting_status_service import recalcular_hosting_status  # noqa: E402
from services.unreported_checks_service import detectar_checks_no_informados  # noqa: E402
from utils.logging_utils import log_error, log_event  # noqa: E402
from utils.timezone import HotelClock  # noqa: E402

PASOS = ("detect", "recompute")


def construir_pasos(store: ReservationStore, clock: HotelClock, args: argparse.Namespace) -> List[tuple]:
    pasos = {
        "detect": lambda: detectar_checks_no_informados(
            store, clock, dry_run=args.dry_run, limit=args.limit
        ).to_dict(),
        "recompute": lambda: recalcular_hosting_status(
            store, dry_run=args.dry_run, batch_size=args.batch_size
        ).to_dict(),
    }
    nombres = [args.solo] if args.solo else list(PASOS)
    return [(nombre, pasos[nombre]) for nombre in nombres]


def ejecutar_paso(nombre: str, paso: Callable[[], Dict[str, Any]]) -> Dict[str, Any]:
    inicio = time.monotonic()
    log_event("orquestador", "cli", "STEP START", nombre)
    try:
        data = paso()
    except Exception as exc:
        duracion = int((time.monotonic() - inicio) * 1000)
        log_error("orquestador", "cli", "STEP ERR", f"{nombre} en {duracion}ms: {exc}")
        return {"name": nombre, "ok": False, "durationMs": duracion, "error": str(exc)}

    duracion = int((time.monotonic() - inicio) * 1000)
    log_event("orquestador", "cli", "STEP OK", f"{nombre} en {duracion}ms")
    return {"name": nombre, "ok": True, "durationMs": duracion, "data": data}


def ejecutar(store: ReservationStore, clock: HotelClock, args: argparse.Namespace) -> Dict[str, Any]:
    resultados = [ejecutar_paso(nombre, paso) for nombre, paso in construir_pasos(store, clock, args)]
    return {
        "ok": all(r["ok"] for r in resultados),
        "dryRun": args.dry_run,
        "todayISO": clock.today_iso(),
        "results": resultados,
    }


def _batch_size(valor: str) -> int:
    numero = int(valor)
    if not 1 <= numero <= RECOMPUTE_BATCH_SIZE_MAX:
        raise argparse.ArgumentTypeError(f"batch-size debe estar entre 1 y {RECOMPUTE_BATCH_SIZE_MAX}")
    return numero


def _limit(valor: str) -> int:
    numero = int(valor)
    if numero < 1:
        raise argparse.ArgumentTypeError("limit debe ser >= 1")
    return numero


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Jobs de reconciliación de Reservas")
    parser.add_argument("--dry-run", action="store_true", help="No escribe, solo cuenta")
    parser.add_argument("--limit", type=_limit, default=UNREPORTED_LIMIT_DEFAULT, help="Tope por pasada del detector")
    parser.add_argument("--batch-size", type=_batch_size, default=RECOMPUTE_BATCH_SIZE_DEFAULT, help="Tamaño de página del recalculo")
    parser.add_argument("--solo", choices=PASOS, help="Correr un único paso")
    parser.add_argument("--backend", choices=("firestore", "sql"), help="Override de STORE_BACKEND")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(sys.argv[1:] if argv is None else argv)
    store = crear_store_desde_config(args.backend)
    try:
        resumen = ejecutar(store, HotelClock(), args)
    finally:
        store.close()
    print(json.dumps(resumen, indent=2, ensure_ascii=False))
    return 0 if resumen["ok"] else 1


if __name__ == "__main__":
    sys.exit(main())
