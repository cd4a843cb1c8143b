"""
Backend relacional (SQLAlchemy) de la colección Reservas
Cada commit de batch es una única transacción.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

import pytz
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from database.store import (
    DELETE_FIELD,
    SERVER_TIMESTAMP,
    ReservaDoc,
    ReservationStore,
    StoreBatch,
)
from models.reserva import CAMPOS_DOCUMENTO, Reserva


def _aplicar_campos(reserva: Reserva, fields: Dict[str, Any]) -> None:
    extra = dict(reserva.extra or {})
    extra_cambio = False

    for campo, valor in fields.items():
        if valor is SERVER_TIMESTAMP:
            valor = datetime.now(pytz.utc)

        columna = CAMPOS_DOCUMENTO.get(campo)
        if columna:
            setattr(reserva, columna, None if valor is DELETE_FIELD else valor)
        elif valor is DELETE_FIELD:
            if campo in extra:
                del extra[campo]
                extra_cambio = True
        else:
            extra[campo] = valor
            extra_cambio = True

    if extra_cambio:
        reserva.extra = extra or None


def _doc(reserva: Reserva) -> ReservaDoc:
    return ReservaDoc(reserva.id, reserva.to_document())


class SqlBatch(StoreBatch):

    def __init__(self, store: "SqlReservationStore"):
        self._store = store
        self._ops: List[Tuple[str, Dict[str, Any]]] = []

    def update(self, doc: ReservaDoc, fields: Dict[str, Any]) -> None:
        self._ops.append((doc.id, fields))

    def commit(self) -> None:
        if self._ops:
            self._store._escribir(self._ops)
            self._ops = []

    def __len__(self) -> int:
        return len(self._ops)


class SqlReservationStore(ReservationStore):

    def __init__(self, session_factory, engine=None):
        self._session_factory = session_factory
        self._engine = engine

    def _sesion(self) -> Session:
        return self._session_factory()

    def _escribir(self, ops: List[Tuple[str, Dict[str, Any]]]) -> None:
        db = self._sesion()
        try:
            for doc_id, fields in ops:
                reserva = db.get(Reserva, doc_id)
                if reserva is None:
                    raise LookupError(f"Reserva {doc_id} no encontrada")
                _aplicar_campos(reserva, fields)
            db.commit()
        except (SQLAlchemyError, LookupError):
            db.rollback()
            raise
        finally:
            db.close()

    # ===== LECTURA =====

    def query_before(self, field: str, before_iso: str, limit: int) -> List[ReservaDoc]:
        columna = getattr(Reserva, CAMPOS_DOCUMENTO[field])
        db = self._sesion()
        try:
            reservas = (
                db.query(Reserva)
                .filter(columna.isnot(None), columna < before_iso)
                .order_by(columna, Reserva.id)
                .limit(limit)
                .all()
            )
            return [_doc(r) for r in reservas]
        finally:
            db.close()

    def page_after(self, start_after: Optional[ReservaDoc], limit: int) -> List[ReservaDoc]:
        db = self._sesion()
        try:
            query = db.query(Reserva)
            if start_after is not None:
                query = query.filter(Reserva.id > start_after.id)
            reservas = query.order_by(Reserva.id).limit(limit).all()
            return [_doc(r) for r in reservas]
        finally:
            db.close()

    def get(self, doc_id: str) -> Optional[ReservaDoc]:
        db = self._sesion()
        try:
            reserva = db.get(Reserva, doc_id)
            return _doc(reserva) if reserva else None
        finally:
            db.close()

    # ===== ESCRITURA =====

    def add(self, doc_id: str, data: Dict[str, Any]) -> None:
        db = self._sesion()
        try:
            db.add(Reserva.from_document(doc_id, data))
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            raise
        finally:
            db.close()

    def update(self, doc: ReservaDoc, fields: Dict[str, Any]) -> None:
        self._escribir([(doc.id, fields)])

    def batch(self) -> SqlBatch:
        return SqlBatch(self)

    def close(self) -> None:
        if self._engine is not None:
            self._engine.dispose()
