"""
Acceso a la colección de reservas
Interfaz mínima que consumen los jobs: filtros por fecha, paginado por id,
updates puntuales y batches atómicos. Los backends viven en firestore_store.py
y sql_store.py.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

import config


class _Sentinel:
    def __init__(self, nombre: str):
        self.nombre = nombre

    def __repr__(self):
        return f"<{self.nombre}>"


# Valores especiales que cada backend traduce a su equivalente
SERVER_TIMESTAMP = _Sentinel("SERVER_TIMESTAMP")
DELETE_FIELD = _Sentinel("DELETE_FIELD")


class ReservaDoc:
    """Documento leído del store: id, datos y el handle nativo del backend"""

    __slots__ = ("id", "data", "handle")

    def __init__(self, id: str, data: Dict[str, Any], handle: Any = None):
        self.id = id
        self.data = data or {}
        self.handle = handle

    def get(self, campo: str, default=None):
        return self.data.get(campo, default)

    def __repr__(self):
        return f"<ReservaDoc id={self.id}>"


class StoreBatch(ABC):
    """Escritura atómica de varios documentos"""

    @abstractmethod
    def update(self, doc: ReservaDoc, fields: Dict[str, Any]) -> None:
        ...

    @abstractmethod
    def commit(self) -> None:
        ...

    @abstractmethod
    def __len__(self) -> int:
        ...


class ReservationStore(ABC):

    @abstractmethod
    def query_before(self, field: str, before_iso: str, limit: int) -> List[ReservaDoc]:
        """Documentos con `field < before_iso`, como máximo `limit`"""

    @abstractmethod
    def page_after(self, start_after: Optional[ReservaDoc], limit: int) -> List[ReservaDoc]:
        """Página ordenada por id que arranca estrictamente después de `start_after`"""

    @abstractmethod
    def update(self, doc: ReservaDoc, fields: Dict[str, Any]) -> None:
        ...

    @abstractmethod
    def batch(self) -> StoreBatch:
        ...

    def close(self) -> None:
        pass


def crear_store_desde_config(backend: str = None) -> ReservationStore:
    """Construye el store configurado (STORE_BACKEND). Lo llama el entry point."""
    backend = (backend or config.STORE_BACKEND).lower()

    if backend == "firestore":
        from database.firestore_client import crear_cliente_firestore
        from database.firestore_store import FirestoreReservationStore

        return FirestoreReservationStore(crear_cliente_firestore(), config.RESERVAS_COLLECTION)

    if backend == "sql":
        from database.conexion import crear_engine, crear_session_factory, crear_tablas
        from database.sql_store import SqlReservationStore

        engine = crear_engine(config.DATABASE_URL)
        crear_tablas(engine)
        return SqlReservationStore(crear_session_factory(engine), engine=engine)

    raise ValueError(f"STORE_BACKEND desconocido: {backend}")
