from typing import Any, Dict, List, Optional

from google.cloud import firestore
from google.cloud.firestore_v1.base_query import FieldFilter
from google.cloud.firestore_v1.field_path import FieldPath

from database.store import (
    DELETE_FIELD,
    SERVER_TIMESTAMP,
    ReservaDoc,
    ReservationStore,
    StoreBatch,
)


def _traducir(fields: Dict[str, Any]) -> Dict[str, Any]:
    traducidos = {}
    for campo, valor in fields.items():
        if valor is SERVER_TIMESTAMP:
            valor = firestore.SERVER_TIMESTAMP
        elif valor is DELETE_FIELD:
            valor = firestore.DELETE_FIELD
        traducidos[campo] = valor
    return traducidos


def _doc(snapshot) -> ReservaDoc:
    return ReservaDoc(snapshot.id, snapshot.to_dict() or {}, handle=snapshot)


class FirestoreBatch(StoreBatch):

    def __init__(self, store: "FirestoreReservationStore", write_batch):
        self._store = store
        self._batch = write_batch
        self._ops = 0

    def update(self, doc: ReservaDoc, fields: Dict[str, Any]) -> None:
        self._batch.update(self._store._ref(doc), _traducir(fields))
        self._ops += 1

    def commit(self) -> None:
        if self._ops:
            self._batch.commit()

    def __len__(self) -> int:
        return self._ops


class FirestoreReservationStore(ReservationStore):

    def __init__(self, client: firestore.Client, collection: str = "Reservas"):
        self._client = client
        self._collection = collection

    def _coleccion(self):
        return self._client.collection(self._collection)

    def _ref(self, doc: ReservaDoc):
        if doc.handle is not None:
            return doc.handle.reference
        return self._coleccion().document(doc.id)

    def query_before(self, field: str, before_iso: str, limit: int) -> List[ReservaDoc]:
        query = self._coleccion().where(filter=FieldFilter(field, "<", before_iso)).limit(limit)
        return [_doc(s) for s in query.get()]

    def page_after(self, start_after: Optional[ReservaDoc], limit: int) -> List[ReservaDoc]:
        query = self._coleccion().order_by(FieldPath.document_id()).limit(limit)
        if start_after is not None:
            if start_after.handle is not None:
                query = query.start_after(start_after.handle)
            else:
                query = query.start_after({FieldPath.document_id(): self._ref(start_after)})
        return [_doc(s) for s in query.get()]

    def update(self, doc: ReservaDoc, fields: Dict[str, Any]) -> None:
        self._ref(doc).update(_traducir(fields))

    def batch(self) -> FirestoreBatch:
        return FirestoreBatch(self, self._client.batch())

    def close(self) -> None:
        self._client.close()
