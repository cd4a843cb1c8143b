"""
Modelo relacional de la colección Reservas
Espejo de los campos que usan los jobs de reconciliación (fechas, timestamps
del ciclo de hosting, estado derivado y auditoría)
"""

from enum import Enum

from sqlalchemy import Column, String, DateTime, JSON, Index

from database.conexion import Base


# ========================================================================
# ENUMS
# ========================================================================

class HostingStatus(str, Enum):
    """Estados de hosting de una reserva"""
    NO_SHOW = "no_show"
    CHECKED_OUT = "checked_out"
    CHECKED_IN = "checked_in"
    CONTACTADO = "contactado"
    CHECKIN_NOT_INFORMED = "checkin_not_informed"
    CHECKOUT_NOT_INFORMED = "checkout_not_informed"


# Campo del documento -> columna
CAMPOS_DOCUMENTO = {
    "arrival_iso": "arrival_iso",
    "departure_iso": "departure_iso",
    "contacted_at": "contacted_at",
    "checkin_at": "checkin_at",
    "checkout_at": "checkout_at",
    "no_show_at": "no_show_at",
    "hosting_status": "hosting_status",
    "lastUpdatedAt": "last_updated_at",
    "lastUpdatedBy": "last_updated_by",
}


# ----------- RESERVA -----------
class Reserva(Base):
    __tablename__ = "reservas"
    __table_args__ = (
        Index("idx_reserva_arrival", "arrival_iso"),
        Index("idx_reserva_departure", "departure_iso"),
        Index("idx_reserva_hosting_status", "hosting_status"),
    )

    id = Column(String(128), primary_key=True)

    # Fechas calendario (YYYY-MM-DD)
    arrival_iso = Column(String(10), nullable=True)
    departure_iso = Column(String(10), nullable=True)

    # Ciclo de hosting
    contacted_at = Column(DateTime, nullable=True)
    checkin_at = Column(DateTime, nullable=True)
    checkout_at = Column(DateTime, nullable=True)
    no_show_at = Column(DateTime, nullable=True)
    hosting_status = Column(String(40), nullable=True)

    # Auditoría
    last_updated_at = Column(DateTime(timezone=True), nullable=True)
    last_updated_by = Column(String(64), nullable=True)

    # Resto del documento (propiedad, huésped, montos...)
    extra = Column(JSON, nullable=True)

    def to_document(self) -> dict:
        data = dict(self.extra or {})
        for campo, columna in CAMPOS_DOCUMENTO.items():
            valor = getattr(self, columna)
            if valor is not None:
                data[campo] = valor
        return data

    @classmethod
    def from_document(cls, doc_id: str, data: dict) -> "Reserva":
        columnas = {columna: data.get(campo) for campo, columna in CAMPOS_DOCUMENTO.items()}
        extra = {k: v for k, v in data.items() if k not in CAMPOS_DOCUMENTO}
        return cls(id=doc_id, extra=extra or None, **columnas)

    def __repr__(self):
        return f"<Reserva id={self.id} hosting_status={self.hosting_status}>"
