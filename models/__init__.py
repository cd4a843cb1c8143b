"""
Archivo de inicialización del paquete models.
Expone los modelos para que SQLAlchemy (Base.metadata) los detecte al importar 'models'.
"""

from .reserva import Reserva, HostingStatus, CAMPOS_DOCUMENTO

__all__ = ["Reserva", "HostingStatus", "CAMPOS_DOCUMENTO"]
