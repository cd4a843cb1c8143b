"""
Servicios de reconciliación de reservas
"""

from .hosting_status_service import (
    RecomputeResult,
    derivar_hosting_status,
    recalcular_hosting_status,
)
from .unreported_checks_service import (
    UnreportedChecksResult,
    detectar_checks_no_informados,
)
from .fx_rescue_service import (
    RescateFxConfigError,
    RescateFxResult,
    disparar_rescate_fx,
)

__all__ = [
    "RecomputeResult",
    "derivar_hosting_status",
    "recalcular_hosting_status",
    "UnreportedChecksResult",
    "detectar_checks_no_informados",
    "RescateFxConfigError",
    "RescateFxResult",
    "disparar_rescate_fx",
]
