"""Domain layer - core models and ports."""

from kmb_eta.domain.models import (
    DataUnavailable,
    EtaSlot,
    ReconciledBoard,
    Route,
    StopDetails,
    StopRef,
)
from kmb_eta.domain.ports import (
    EtaRepository,
    RouteRepository,
    StopNameRepository,
    StopSequenceRepository,
)

__all__ = [
    "DataUnavailable",
    "EtaRepository",
    "EtaSlot",
    "ReconciledBoard",
    "Route",
    "RouteRepository",
    "StopDetails",
    "StopNameRepository",
    "StopRef",
    "StopSequenceRepository",
]
