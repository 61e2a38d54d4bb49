"""Domain models for KMB arrival boards."""

from kmb_eta.domain.models.data_unavailable import DataUnavailable
from kmb_eta.domain.models.error_details import ErrorDetails
from kmb_eta.domain.models.eta import (
    BOARD_SIZE,
    EtaRecord,
    EtaSlot,
    ReconciledBoard,
    SlotStatus,
)
from kmb_eta.domain.models.route import Bound, Route
from kmb_eta.domain.models.stop import StopDetails, StopRef

__all__ = [
    "BOARD_SIZE",
    "Bound",
    "DataUnavailable",
    "ErrorDetails",
    "EtaRecord",
    "EtaSlot",
    "ReconciledBoard",
    "Route",
    "SlotStatus",
    "StopDetails",
    "StopRef",
]
