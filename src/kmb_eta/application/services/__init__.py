"""Application services."""

from kmb_eta.application.services.board_session import BoardSession, BoardSessionState
from kmb_eta.application.services.eta_reconciler import EtaReconciler
from kmb_eta.application.services.transit_board_service import TransitBoardService

__all__ = [
    "BoardSession",
    "BoardSessionState",
    "EtaReconciler",
    "TransitBoardService",
]
