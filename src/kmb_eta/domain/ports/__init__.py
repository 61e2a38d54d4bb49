"""Ports (interfaces) for the ports-and-adapters architecture."""

from kmb_eta.domain.ports.eta_repository import EtaRepository
from kmb_eta.domain.ports.route_repository import RouteRepository
from kmb_eta.domain.ports.stop_repository import StopNameRepository, StopSequenceRepository

__all__ = [
    "EtaRepository",
    "RouteRepository",
    "StopNameRepository",
    "StopSequenceRepository",
]
