"""Facade over route, stop and arrival lookups for the presentation layer."""

import asyncio
import logging

from kmb_eta.application.services.eta_reconciler import EtaReconciler
from kmb_eta.domain.models.data_unavailable import DataUnavailable
from kmb_eta.domain.models.eta import ReconciledBoard
from kmb_eta.domain.models.route import Route
from kmb_eta.domain.models.stop import StopDetails, StopRef
from kmb_eta.domain.ports.route_repository import RouteRepository
from kmb_eta.domain.ports.stop_repository import StopNameRepository, StopSequenceRepository

logger = logging.getLogger(__name__)


class TransitBoardService:
    """The three operations the presentation layer calls.

    Holds no state between calls.
    """

    def __init__(
        self,
        route_repository: RouteRepository,
        stop_sequence_repository: StopSequenceRepository,
        stop_name_repository: StopNameRepository,
        eta_reconciler: EtaReconciler,
        max_concurrent_lookups: int = 8,
    ) -> None:
        """Initialize with the repositories and the reconciler."""
        self._route_repository = route_repository
        self._stop_sequence_repository = stop_sequence_repository
        self._stop_name_repository = stop_name_repository
        self._eta_reconciler = eta_reconciler
        self._max_concurrent_lookups = max_concurrent_lookups

    async def search_routes(self, code: str) -> list[Route] | DataUnavailable:
        """Find every variant of a route code.

        Input is trimmed and upper-cased. Blank input and unknown codes give an
        empty list.
        """
        normalized = code.strip().upper()
        if not normalized:
            return []
        routes = await self._route_repository.find_by_code(normalized)
        if isinstance(routes, list):
            logger.info(f"Route {normalized}: {len(routes)} variant(s)")
        return routes

    async def list_stops(self, route: Route) -> list[tuple[StopRef, StopDetails]] | DataUnavailable:
        """Resolve a variant's stops and their names, in sequence order.

        Names for distinct stop ids are fetched concurrently.
        """
        stops = await self._stop_sequence_repository.resolve(route)
        if isinstance(stops, DataUnavailable):
            return stops

        semaphore = asyncio.Semaphore(self._max_concurrent_lookups)

        async def resolve_name(stop_id: str) -> StopDetails:
            async with semaphore:
                return await self._stop_name_repository.resolve(stop_id)

        stop_ids = list(dict.fromkeys(stop.stop_id for stop in stops))
        resolved = await asyncio.gather(*(resolve_name(stop_id) for stop_id in stop_ids))
        details_by_id = dict(zip(stop_ids, resolved))

        return [(stop, details_by_id[stop.stop_id]) for stop in stops]

    async def get_board(self, stop_id: str, route_code: str) -> ReconciledBoard | DataUnavailable:
        """Get the reconciled three-slot arrival board for a stop."""
        return await self._eta_reconciler.reconcile(stop_id, route_code)
