"""Per-session orchestration of route, stop and board selections."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from kmb_eta.domain.models.data_unavailable import DataUnavailable

if TYPE_CHECKING:
    from kmb_eta.application.services.transit_board_service import TransitBoardService
    from kmb_eta.domain.models.eta import ReconciledBoard
    from kmb_eta.domain.models.route import Route
    from kmb_eta.domain.models.stop import StopDetails, StopRef

logger = logging.getLogger(__name__)


@dataclass
class BoardSessionState:
    """What the presentation layer currently shows."""

    query: str = ""
    routes: list[Route] | DataUnavailable = field(default_factory=list)
    selected_route: Route | None = None
    stops: list[tuple[StopRef, StopDetails]] | DataUnavailable = field(default_factory=list)
    selected_stop: StopRef | None = None
    board: ReconciledBoard | DataUnavailable | None = None


class BoardSession:
    """Applies results only while they still belong to the current selection.

    Each search, route selection and stop selection takes a fresh token. A
    result whose token is no longer current is discarded, so a slow response
    for an earlier selection never overwrites a later one. Checking the token
    and applying the result happen without an await in between.

    The first route of the first successful search is selected automatically,
    once per session.
    """

    def __init__(
        self,
        service: TransitBoardService,
        on_change: Callable[[BoardSessionState], None] | None = None,
        auto_select_first_route: bool = True,
    ) -> None:
        self._service = service
        self._on_change = on_change
        self._auto_select_first_route = auto_select_first_route
        self._initial_route_selected = False
        self._search_token = 0
        self._route_token = 0
        self._stop_token = 0
        self.state = BoardSessionState()

    def _notify(self) -> None:
        if self._on_change is not None:
            self._on_change(self.state)

    async def search(self, code: str) -> list[Route] | DataUnavailable | None:
        """Search for a route code and replace the route list.

        Returns the applied result, or None when a newer search superseded it.
        """
        self._search_token += 1
        self._route_token += 1
        self._stop_token += 1
        token = self._search_token
        route_token = self._route_token

        self.state = BoardSessionState(query=code)
        self._notify()

        routes = await self._service.search_routes(code)
        if token != self._search_token:
            logger.debug(f"Discarding stale search result for {code!r}")
            return None
        self.state.routes = routes
        self._notify()

        # A route picked while the search was in flight wins over auto-select
        if (
            self._auto_select_first_route
            and not self._initial_route_selected
            and route_token == self._route_token
            and isinstance(routes, list)
            and routes
        ):
            self._initial_route_selected = True
            await self.select_route(routes[0])
        return routes

    async def select_route(
        self, route: Route
    ) -> list[tuple[StopRef, StopDetails]] | DataUnavailable | None:
        """Select a route variant and load its stops.

        Returns the applied stop list, or None when the result went stale.
        """
        self._route_token += 1
        self._stop_token += 1
        token = self._route_token

        self.state.selected_route = route
        self.state.stops = []
        self.state.selected_stop = None
        self.state.board = None
        self._notify()

        stops = await self._service.list_stops(route)
        if token != self._route_token:
            logger.debug(f"Discarding stale stop list for route {route.code}")
            return None
        self.state.stops = stops
        self._notify()
        return stops

    async def select_stop(self, stop: StopRef) -> ReconciledBoard | DataUnavailable | None:
        """Select a stop of the current route and load its board.

        Returns the applied board, or None when the result went stale.
        """
        route = self.state.selected_route
        if route is None:
            raise ValueError("Select a route before selecting a stop")

        self._stop_token += 1
        token = self._stop_token

        self.state.selected_stop = stop
        self.state.board = None
        self._notify()

        board = await self._service.get_board(stop.stop_id, route.code)
        if token != self._stop_token:
            logger.debug(f"Discarding stale board for stop {stop.stop_id}")
            return None
        self.state.board = board
        self._notify()
        return board
