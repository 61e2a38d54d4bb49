"""Stop lookup ports."""

from typing import Protocol

from kmb_eta.domain.models.data_unavailable import DataUnavailable
from kmb_eta.domain.models.route import Route
from kmb_eta.domain.models.stop import StopDetails, StopRef


class StopSequenceRepository(Protocol):
    """Port for resolving a route variant's ordered stops."""

    async def resolve(self, route: Route) -> list[StopRef] | DataUnavailable:
        """Get the deduplicated stop sequence for a route variant."""
        ...


class StopNameRepository(Protocol):
    """Port for resolving a stop's display name."""

    async def resolve(self, stop_id: str) -> StopDetails:
        """Get display details for a stop."""
        ...
