"""Route catalog port."""

from typing import Protocol

from kmb_eta.domain.models.data_unavailable import DataUnavailable
from kmb_eta.domain.models.route import Route


class RouteRepository(Protocol):
    """Port for looking up route variants by code."""

    async def load(self) -> list[Route] | DataUnavailable:
        """Load the full route catalog."""
        ...

    async def find_by_code(self, code: str) -> list[Route] | DataUnavailable:
        """Return every variant whose code equals ``code``, in catalog order."""
        ...
