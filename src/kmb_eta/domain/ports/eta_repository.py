"""Arrival record port."""

from typing import Protocol

from kmb_eta.domain.models.data_unavailable import DataUnavailable
from kmb_eta.domain.models.eta import EtaRecord


class EtaRepository(Protocol):
    """Port for retrieving raw arrival records."""

    async def get_records(
        self, stop_id: str, route_code: str, service_type: str = "1"
    ) -> list[EtaRecord] | DataUnavailable:
        """Get arrival records for a stop, route and service type."""
        ...
