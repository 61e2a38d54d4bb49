"""KMB stop sequence adapter."""

import logging
from typing import Any

from kmb_eta.adapters.kmb_api.constants import KMB_BASE_URL, ROUTE_STOP_PATH
from kmb_eta.adapters.kmb_api.http_client import (
    CATALOG_RETRY_POLICY,
    FetchError,
    RetryingFetcher,
    RetryPolicy,
    extract_data,
)
from kmb_eta.domain.models.data_unavailable import DataUnavailable
from kmb_eta.domain.models.route import Route
from kmb_eta.domain.models.stop import StopRef
from kmb_eta.domain.ports.stop_repository import StopSequenceRepository

logger = logging.getLogger(__name__)


def _parse_stop_ref(item: Any) -> StopRef | None:
    """Parse one route-stop entry, or None when it lacks a usable seq/stop."""
    if not isinstance(item, dict):
        return None
    stop_id = str(item.get("stop") or "").strip()
    try:
        sequence_number = int(item.get("seq"))
    except (TypeError, ValueError):
        return None
    if not stop_id or sequence_number < 1:
        return None
    return StopRef(sequence_number=sequence_number, stop_id=stop_id)


def deduplicate_stops(stops: list[StopRef]) -> list[StopRef]:
    """Keep the first occurrence of each (sequence number, stop id) pair."""
    seen: set[tuple[int, str]] = set()
    unique: list[StopRef] = []
    for stop in stops:
        if stop.key in seen:
            logger.warning(
                f"Duplicate stop found for seq {stop.sequence_number}, stop id {stop.stop_id}"
            )
            continue
        seen.add(stop.key)
        unique.append(stop)
    return unique


class KmbStopSequenceResolver(StopSequenceRepository):
    """Fetches the ordered stop list for a route variant."""

    def __init__(
        self,
        fetcher: RetryingFetcher,
        base_url: str = KMB_BASE_URL,
        retry_policy: RetryPolicy = CATALOG_RETRY_POLICY,
    ) -> None:
        self._fetcher = fetcher
        self._base_url = base_url
        self._retry_policy = retry_policy

    def build_url(self, route: Route) -> str:
        """Build the route-stop URL; the bound name and direction always agree."""
        path = ROUTE_STOP_PATH.format(
            route=route.code, bound=route.bound.path_name, direction=route.bound.direction
        )
        return f"{self._base_url}{path}"

    async def resolve(self, route: Route) -> list[StopRef] | DataUnavailable:
        """Get the deduplicated stop sequence for a route variant.

        A missing or empty payload yields an empty list.
        """
        try:
            payload = await self._fetcher.fetch_with_policy(
                self.build_url(route), self._retry_policy
            )
        except FetchError as e:
            return e.to_unavailable()

        data = extract_data(payload)
        if not isinstance(data, list):
            return []

        stops: list[StopRef] = []
        for item in data:
            stop = _parse_stop_ref(item)
            if stop is None:
                logger.warning(f"Skipping invalid stop entry for route {route.code}: {item!r}")
                continue
            stops.append(stop)

        unique = deduplicate_stops(stops)
        logger.debug(
            f"Resolved {len(unique)} stop(s) for route {route.code} ({route.bound.path_name})"
        )
        return unique
