"""KMB route catalog adapter."""

import logging
from typing import Any

from kmb_eta.adapters.kmb_api.constants import KMB_BASE_URL, ROUTE_PATH
from kmb_eta.adapters.kmb_api.http_client import (
    CATALOG_RETRY_POLICY,
    FetchError,
    RetryingFetcher,
    RetryPolicy,
    extract_data,
)
from kmb_eta.domain.models.data_unavailable import DataUnavailable
from kmb_eta.domain.models.route import Bound, Route
from kmb_eta.domain.ports.route_repository import RouteRepository

logger = logging.getLogger(__name__)


class KmbRouteCatalog(RouteRepository):
    """Loads the route list and answers exact route-code lookups.

    The catalog is fetched once per instance; a failed load is not remembered,
    so the next lookup tries again.
    """

    def __init__(
        self,
        fetcher: RetryingFetcher,
        base_url: str = KMB_BASE_URL,
        language: str = "tc",
        retry_policy: RetryPolicy = CATALOG_RETRY_POLICY,
    ) -> None:
        self._fetcher = fetcher
        self._base_url = base_url
        self._language = language
        self._retry_policy = retry_policy
        self._routes: list[Route] | None = None

    def _parse_route(self, item: Any) -> Route | None:
        """Parse one catalog entry, returning None for entries we cannot use."""
        if not isinstance(item, dict):
            return None
        code = str(item.get("route") or "").strip()
        try:
            bound = Bound(item.get("bound"))
        except ValueError:
            logger.warning(f"Skipping route {code or '?'} with unknown bound {item.get('bound')!r}")
            return None
        if not code:
            return None
        return Route(
            code=code,
            bound=bound,
            origin_name=str(item.get(f"orig_{self._language}") or "").strip(),
            dest_name=str(item.get(f"dest_{self._language}") or "").strip(),
            service_type=str(item.get("service_type") or "1"),
        )

    async def load(self) -> list[Route] | DataUnavailable:
        """Load the full route catalog (single request, no pagination)."""
        if self._routes is not None:
            return self._routes

        try:
            payload = await self._fetcher.fetch_with_policy(
                f"{self._base_url}{ROUTE_PATH}", self._retry_policy
            )
        except FetchError as e:
            return e.to_unavailable()

        data = extract_data(payload)
        items = data if isinstance(data, list) else []
        routes = [route for route in (self._parse_route(item) for item in items) if route]
        logger.info(f"Loaded {len(routes)} route variant(s)")
        self._routes = routes
        return routes

    async def find_by_code(self, code: str) -> list[Route] | DataUnavailable:
        """Return every variant whose code equals ``code``, in catalog order.

        The caller normalizes input to upper case. No match is an empty list.
        """
        routes = await self.load()
        if isinstance(routes, DataUnavailable):
            return routes
        return [route for route in routes if route.code == code]
