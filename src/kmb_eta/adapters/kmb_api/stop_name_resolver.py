"""KMB stop details adapter."""

import logging

from kmb_eta.adapters.kmb_api.constants import KMB_BASE_URL, STOP_PATH
from kmb_eta.adapters.kmb_api.http_client import (
    LOOKUP_RETRY_POLICY,
    FetchError,
    RetryingFetcher,
    RetryPolicy,
    extract_data,
)
from kmb_eta.domain.models.stop import StopDetails
from kmb_eta.domain.ports.stop_repository import StopNameRepository

logger = logging.getLogger(__name__)


class KmbStopNameResolver(StopNameRepository):
    """Resolves a stop id to its localized display name.

    Never invents a placeholder: an unknown name is reported as ``None``.
    """

    def __init__(
        self,
        fetcher: RetryingFetcher,
        base_url: str = KMB_BASE_URL,
        language: str = "tc",
        retry_policy: RetryPolicy = LOOKUP_RETRY_POLICY,
    ) -> None:
        self._fetcher = fetcher
        self._base_url = base_url
        self._language = language
        self._retry_policy = retry_policy

    async def resolve(self, stop_id: str) -> StopDetails:
        """Get display details for a stop."""
        url = f"{self._base_url}{STOP_PATH.format(stop_id=stop_id)}"
        try:
            payload = await self._fetcher.fetch_with_policy(url, self._retry_policy)
        except FetchError as e:
            logger.warning(f"No name for stop {stop_id}: {e.to_error_details().reason}")
            return StopDetails(stop_id=stop_id, display_name=None)

        data = extract_data(payload)
        name = data.get(f"name_{self._language}") if isinstance(data, dict) else None
        name = name.strip() if isinstance(name, str) else ""
        return StopDetails(stop_id=stop_id, display_name=name or None)
