"""KMB arrival estimate adapter."""

import logging
from datetime import datetime
from typing import Any

from kmb_eta.adapters.kmb_api.constants import DEFAULT_SERVICE_TYPE, ETA_PATH, KMB_BASE_URL
from kmb_eta.adapters.kmb_api.http_client import (
    LOOKUP_RETRY_POLICY,
    FetchError,
    RetryingFetcher,
    RetryPolicy,
    extract_data,
)
from kmb_eta.domain.models.data_unavailable import DataUnavailable
from kmb_eta.domain.models.eta import BOARD_SIZE, EtaRecord
from kmb_eta.domain.ports.eta_repository import EtaRepository

logger = logging.getLogger(__name__)


def _parse_timestamp(value: Any) -> datetime | None:
    """Parse an ISO 8601 timestamp such as ``2024-01-01T10:05:00+08:00``."""
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        return datetime.fromisoformat(value.strip())
    except ValueError:
        logger.warning(f"Ignoring unparseable arrival timestamp {value!r}")
        return None


class KmbEtaRepository(EtaRepository):
    """Fetches raw arrival records for one service type."""

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

    def _parse_record(self, item: Any, service_type: str) -> EtaRecord | None:
        """Parse one entry; entries ranked outside 1..3 are dropped."""
        if not isinstance(item, dict):
            return None
        try:
            sequence_number = int(item.get("eta_seq"))
        except (TypeError, ValueError):
            return None
        if not 1 <= sequence_number <= BOARD_SIZE:
            return None

        remark = item.get(f"rmk_{self._language}")
        remark = remark.strip() if isinstance(remark, str) else ""
        return EtaRecord(
            sequence_number=sequence_number,
            real_time=_parse_timestamp(item.get("eta")),
            remark=remark or None,
            service_type=service_type,
        )

    async def get_records(
        self, stop_id: str, route_code: str, service_type: str = DEFAULT_SERVICE_TYPE
    ) -> list[EtaRecord] | DataUnavailable:
        """Get arrival records ranked 1..3 for a stop, route and service type."""
        path = ETA_PATH.format(stop_id=stop_id, route=route_code, service_type=service_type)
        try:
            payload = await self._fetcher.fetch_with_policy(
                f"{self._base_url}{path}", self._retry_policy
            )
        except FetchError as e:
            return e.to_unavailable()

        data = extract_data(payload)
        if not isinstance(data, list):
            return []
        records = [r for r in (self._parse_record(item, service_type) for item in data) if r]
        logger.debug(
            f"{len(records)} arrival record(s) for stop {stop_id}, route {route_code}, "
            f"service type {service_type}"
        )
        return records
