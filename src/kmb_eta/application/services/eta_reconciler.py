"""Reconciles arrival records from several service types into a three-slot board."""

import logging
import re
from collections.abc import Callable, Iterable
from datetime import datetime, time
from zoneinfo import ZoneInfo

from kmb_eta.domain.models.data_unavailable import DataUnavailable
from kmb_eta.domain.models.eta import (
    BOARD_SIZE,
    EtaRecord,
    EtaSlot,
    ReconciledBoard,
    SlotStatus,
)
from kmb_eta.domain.ports.eta_repository import EtaRepository

logger = logging.getLogger(__name__)

PRIMARY_SERVICE_TYPE = "1"
ALTERNATE_SERVICE_TYPES = ("2", "3", "4")

_SCHEDULED_TIME_PATTERN = re.compile(r"(\d{2}):(\d{2})")


def extract_scheduled_time(remark: str | None) -> time | None:
    """Pull an HH:MM time out of a remark.

    Remarks without a valid HH:MM (for example the bare "scheduled" marker or
    a cancellation note) give ``None``.
    """
    if remark is None:
        return None
    match = _SCHEDULED_TIME_PATTERN.search(remark)
    if match is None:
        return None
    hour, minute = int(match.group(1)), int(match.group(2))
    if hour > 23 or minute > 59:
        return None
    return time(hour, minute)


def merge_fallback_records(
    accepted: list[EtaRecord], candidates: Iterable[EtaRecord]
) -> list[EtaRecord]:
    """Add candidates that fill slots not yet taken, without touching filled ones."""
    filled = {record.sequence_number for record in accepted}
    merged = list(accepted)
    for record in candidates:
        if len(merged) >= BOARD_SIZE:
            break
        if record.sequence_number in filled or not 1 <= record.sequence_number <= BOARD_SIZE:
            continue
        filled.add(record.sequence_number)
        merged.append(record)
    return merged


class EtaReconciler:
    """Builds a reconciled arrival board for a stop and route.

    Service type "1" is authoritative. When it has fewer than three arrivals,
    the alternate service types are asked in order, one at a time, and may only
    fill slots that are still empty.

    Slot 1 prefers the real-time estimate and flags it as delayed when it is
    later than the scheduled time in the remark. Slots 2 and 3 prefer the
    scheduled time and fall back to the real-time estimate.
    """

    def __init__(
        self,
        eta_repository: EtaRepository,
        alternate_service_types: Iterable[str] = ALTERNATE_SERVICE_TYPES,
        timezone: str = "Asia/Hong_Kong",
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._eta_repository = eta_repository
        self._alternate_service_types = tuple(alternate_service_types)
        self._tz = ZoneInfo(timezone)
        self._clock = clock or (lambda: datetime.now(self._tz))

    async def collect_records(
        self, stop_id: str, route_code: str
    ) -> list[EtaRecord] | DataUnavailable:
        """Fetch and merge records, sorted by sequence number.

        Returns DataUnavailable only when the primary service type cannot be
        fetched; an alternate that fails is skipped.
        """
        primary = await self._eta_repository.get_records(
            stop_id, route_code, PRIMARY_SERVICE_TYPE
        )
        if isinstance(primary, DataUnavailable):
            return primary

        accepted = merge_fallback_records([], primary)

        for service_type in self._alternate_service_types:
            if len(accepted) >= BOARD_SIZE:
                break
            if service_type == PRIMARY_SERVICE_TYPE:
                continue
            # Sequential: whether to continue depends on what was accepted so far
            records = await self._eta_repository.get_records(stop_id, route_code, service_type)
            if isinstance(records, DataUnavailable):
                logger.warning(
                    f"Service type {service_type} unavailable for stop {stop_id}, "
                    f"route {route_code}: {records.error.reason}"
                )
                continue
            before = len(accepted)
            accepted = merge_fallback_records(accepted, records)
            if len(accepted) > before:
                logger.debug(
                    f"Service type {service_type} filled {len(accepted) - before} slot(s) "
                    f"for stop {stop_id}, route {route_code}"
                )

        return sorted(accepted, key=lambda record: record.sequence_number)

    async def reconcile(self, stop_id: str, route_code: str) -> ReconciledBoard | DataUnavailable:
        """Produce the three-slot board for a stop and route."""
        records = await self.collect_records(stop_id, route_code)
        if isinstance(records, DataUnavailable):
            return records
        return self.build_board(stop_id, route_code, records)

    def build_board(
        self, stop_id: str, route_code: str, records: list[EtaRecord]
    ) -> ReconciledBoard:
        """Place records into slots by sequence number and classify each slot."""
        by_slot: dict[int, EtaRecord] = {}
        for record in records:
            by_slot.setdefault(record.sequence_number, record)
        slots = tuple(
            self._classify(index, by_slot.get(index)) for index in range(1, BOARD_SIZE + 1)
        )
        return ReconciledBoard(stop_id=stop_id, route_code=route_code, slots=slots)

    def _localize(self, timestamp: datetime) -> datetime:
        if timestamp.tzinfo is None:
            return timestamp.replace(tzinfo=self._tz)
        return timestamp

    def _format_real_time(self, timestamp: datetime) -> str:
        return self._localize(timestamp).astimezone(self._tz).strftime("%H:%M")

    def _is_delayed(self, real_time: datetime, scheduled: time) -> bool:
        """Compare against today's date at the scheduled time.

        Same-day reconstruction: a schedule just before midnight compared with
        an estimate just after it is not detected as a delay.
        """
        real_time = self._localize(real_time)
        today = self._clock().astimezone(real_time.tzinfo).date()
        scheduled_at = datetime.combine(today, scheduled, tzinfo=real_time.tzinfo)
        return real_time > scheduled_at

    def _classify(self, index: int, record: EtaRecord | None) -> EtaSlot:
        if record is None:
            return EtaSlot(index=index, status=SlotStatus.NO_ESTIMATE)

        scheduled = extract_scheduled_time(record.remark)
        real_time = record.real_time

        if index == 1:
            if real_time is not None:
                return EtaSlot(
                    index=index,
                    status=SlotStatus.REAL_TIME,
                    display_time=self._format_real_time(real_time),
                    delayed=scheduled is not None and self._is_delayed(real_time, scheduled),
                    service_type=record.service_type,
                )
            if scheduled is not None:
                return EtaSlot(
                    index=index,
                    status=SlotStatus.SCHEDULED,
                    display_time=scheduled.strftime("%H:%M"),
                    service_type=record.service_type,
                )
        else:
            if scheduled is not None:
                return EtaSlot(
                    index=index,
                    status=SlotStatus.SCHEDULED,
                    display_time=scheduled.strftime("%H:%M"),
                    service_type=record.service_type,
                )
            if real_time is not None:
                return EtaSlot(
                    index=index,
                    status=SlotStatus.REAL_TIME,
                    display_time=self._format_real_time(real_time),
                    service_type=record.service_type,
                )

        return EtaSlot(index=index, status=SlotStatus.CANCELLED, service_type=record.service_type)
