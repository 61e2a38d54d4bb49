"""Tests for the arrival board reconciler."""

from datetime import datetime, time, timedelta, timezone

import pytest

from kmb_eta.application.services.eta_reconciler import (
    EtaReconciler,
    extract_scheduled_time,
    merge_fallback_records,
)
from kmb_eta.domain.models import (
    DataUnavailable,
    ErrorDetails,
    EtaRecord,
    EtaSlot,
    ReconciledBoard,
    SlotStatus,
)

HKT = timezone(timedelta(hours=8))
TODAY = datetime(2024, 5, 1, 10, 0, tzinfo=HKT)
UNAVAILABLE = DataUnavailable(error=ErrorDetails(status_code=503, reason="Service unavailable"))


class MockEtaRepository:
    """Mock arrival repository returning canned records per service type."""

    def __init__(self, records: dict[str, list[EtaRecord] | DataUnavailable]) -> None:
        self.records = records
        self.requested_service_types: list[str] = []

    async def get_records(
        self, stop_id: str, route_code: str, service_type: str = "1"  # noqa: ARG002
    ) -> list[EtaRecord] | DataUnavailable:
        self.requested_service_types.append(service_type)
        return self.records.get(service_type, [])


def record(
    seq: int,
    real_time: datetime | None = None,
    remark: str | None = None,
    service_type: str = "1",
) -> EtaRecord:
    return EtaRecord(seq, real_time, remark, service_type)


def at(hour: int, minute: int) -> datetime:
    return TODAY.replace(hour=hour, minute=minute)


def make_reconciler(repo: MockEtaRepository, now: datetime = TODAY) -> EtaReconciler:
    return EtaReconciler(repo, clock=lambda: now)


@pytest.mark.asyncio
async def test_alternate_service_type_fills_missing_middle_slot() -> None:
    """Given seq 1 and 3 from type 1 and seq 2 from type 2, when reconciling, then all slots fill."""
    repo = MockEtaRepository(
        {
            "1": [record(1, at(10, 5)), record(3, None, "10:40")],
            "2": [record(2, None, "10:20", service_type="2")],
        }
    )

    board = await make_reconciler(repo).reconcile("STOP", "1A")

    assert isinstance(board, ReconciledBoard)
    assert [slot.status for slot in board.slots] == [
        SlotStatus.REAL_TIME,
        SlotStatus.SCHEDULED,
        SlotStatus.SCHEDULED,
    ]
    assert board.slots[1].service_type == "2"
    assert board.slots[1].display_time == "10:20"
    assert repo.requested_service_types == ["1", "2"]


@pytest.mark.asyncio
async def test_when_nothing_anywhere_then_three_no_estimate_slots() -> None:
    """Given every service type empty, when reconciling, then the board is three NoEstimate slots."""
    repo = MockEtaRepository({})

    board = await make_reconciler(repo).reconcile("STOP", "1A")

    assert isinstance(board, ReconciledBoard)
    assert board.slots == (
        EtaSlot(1, SlotStatus.NO_ESTIMATE),
        EtaSlot(2, SlotStatus.NO_ESTIMATE),
        EtaSlot(3, SlotStatus.NO_ESTIMATE),
    )
    assert not board.has_estimates
    assert repo.requested_service_types == ["1", "2", "3", "4"]


@pytest.mark.asyncio
async def test_first_slot_later_than_schedule_is_delayed() -> None:
    """Given slot 1 real-time 10:05 and remark 09:55, when reconciling, then it is RealTime and delayed."""
    repo = MockEtaRepository(
        {"1": [record(1, at(10, 5), "原定班次 09:55"), record(2, at(10, 20)), record(3, at(10, 35))]}
    )

    board = await make_reconciler(repo).reconcile("STOP", "1A")

    assert isinstance(board, ReconciledBoard)
    assert board.slots[0] == EtaSlot(1, SlotStatus.REAL_TIME, "10:05", delayed=True, service_type="1")


@pytest.mark.asyncio
async def test_later_slot_without_real_time_uses_schedule() -> None:
    """Given slot 2 with only remark 10:20, when reconciling, then it is Scheduled at 10:20."""
    repo = MockEtaRepository({"1": [record(1, at(10, 5)), record(2, None, "10:20")]})

    board = await make_reconciler(repo).reconcile("STOP", "1A")

    assert isinstance(board, ReconciledBoard)
    assert board.slots[1].status is SlotStatus.SCHEDULED
    assert board.slots[1].display_time == "10:20"
    assert board.slots[1].delayed is False


@pytest.mark.asyncio
async def test_alternate_never_overwrites_filled_slot() -> None:
    """Given type 2 also offers seq 1, when reconciling, then slot 1 keeps the type 1 record."""
    repo = MockEtaRepository(
        {
            "1": [record(1, at(10, 5))],
            "2": [record(1, at(10, 1), service_type="2"), record(2, at(10, 15), service_type="2")],
            "3": [record(3, at(10, 30), service_type="3")],
        }
    )

    board = await make_reconciler(repo).reconcile("STOP", "1A")

    assert isinstance(board, ReconciledBoard)
    assert [slot.service_type for slot in board.slots] == ["1", "2", "3"]
    assert board.slots[0].display_time == "10:05"
    assert repo.requested_service_types == ["1", "2", "3"]


@pytest.mark.asyncio
async def test_alternates_stop_once_board_is_full() -> None:
    """Given type 1 supplies all three, when reconciling, then no alternate is requested."""
    repo = MockEtaRepository({"1": [record(3, at(10, 30)), record(1, at(10, 5)), record(2, at(10, 15))]})

    records = await make_reconciler(repo).collect_records("STOP", "1A")

    assert isinstance(records, list)
    assert [r.sequence_number for r in records] == [1, 2, 3]
    assert repo.requested_service_types == ["1"]


@pytest.mark.asyncio
async def test_unavailable_alternate_is_skipped() -> None:
    """Given type 2 failing, when reconciling, then type 3 is still tried."""
    repo = MockEtaRepository(
        {
            "1": [record(1, at(10, 5))],
            "2": UNAVAILABLE,
            "3": [record(2, None, "10:20", service_type="3")],
        }
    )

    board = await make_reconciler(repo).reconcile("STOP", "1A")

    assert isinstance(board, ReconciledBoard)
    assert board.slots[1].service_type == "3"
    assert board.slots[2].status is SlotStatus.NO_ESTIMATE


@pytest.mark.asyncio
async def test_unavailable_primary_is_data_unavailable() -> None:
    """Given type 1 failing, when reconciling, then DataUnavailable is returned."""
    repo = MockEtaRepository({"1": UNAVAILABLE, "2": [record(1, at(10, 5), service_type="2")]})

    result = await make_reconciler(repo).reconcile("STOP", "1A")

    assert result == UNAVAILABLE
    assert repo.requested_service_types == ["1"]


@pytest.mark.asyncio
async def test_primary_service_type_in_alternates_is_not_refetched() -> None:
    """Given alternates that include "1", when reconciling, then "1" is fetched only once."""
    repo = MockEtaRepository({})
    reconciler = EtaReconciler(repo, alternate_service_types=["1", "2"], clock=lambda: TODAY)

    await reconciler.reconcile("STOP", "1A")

    assert repo.requested_service_types == ["1", "2"]


def test_first_slot_classification() -> None:
    """Given the slot 1 variants, when classifying, then real-time is preferred."""
    reconciler = make_reconciler(MockEtaRepository({}))

    def slot_one(rec: EtaRecord) -> EtaSlot:
        return reconciler.build_board("S", "1A", [rec]).slots[0]

    on_time = slot_one(record(1, at(9, 50), "09:55"))
    assert (on_time.status, on_time.delayed, on_time.display_time) == (
        SlotStatus.REAL_TIME,
        False,
        "09:50",
    )
    exactly = slot_one(record(1, at(9, 55), "09:55"))
    assert exactly.delayed is False
    no_schedule = slot_one(record(1, at(10, 5), "原定班次"))
    assert (no_schedule.status, no_schedule.delayed) == (SlotStatus.REAL_TIME, False)
    scheduled = slot_one(record(1, None, "09:55"))
    assert (scheduled.status, scheduled.display_time) == (SlotStatus.SCHEDULED, "09:55")
    cancelled = slot_one(record(1, None, "班次取消"))
    assert (cancelled.status, cancelled.display_time) == (SlotStatus.CANCELLED, None)


def test_later_slot_classification() -> None:
    """Given slots 2 and 3, when classifying, then the schedule is preferred over real-time."""
    reconciler = make_reconciler(MockEtaRepository({}))
    board = reconciler.build_board(
        "S",
        "1A",
        [record(2, at(10, 25), "10:20"), record(3, at(10, 45))],
    )

    assert board.slots[1] == EtaSlot(2, SlotStatus.SCHEDULED, "10:20", service_type="1")
    assert board.slots[2] == EtaSlot(3, SlotStatus.REAL_TIME, "10:45", service_type="1")
    assert board.slots[0].status is SlotStatus.NO_ESTIMATE

    cancelled = reconciler.build_board("S", "1A", [record(2, None, None)]).slots[1]
    assert cancelled.status is SlotStatus.CANCELLED


def test_real_time_is_shown_in_configured_timezone() -> None:
    """Given a UTC timestamp, when classifying, then the display time is Hong Kong time."""
    reconciler = make_reconciler(MockEtaRepository({}))
    utc_time = datetime(2024, 5, 1, 2, 5, tzinfo=timezone.utc)

    slot = reconciler.build_board("S", "1A", [record(1, utc_time)]).slots[0]

    assert slot.display_time == "10:05"


def test_schedule_before_midnight_is_compared_on_the_same_day() -> None:
    """Given 23:58 scheduled and 00:03 real-time, when classifying after midnight, then not delayed."""
    after_midnight = datetime(2024, 5, 2, 0, 1, tzinfo=HKT)
    reconciler = make_reconciler(MockEtaRepository({}), now=after_midnight)

    slot = reconciler.build_board(
        "S", "1A", [record(1, after_midnight.replace(minute=3), "23:58")]
    ).slots[0]

    assert slot.status is SlotStatus.REAL_TIME
    assert slot.delayed is False


@pytest.mark.parametrize(
    ("remark", "expected"),
    [
        ("09:55", time(9, 55)),
        ("原定班次 23:05", time(23, 5)),
        ("Scheduled Bus", None),
        ("原定班次", None),
        ("9:55", None),
        ("25:99", None),
        ("", None),
        (None, None),
    ],
)
def test_extract_scheduled_time(remark: str | None, expected: time | None) -> None:
    """Given remarks, when extracting, then only a valid HH:MM yields a time."""
    assert extract_scheduled_time(remark) == expected


def test_merge_keeps_first_record_per_slot_and_caps_at_three() -> None:
    """Given duplicate and surplus candidates, when merging, then each slot is filled once."""
    merged = merge_fallback_records(
        [record(1)],
        [record(1, service_type="2"), record(2, service_type="2"), record(2, service_type="3"),
         record(3, service_type="3"), record(4, service_type="4")],
    )

    assert [(r.sequence_number, r.service_type) for r in merged] == [(1, "1"), (2, "2"), (3, "3")]


@pytest.mark.parametrize("count", [0, 1, 2, 3])
def test_board_always_has_three_ordered_slots(count: int) -> None:
    """Given 0..3 records in any order, when building, then three slots are indexed 1, 2, 3."""
    reconciler = make_reconciler(MockEtaRepository({}))
    records = [record(seq, at(10, seq)) for seq in range(count, 0, -1)]

    board = reconciler.build_board("S", "1A", records)

    assert [slot.index for slot in board.slots] == [1, 2, 3]
    filled = [slot.index for slot in board.slots if slot.status is not SlotStatus.NO_ESTIMATE]
    assert filled == list(range(1, count + 1))
