"""Arrival estimate domain models."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

BOARD_SIZE = 3


@dataclass(frozen=True)
class EtaRecord:
    """A single raw arrival record for one service type.

    ``real_time`` and ``remark`` are ``None`` when the API omitted them or
    sent an empty value.
    """

    sequence_number: int
    real_time: datetime | None
    remark: str | None
    service_type: str


class SlotStatus(Enum):
    """Classification of one board slot."""

    REAL_TIME = "real_time"
    SCHEDULED = "scheduled"
    CANCELLED = "cancelled"
    NO_ESTIMATE = "no_estimate"


@dataclass(frozen=True)
class EtaSlot:
    """One of the three positions on a reconciled board."""

    index: int
    status: SlotStatus
    display_time: str | None = None
    delayed: bool = False
    service_type: str | None = None  # Service type the record came from


@dataclass(frozen=True)
class ReconciledBoard:
    """Exactly three slots, indexed 1..3 in order."""

    stop_id: str
    route_code: str
    slots: tuple[EtaSlot, ...]

    def __post_init__(self) -> None:
        """Reject boards that are not exactly three ordered slots."""
        if len(self.slots) != BOARD_SIZE:
            raise ValueError(f"A board has exactly {BOARD_SIZE} slots, got {len(self.slots)}")
        if [slot.index for slot in self.slots] != list(range(1, BOARD_SIZE + 1)):
            raise ValueError("Board slots must be indexed 1, 2, 3 in order")

    @property
    def has_estimates(self) -> bool:
        """True when at least one slot is backed by an arrival record."""
        return any(slot.status is not SlotStatus.NO_ESTIMATE for slot in self.slots)
