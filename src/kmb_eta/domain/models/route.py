"""Route domain model."""

from dataclasses import dataclass
from enum import Enum


class Bound(Enum):
    """Travel direction of a route variant."""

    OUTBOUND = "O"
    INBOUND = "I"

    @property
    def path_name(self) -> str:
        """Name used in the stop-sequence path ("outbound"/"inbound")."""
        return "outbound" if self is Bound.OUTBOUND else "inbound"

    @property
    def direction(self) -> str:
        """Numeric direction parameter matching the path name."""
        return "1" if self is Bound.OUTBOUND else "2"


@dataclass(frozen=True)
class Route:
    """One bound/service variant of a route code."""

    code: str
    bound: Bound
    origin_name: str
    dest_name: str
    service_type: str = "1"
