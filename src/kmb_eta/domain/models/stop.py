"""Stop domain models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class StopRef:
    """A stop's position within a route's stop sequence.

    Identity is the (sequence_number, stop_id) pair.
    """

    sequence_number: int
    stop_id: str

    @property
    def key(self) -> tuple[int, str]:
        """Composite identity used for deduplication."""
        return (self.sequence_number, self.stop_id)


@dataclass(frozen=True)
class StopDetails:
    """Display information for a stop.

    ``display_name`` is already trimmed; ``None`` means the name is unknown and
    the presentation layer decides what placeholder to show.
    """

    stop_id: str
    display_name: str | None
