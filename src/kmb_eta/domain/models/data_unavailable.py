"""Sentinel for data that could not be fetched."""

from dataclasses import dataclass

from kmb_eta.domain.models.error_details import ErrorDetails


@dataclass(frozen=True)
class DataUnavailable:
    """Returned in place of a result when the remote API gave up on us.

    Carries the details of the last failed attempt for logging and display.
    """

    error: ErrorDetails
