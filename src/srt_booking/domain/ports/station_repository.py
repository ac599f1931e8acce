"""Station repository port."""

from typing import Protocol

from srt_booking.domain.models.station import Station


class StationRepository(Protocol):
    """Port for retrieving station information."""

    def get_stations(self) -> list[Station]:
        """Return all known stations."""
        ...

    def find_by_code(self, code: str) -> Station | None:
        """Find a station by its site code."""
        ...
