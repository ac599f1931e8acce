"""Booking service port, implemented by the ticketing client facade."""

from datetime import date, time
from typing import Protocol

from srt_booking.domain.models.date_availability import DateAvailability
from srt_booking.domain.models.station import Station
from srt_booking.domain.models.train import Train


class BookingService(Protocol):
    """Port the outer surfaces (web API, CLI) use to drive booking flows."""

    async def login(self, username: str, password: str, local_id: str | None = None) -> str:
        """Log in upstream and return an opaque session handle."""
        ...

    def is_authenticated(self, handle: str) -> bool:
        """Whether the handle maps to a live session, without a remote call."""
        ...

    async def check_session(self, handle: str, timeout: float | None = None) -> bool:
        """Whether the remote site still accepts the session."""
        ...

    def get_stations(self) -> list[Station]:
        """Return the station catalog."""
        ...

    async def get_available_dates(
        self,
        handle: str,
        departure_code: str,
        arrival_code: str,
        from_date: date,
        timeout: float | None = None,
    ) -> list[DateAvailability]:
        """Report bookability for each date of the window."""
        ...

    async def search_trains(
        self,
        handle: str,
        departure_code: str,
        arrival_code: str,
        travel_date: date,
        departure_time: time | None = None,
        timeout: float | None = None,
    ) -> list[Train]:
        """Search trains for a route and date."""
        ...

    async def logout(self, handle: str) -> None:
        """End the session."""
        ...
