"""Schedule repository port."""

from datetime import date, time
from typing import Protocol

from srt_booking.domain.models.date_availability import DateAvailability
from srt_booking.domain.models.session import Session
from srt_booking.domain.models.train import Train


class ScheduleRepository(Protocol):
    """Port for querying train schedules as a logged-in session."""

    async def search_trains(
        self,
        session: Session,
        departure_code: str,
        arrival_code: str,
        travel_date: date,
        departure_time: time | None = None,
        timeout: float | None = None,
    ) -> list[Train]:
        """Search trains departing at or after a time on a date (start of day when None)."""
        ...

    async def get_available_dates(
        self,
        session: Session,
        departure_code: str,
        arrival_code: str,
        from_date: date,
        timeout: float | None = None,
    ) -> list[DateAvailability]:
        """Report bookability for each date of the forward-looking window."""
        ...
