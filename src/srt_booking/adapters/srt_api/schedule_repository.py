"""Schedule queries against the SRT site."""

import asyncio
import logging
from datetime import date, time, timedelta

from srt_booking.adapters.srt_api.constants import (
    ARRIVE_TIME_BASIS,
    DEFAULT_DEPARTURE_TIME,
    DEFAULT_PASSENGER_COUNT,
    MAIN_PATH,
    SEARCH_PAGE_ID,
    SEARCH_PATH,
    SEAT_CLASS_GENERAL,
    TRIP_TYPE_ONE_WAY,
)
from srt_booking.adapters.srt_api.dispatcher import SrtRequestDispatcher
from srt_booking.adapters.srt_api.http_client import UpstreamRequest
from srt_booking.adapters.srt_api.schedule_parser import parse_schedule_response
from srt_booking.domain.errors import (
    ResponseParseError,
    SessionExpiredError,
    TransportFailureError,
    UpstreamError,
)
from srt_booking.domain.models.date_availability import DateAvailability
from srt_booking.domain.models.session import Session
from srt_booking.domain.models.train import Train
from srt_booking.domain.ports.schedule_repository import ScheduleRepository

logger = logging.getLogger(__name__)

DEFAULT_DATE_WINDOW_DAYS = 14
DEFAULT_DATE_QUERY_CONCURRENCY = 4

# Failures that only cost the affected date its availability.
_DEGRADABLE_ERRORS = (TransportFailureError, UpstreamError, ResponseParseError)


def build_search_form(
    departure_code: str, arrival_code: str, travel_date: date, departure_time: time | None = None
) -> dict[str, str]:
    """Build the schedule search form the site's search page submits.

    Without a departure time the search starts at the beginning of the day.
    """
    search_time = (
        departure_time.strftime("%H%M%S") if departure_time is not None else DEFAULT_DEPARTURE_TIME
    )
    return {
        "dptRsStnCd": departure_code,
        "arvRsStnCd": arrival_code,
        "dptDt": travel_date.strftime("%Y%m%d"),
        "dptTm": search_time,
        "chtnDvCd": TRIP_TYPE_ONE_WAY,
        "psgNum": DEFAULT_PASSENGER_COUNT,
        "seatAttCd": SEAT_CLASS_GENERAL,
        "arriveTime": ARRIVE_TIME_BASIS,
        "pageId": SEARCH_PAGE_ID,
    }


class SrtScheduleRepository(ScheduleRepository):
    """Adapter for SRT schedule searches through the request dispatcher."""

    def __init__(
        self,
        dispatcher: SrtRequestDispatcher,
        date_window_days: int = DEFAULT_DATE_WINDOW_DAYS,
        date_query_concurrency: int = DEFAULT_DATE_QUERY_CONCURRENCY,
    ) -> None:
        """Initialize the repository.

        Args:
            dispatcher: Dispatcher that sends requests as a session.
            date_window_days: Number of dates checked by get_available_dates.
            date_query_concurrency: Maximum searches in flight during a date scan.
        """
        if date_window_days < 1:
            raise ValueError("date_window_days must be at least 1")
        if date_query_concurrency < 1:
            raise ValueError("date_query_concurrency must be at least 1")
        self._dispatcher = dispatcher
        self._date_window_days = date_window_days
        self._date_query_concurrency = date_query_concurrency

    async def search_trains(
        self,
        session: Session,
        departure_code: str,
        arrival_code: str,
        travel_date: date,
        departure_time: time | None = None,
        timeout: float | None = None,
    ) -> list[Train]:
        """Search trains departing at or after a time on a date.

        Rows that fail to parse are left out of the result, never filled in.

        Raises:
            SessionExpiredError: The site asked for a new login.
            TransportFailureError: On timeout or connection failure.
            UpstreamError: The site rejected the search with a message.
            ResponseParseError: The response had an unexpected shape.
        """
        request = UpstreamRequest(
            "POST",
            SEARCH_PATH,
            form=build_search_form(departure_code, arrival_code, travel_date, departure_time),
            referer=MAIN_PATH,
        )
        response = await self._dispatcher.call(session, request, timeout=timeout)
        trains = parse_schedule_response(response.text)
        logger.debug(
            f"Found {len(trains)} train(s) {departure_code}->{arrival_code} on {travel_date}"
        )
        return trains

    async def _check_date(
        self,
        semaphore: asyncio.Semaphore,
        expired: asyncio.Event,
        session: Session,
        departure_code: str,
        arrival_code: str,
        travel_date: date,
        timeout: float | None,
    ) -> DateAvailability:
        async with semaphore:
            # Dates still queued when another search saw the expiry are not sent.
            if expired.is_set():
                raise SessionExpiredError()
            try:
                trains = await self.search_trains(
                    session, departure_code, arrival_code, travel_date, timeout=timeout
                )
            except SessionExpiredError:
                expired.set()
                raise
            except _DEGRADABLE_ERRORS as e:
                logger.warning(f"Availability check for {travel_date} failed, unbookable: {e}")
                return DateAvailability(date=travel_date, is_bookable=False)
        return DateAvailability(
            date=travel_date, is_bookable=any(train.is_bookable() for train in trains)
        )

    async def get_available_dates(
        self,
        session: Session,
        departure_code: str,
        arrival_code: str,
        from_date: date,
        timeout: float | None = None,
    ) -> list[DateAvailability]:
        """Check each date of the window starting at from_date, one search per date.

        The site has no multi-date query. A failed search only marks its own
        date unbookable, so a partial answer is returned instead of an error.
        An expired session is not a per-date failure: searches not yet sent
        are skipped and the whole scan fails.

        Raises:
            SessionExpiredError: The site asked for a new login.
        """
        semaphore = asyncio.Semaphore(self._date_query_concurrency)
        expired = asyncio.Event()
        dates = [from_date + timedelta(days=offset) for offset in range(self._date_window_days)]

        results = await asyncio.gather(
            *(
                self._check_date(
                    semaphore, expired, session, departure_code, arrival_code, d, timeout
                )
                for d in dates
            ),
            return_exceptions=True,
        )

        availability: list[DateAvailability] = []
        for result in results:
            # Only SessionExpiredError and unexpected errors get this far.
            if isinstance(result, BaseException):
                raise result
            availability.append(result)

        logger.debug(
            f"{sum(a.is_bookable for a in availability)} of {len(availability)} date(s) bookable "
            f"{departure_code}->{arrival_code} from {from_date}"
        )
        return availability
