"""Ticketing client facade: the single entry point for booking flows."""

import logging
from datetime import date, time
from typing import TYPE_CHECKING

from srt_booking.domain.errors import DispatchError, NotAuthenticatedError, SessionExpiredError
from srt_booking.domain.models import DateAvailability, Session, Station, Train
from srt_booking.domain.ports.booking_service import BookingService

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from srt_booking.domain.ports import (
        Authenticator,
        ScheduleRepository,
        SessionStore,
        StationRepository,
    )


class TicketingClient(BookingService):
    """Composes login, session storage and schedule queries behind opaque handles.

    Session lifecycle is Unauthenticated -> Active -> Unauthenticated. A
    session leaves the store on logout or as soon as any query reports it
    expired; there is no refresh, the caller must log in again.
    """

    def __init__(
        self,
        session_store: "SessionStore",
        authenticator: "Authenticator",
        schedule_repository: "ScheduleRepository",
        station_repository: "StationRepository",
    ) -> None:
        self._session_store = session_store
        self._authenticator = authenticator
        self._schedule_repository = schedule_repository
        self._station_repository = station_repository

    def _resolve(self, handle: str) -> Session:
        """Look up a handle without touching the network."""
        session = self._session_store.get(handle) if handle else None
        if session is None or not session.is_usable:
            raise NotAuthenticatedError()
        return session

    def _expire(self, handle: str) -> None:
        self._session_store.remove(handle)
        logger.info(f"Session {handle[:8]}... expired, removed from store")

    async def login(self, username: str, password: str, local_id: str | None = None) -> str:
        """Log in upstream and return the local session handle.

        A failed re-login under an existing handle also drops the earlier
        session for that handle.

        Raises:
            AuthError: If the login flow fails; nothing is stored.
        """
        session = await self._authenticator.login(username, password, local_id=local_id)
        return session.local_id

    def is_authenticated(self, handle: str) -> bool:
        """Whether the handle maps to a stored session. Makes no remote call."""
        session = self._session_store.get(handle) if handle else None
        return session is not None and session.is_usable

    async def check_session(self, handle: str, timeout: float | None = None) -> bool:
        """Ask the remote site whether the session is still logged in.

        A session the site no longer recognizes is removed from the store. A
        failed check keeps it.

        Raises:
            TransportFailureError: On timeout, connection failure, or an error
                status from the site.
        """
        session = self._session_store.get(handle) if handle else None
        if session is None:
            return False
        if await self._authenticator.verify(session, timeout=timeout):
            return True
        self._expire(handle)
        return False

    def get_stations(self) -> list[Station]:
        """Return the fixed station catalog. Needs no session."""
        return self._station_repository.get_stations()

    async def get_available_dates(
        self,
        handle: str,
        departure_code: str,
        arrival_code: str,
        from_date: date,
        timeout: float | None = None,
    ) -> list[DateAvailability]:
        """Report bookability of each date in the window starting at from_date.

        Dates whose lookup failed come back as not bookable instead of
        failing the call.

        Raises:
            NotAuthenticatedError: Unknown handle; no remote call was made.
            SessionExpiredError: The site ended the session; it was removed.
        """
        session = self._resolve(handle)
        try:
            return await self._schedule_repository.get_available_dates(
                session, departure_code, arrival_code, from_date, timeout=timeout
            )
        except SessionExpiredError:
            self._expire(handle)
            raise

    async def search_trains(
        self,
        handle: str,
        departure_code: str,
        arrival_code: str,
        travel_date: date,
        departure_time: time | None = None,
        timeout: float | None = None,
    ) -> list[Train]:
        """Search trains for a route and date, from departure_time onwards.

        Without a departure time the search covers the whole day. timeout
        bounds the remote call and defaults to the configured one.

        Rows the site returned in an unparsable shape are left out.

        Raises:
            NotAuthenticatedError: Unknown handle; no remote call was made.
            SessionExpiredError: The site ended the session; it was removed.
            TransportFailureError: On timeout or connection failure.
            QueryError: The site rejected the search or answered unexpectedly.
        """
        session = self._resolve(handle)
        try:
            return await self._schedule_repository.search_trains(
                session,
                departure_code,
                arrival_code,
                travel_date,
                departure_time,
                timeout=timeout,
            )
        except SessionExpiredError:
            self._expire(handle)
            raise

    async def logout(self, handle: str) -> None:
        """End the session. Calling it again, or with an unknown handle, is a no-op.

        The local session is dropped first; the remote logout is best effort.
        """
        session = self._session_store.get(handle) if handle else None
        if session is None:
            return

        self._session_store.remove(handle)
        try:
            await self._authenticator.logout(session)
        except DispatchError as e:
            logger.warning(f"Remote logout for {handle[:8]}... did not complete: {e}")
