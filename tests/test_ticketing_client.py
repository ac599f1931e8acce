"""End-to-end tests for TicketingClient against the stub SRT site."""

from datetime import date, time, timedelta

import aiohttp
import pytest
from aiohttp.test_utils import TestServer

from srt_booking.adapters.config import AppConfig
from srt_booking.application import TicketingClient
from srt_booking.bootstrap import build_ticketing_client
from srt_booking.domain.errors import (
    InvalidCredentialsError,
    NotAuthenticatedError,
    SessionExpiredError,
    TransportFailureError,
)
from tests.srt_stub import VALID_PASSWORD, VALID_USERNAME, StubSrtSite, make_row

SEARCH_PATH = "/hpg/contents/search/list.do"


class TestLogin:
    """Tests for login and local session checks."""

    @pytest.mark.asyncio
    async def test_login_makes_handle_authenticated(
        self, ticketing_client: TicketingClient
    ) -> None:
        """Given valid credentials, when logging in, then the handle is authenticated."""
        handle = await ticketing_client.login(VALID_USERNAME, VALID_PASSWORD)

        assert handle
        assert ticketing_client.is_authenticated(handle) is True

    @pytest.mark.asyncio
    async def test_invalid_credentials_store_nothing(
        self, ticketing_client: TicketingClient
    ) -> None:
        """Given a wrong password, when logging in, then no session is stored."""
        with pytest.raises(InvalidCredentialsError):
            await ticketing_client.login(VALID_USERNAME, "wrong")

        assert len(ticketing_client._session_store) == 0

    @pytest.mark.asyncio
    async def test_is_authenticated_makes_no_remote_call(
        self, ticketing_client: TicketingClient, srt_site: StubSrtSite
    ) -> None:
        """Given a logged-in handle, when checking authentication, then the site is not contacted."""
        handle = await ticketing_client.login(VALID_USERNAME, VALID_PASSWORD)
        calls_before = len(srt_site.requests)

        assert ticketing_client.is_authenticated(handle) is True
        assert ticketing_client.is_authenticated("unknown") is False
        assert len(srt_site.requests) == calls_before

    @pytest.mark.asyncio
    async def test_check_session_removes_session_ended_upstream(
        self, ticketing_client: TicketingClient, srt_site: StubSrtSite
    ) -> None:
        """Given a session the site has ended, when checking it remotely, then it is dropped."""
        handle = await ticketing_client.login(VALID_USERNAME, VALID_PASSWORD)
        assert await ticketing_client.check_session(handle) is True

        srt_site.expire_all_sessions()

        assert await ticketing_client.check_session(handle) is False
        assert ticketing_client.is_authenticated(handle) is False

    @pytest.mark.asyncio
    async def test_check_session_keeps_session_on_error_status(
        self, ticketing_client: TicketingClient, srt_site: StubSrtSite
    ) -> None:
        """Given the site answers 503, when checking the session, then the check fails and the session is kept."""
        handle = await ticketing_client.login(VALID_USERNAME, VALID_PASSWORD)
        srt_site.main_page_status = 503

        with pytest.raises(TransportFailureError):
            await ticketing_client.check_session(handle)

        assert ticketing_client.is_authenticated(handle) is True
        srt_site.main_page_status = 200
        assert await ticketing_client.check_session(handle) is True

    @pytest.mark.asyncio
    async def test_failed_relogin_drops_handle(self, ticketing_client: TicketingClient) -> None:
        handle = await ticketing_client.login(VALID_USERNAME, VALID_PASSWORD, local_id="h1")

        with pytest.raises(InvalidCredentialsError):
            await ticketing_client.login(VALID_USERNAME, "wrong", local_id=handle)

        assert ticketing_client.is_authenticated(handle) is False


class TestLogout:
    """Tests for logout."""

    @pytest.mark.asyncio
    async def test_logout_is_idempotent(
        self, ticketing_client: TicketingClient, srt_site: StubSrtSite
    ) -> None:
        """Given a session, when logging out twice, then the second call is a no-op."""
        handle = await ticketing_client.login(VALID_USERNAME, VALID_PASSWORD)

        await ticketing_client.logout(handle)
        await ticketing_client.logout(handle)

        assert srt_site.logouts == 1
        assert ticketing_client.is_authenticated(handle) is False

    @pytest.mark.asyncio
    async def test_query_after_logout_raises_not_authenticated(
        self, ticketing_client: TicketingClient, srt_site: StubSrtSite
    ) -> None:
        """Given a logged-out handle, when searching, then NotAuthenticated is raised locally."""
        handle = await ticketing_client.login(VALID_USERNAME, VALID_PASSWORD)
        await ticketing_client.logout(handle)

        with pytest.raises(NotAuthenticatedError):
            await ticketing_client.search_trains(handle, "0551", "0020", date(2025, 3, 1))

        assert srt_site.requests_to(SEARCH_PATH) == []

    @pytest.mark.asyncio
    async def test_logout_succeeds_locally_when_site_unreachable(
        self, srt_config: AppConfig, http_session: aiohttp.ClientSession, srt_server: TestServer
    ) -> None:
        """Given the site goes away, when logging out, then the local session is still dropped."""
        client = build_ticketing_client(srt_config, http_session)
        handle = await client.login(VALID_USERNAME, VALID_PASSWORD)

        await srt_server.close()
        await client.logout(handle)

        assert client.is_authenticated(handle) is False


class TestSearchTrains:
    """Tests for train searches."""

    @pytest.mark.asyncio
    async def test_search_returns_parsed_trains(
        self, ticketing_client: TicketingClient, srt_site: StubSrtSite
    ) -> None:
        """Given a logged-in session, when searching, then trains are parsed from the response."""
        srt_site.rows = [make_row("301"), make_row("303", departure_time="060000")]
        handle = await ticketing_client.login(VALID_USERNAME, VALID_PASSWORD)

        trains = await ticketing_client.search_trains(
            handle, "0551", "0020", date(2025, 3, 1), time(5, 0)
        )

        assert [t.train_number for t in trains] == ["301", "303"]
        assert trains[0].special_fare == 77400
        assert trains[0].duration_minutes == 151
        form = srt_site.requests_to(SEARCH_PATH)[0].form
        assert form["dptRsStnCd"] == "0551"
        assert form["arvRsStnCd"] == "0020"
        assert form["dptDt"] == "20250301"
        assert form["dptTm"] == "050000"

    @pytest.mark.asyncio
    async def test_search_defaults_to_midnight(
        self, ticketing_client: TicketingClient, srt_site: StubSrtSite
    ) -> None:
        """Given no departure time, when searching, then the search starts at 000000."""
        handle = await ticketing_client.login(VALID_USERNAME, VALID_PASSWORD)

        await ticketing_client.search_trains(handle, "0551", "0020", date(2025, 3, 1))

        assert srt_site.requests_to(SEARCH_PATH)[0].form["dptTm"] == "000000"

    @pytest.mark.asyncio
    async def test_row_with_non_numeric_fare_is_dropped(
        self, ticketing_client: TicketingClient, srt_site: StubSrtSite
    ) -> None:
        """Given one row with a non-numeric fare, when searching, then only that row is left out."""
        srt_site.rows = [make_row("301"), make_row("303", special_fare="매진")]
        handle = await ticketing_client.login(VALID_USERNAME, VALID_PASSWORD)

        trains = await ticketing_client.search_trains(handle, "0551", "0020", date(2025, 3, 1))

        assert [t.train_number for t in trains] == ["301"]

    @pytest.mark.asyncio
    async def test_expired_session_is_removed(
        self, ticketing_client: TicketingClient, srt_site: StubSrtSite
    ) -> None:
        """Given the site reports login required, when searching, then SessionExpired is raised and the session removed."""
        handle = await ticketing_client.login(VALID_USERNAME, VALID_PASSWORD)
        srt_site.expire_all_sessions()

        with pytest.raises(SessionExpiredError):
            await ticketing_client.search_trains(handle, "0551", "0020", date(2025, 3, 1))

        assert ticketing_client.is_authenticated(handle) is False
        with pytest.raises(NotAuthenticatedError):
            await ticketing_client.search_trains(handle, "0551", "0020", date(2025, 3, 1))

    @pytest.mark.asyncio
    async def test_timeout_keeps_session(
        self, srt_config: AppConfig, http_session: aiohttp.ClientSession, srt_site: StubSrtSite
    ) -> None:
        """Given a slow site, when a search times out, then TransportFailure is raised and the session kept."""
        config = srt_config.model_copy(update={"request_timeout_seconds": 0.2})
        client = build_ticketing_client(config, http_session)
        handle = await client.login(VALID_USERNAME, VALID_PASSWORD)
        srt_site.search_delay_seconds = 1.0

        with pytest.raises(TransportFailureError):
            await client.search_trains(handle, "0551", "0020", date(2025, 3, 1))

        assert client.is_authenticated(handle) is True

    @pytest.mark.asyncio
    async def test_per_call_timeout_overrides_configured_one(
        self, ticketing_client: TicketingClient, srt_site: StubSrtSite
    ) -> None:
        """Given a 2s configured timeout and a slow site, when searching with timeout=0.2, then the call fails early."""
        handle = await ticketing_client.login(VALID_USERNAME, VALID_PASSWORD)
        srt_site.search_delay_seconds = 1.0

        with pytest.raises(TransportFailureError):
            await ticketing_client.search_trains(
                handle, "0551", "0020", date(2025, 3, 1), timeout=0.2
            )

        assert ticketing_client.is_authenticated(handle) is True


class TestAvailableDates:
    """Tests for the date-window scan."""

    @pytest.mark.asyncio
    async def test_failing_day_is_reported_unbookable(
        self, ticketing_client: TicketingClient, srt_site: StubSrtSite
    ) -> None:
        """Given one day whose search fails, when scanning 14 days, then 13 are bookable and 1 is not."""
        start = date(2025, 3, 1)
        failing_day = start + timedelta(days=5)
        srt_site.failing_dates = {failing_day.strftime("%Y%m%d")}
        handle = await ticketing_client.login(VALID_USERNAME, VALID_PASSWORD)

        availability = await ticketing_client.get_available_dates(handle, "0551", "0020", start)

        assert [a.date for a in availability] == [start + timedelta(days=i) for i in range(14)]
        assert sum(a.is_bookable for a in availability) == 13
        assert [a.date for a in availability if not a.is_bookable] == [failing_day]

    @pytest.mark.asyncio
    async def test_sold_out_day_is_not_bookable(
        self, ticketing_client: TicketingClient, srt_site: StubSrtSite
    ) -> None:
        """Given only sold-out trains, when scanning, then no date is bookable."""
        srt_site.rows = [make_row(special="매진", normal="매진", reservation="매진")]
        handle = await ticketing_client.login(VALID_USERNAME, VALID_PASSWORD)

        availability = await ticketing_client.get_available_dates(
            handle, "0551", "0020", date(2025, 3, 1)
        )

        assert len(availability) == 14
        assert not any(a.is_bookable for a in availability)

    @pytest.mark.asyncio
    async def test_expired_session_ends_scan(
        self, ticketing_client: TicketingClient, srt_site: StubSrtSite, srt_config: AppConfig
    ) -> None:
        """Given the session expired upstream, when scanning, then SessionExpired is raised without searching every date."""
        handle = await ticketing_client.login(VALID_USERNAME, VALID_PASSWORD)
        srt_site.expire_all_sessions()

        with pytest.raises(SessionExpiredError):
            await ticketing_client.get_available_dates(handle, "0551", "0020", date(2025, 3, 1))

        assert ticketing_client.is_authenticated(handle) is False
        assert len(srt_site.requests_to(SEARCH_PATH)) <= srt_config.date_query_concurrency


class TestStations:
    """Tests for the station catalog."""

    @pytest.mark.asyncio
    async def test_stations_need_no_session_or_network(
        self, ticketing_client: TicketingClient, srt_site: StubSrtSite
    ) -> None:
        """Given no login, when listing stations, then Suseo is included and nothing is sent."""
        stations = ticketing_client.get_stations()

        assert any(s.code == "0551" and s.name == "수서" for s in stations)
        assert srt_site.requests == []
