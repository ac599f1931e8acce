"""Explicit wiring of the ticketing client from configuration."""

import aiohttp

from srt_booking.adapters.api_rate_limiter import ApiRateLimiter
from srt_booking.adapters.config import AppConfig
from srt_booking.adapters.session_store import InMemorySessionStore
from srt_booking.adapters.srt_api import (
    SrtHttpClient,
    SrtLoginFlow,
    SrtRequestDispatcher,
    SrtScheduleRepository,
)
from srt_booking.adapters.station_catalog import StaticStationRepository
from srt_booking.application import TicketingClient


def create_http_session() -> aiohttp.ClientSession:
    """Create the shared aiohttp session.

    Cookies are never stored in the session: each request carries the
    cookie of the user it acts for.
    """
    return aiohttp.ClientSession(cookie_jar=aiohttp.DummyCookieJar())


def build_ticketing_client(
    config: AppConfig, http_session: aiohttp.ClientSession
) -> TicketingClient:
    """Build a TicketingClient that owns its own session store."""
    http_client = SrtHttpClient(
        http_session,
        base_url=config.srt_base_url,
        timeout_seconds=config.request_timeout_seconds,
        rate_limiter=ApiRateLimiter("srt", config.upstream_min_delay_seconds),
    )
    dispatcher = SrtRequestDispatcher(http_client)
    session_store = InMemorySessionStore()

    return TicketingClient(
        session_store=session_store,
        authenticator=SrtLoginFlow(http_client, dispatcher, session_store),
        schedule_repository=SrtScheduleRepository(
            dispatcher,
            date_window_days=config.date_window_days,
            date_query_concurrency=config.date_query_concurrency,
        ),
        station_repository=StaticStationRepository(),
    )
