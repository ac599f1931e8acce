"""Shared fixtures wiring a real TicketingClient to the stub SRT site."""

from collections.abc import AsyncIterator

import aiohttp
import pytest
import pytest_asyncio
from aiohttp.test_utils import TestServer

from srt_booking.adapters.config import AppConfig
from srt_booking.application import TicketingClient
from srt_booking.bootstrap import build_ticketing_client, create_http_session
from tests.srt_stub import StubSrtSite


@pytest.fixture
def srt_site() -> StubSrtSite:
    return StubSrtSite()


@pytest_asyncio.fixture
async def srt_server(srt_site: StubSrtSite) -> AsyncIterator[TestServer]:
    server = TestServer(srt_site.build_app())
    await server.start_server()
    yield server
    await server.close()


@pytest.fixture
def srt_config(srt_server: TestServer) -> AppConfig:
    return AppConfig(
        srt_base_url=f"http://{srt_server.host}:{srt_server.port}",
        request_timeout_seconds=2.0,
    )


@pytest_asyncio.fixture
async def http_session() -> AsyncIterator[aiohttp.ClientSession]:
    async with create_http_session() as session:
        yield session


@pytest.fixture
def ticketing_client(
    srt_config: AppConfig, http_session: aiohttp.ClientSession
) -> TicketingClient:
    return build_ticketing_client(srt_config, http_session)
