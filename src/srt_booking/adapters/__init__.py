"""Adapters layer - external system integrations."""

from srt_booking.adapters.config import AppConfig
from srt_booking.adapters.session_store import InMemorySessionStore
from srt_booking.adapters.srt_api import (
    SrtLoginFlow,
    SrtRequestDispatcher,
    SrtScheduleRepository,
)
from srt_booking.adapters.station_catalog import StaticStationRepository

__all__ = [
    "AppConfig",
    "InMemorySessionStore",
    "SrtLoginFlow",
    "SrtRequestDispatcher",
    "SrtScheduleRepository",
    "StaticStationRepository",
]
