"""Ports (interfaces) for the ports-and-adapters architecture."""

from srt_booking.domain.ports.authenticator import Authenticator
from srt_booking.domain.ports.booking_service import BookingService
from srt_booking.domain.ports.schedule_repository import ScheduleRepository
from srt_booking.domain.ports.session_store import SessionStore
from srt_booking.domain.ports.station_repository import StationRepository

__all__ = [
    "Authenticator",
    "BookingService",
    "ScheduleRepository",
    "SessionStore",
    "StationRepository",
]
