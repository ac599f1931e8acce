"""SRT ticketing site adapters."""

from srt_booking.adapters.srt_api.dispatcher import SrtRequestDispatcher
from srt_booking.adapters.srt_api.http_client import RawResponse, SrtHttpClient, UpstreamRequest
from srt_booking.adapters.srt_api.login_flow import SrtLoginFlow
from srt_booking.adapters.srt_api.schedule_repository import SrtScheduleRepository

__all__ = [
    "RawResponse",
    "SrtHttpClient",
    "SrtLoginFlow",
    "SrtRequestDispatcher",
    "SrtScheduleRepository",
    "UpstreamRequest",
]
