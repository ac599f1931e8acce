"""Domain models for SRT booking."""

from srt_booking.domain.models.date_availability import DateAvailability
from srt_booking.domain.models.error_details import ErrorDetails
from srt_booking.domain.models.session import Session
from srt_booking.domain.models.station import Station
from srt_booking.domain.models.train import Train

__all__ = [
    "DateAvailability",
    "ErrorDetails",
    "Session",
    "Station",
    "Train",
]
