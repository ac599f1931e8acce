"""Domain layer - core business logic and models."""

from srt_booking.domain.models import (
    DateAvailability,
    Session,
    Station,
    Train,
)
from srt_booking.domain.ports import (
    Authenticator,
    ScheduleRepository,
    SessionStore,
    StationRepository,
)

__all__ = [
    "Authenticator",
    "DateAvailability",
    "ScheduleRepository",
    "Session",
    "SessionStore",
    "Station",
    "StationRepository",
    "Train",
]
