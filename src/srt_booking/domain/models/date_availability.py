"""Date availability domain model."""

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class DateAvailability:
    """Whether a travel date has bookable trains."""

    date: date
    is_bookable: bool
