"""Train domain model."""

from dataclasses import dataclass
from datetime import time

AVAILABLE_TEXT = "예약가능"


@dataclass(frozen=True)
class Train:
    """A single train returned by a schedule search."""

    train_number: str
    departure_time: time
    arrival_time: time
    departure_station_name: str
    arrival_station_name: str
    duration_minutes: int
    special_seat_availability: str
    normal_seat_availability: str
    reservation_availability: str
    special_fare: int
    normal_fare: int

    def has_special_seat(self) -> bool:
        return AVAILABLE_TEXT in self.special_seat_availability

    def has_normal_seat(self) -> bool:
        return AVAILABLE_TEXT in self.normal_seat_availability

    def is_bookable(self) -> bool:
        """True when any seat class or the reservation text shows availability."""
        return (
            self.has_special_seat()
            or self.has_normal_seat()
            or AVAILABLE_TEXT in self.reservation_availability
        )
