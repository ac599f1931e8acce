"""JSON shapes of domain objects, shared by the web API and the CLI."""

from typing import Any

from srt_booking.domain.models import DateAvailability, Station, Train


def station_to_json(station: Station) -> dict[str, str]:
    return {"code": station.code, "name": station.name}


def availability_to_json(availability: DateAvailability) -> dict[str, Any]:
    return {
        "date": availability.date.strftime("%Y%m%d"),
        "isBookable": availability.is_bookable,
    }


def train_to_json(train: Train) -> dict[str, Any]:
    """Serialize a train with times as HH:MM and fares in won."""
    return {
        "trainNumber": train.train_number,
        "departureTime": train.departure_time.strftime("%H:%M"),
        "arrivalTime": train.arrival_time.strftime("%H:%M"),
        "departureStation": train.departure_station_name,
        "arrivalStation": train.arrival_station_name,
        "durationMinutes": train.duration_minutes,
        "specialSeatStatus": train.special_seat_availability,
        "normalSeatStatus": train.normal_seat_availability,
        "reservationStatus": train.reservation_availability,
        "price": {"special": train.special_fare, "normal": train.normal_fare},
    }
