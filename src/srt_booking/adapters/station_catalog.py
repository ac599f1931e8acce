"""Fixed SRT station catalog.

This list is authoritative for the client. It is not a cache and is never
refreshed from the remote site.
"""

from srt_booking.domain.models.station import Station
from srt_booking.domain.ports.station_repository import StationRepository

SRT_STATIONS: tuple[Station, ...] = (
    Station(code="0551", name="수서"),
    Station(code="0552", name="동탄"),
    Station(code="0553", name="평택지제"),
    Station(code="0502", name="천안아산"),
    Station(code="0297", name="오송"),
    Station(code="0010", name="대전"),
    Station(code="0015", name="동대구"),
    Station(code="0507", name="신경주"),
    Station(code="0020", name="울산"),
    Station(code="0025", name="부산"),
    Station(code="0508", name="광주송정"),
    Station(code="0509", name="목포"),
)


class StaticStationRepository(StationRepository):
    """Station repository backed by the fixed catalog. Makes no network calls."""

    def __init__(self, stations: tuple[Station, ...] = SRT_STATIONS) -> None:
        self._stations = stations
        self._by_code = {station.code: station for station in stations}

    def get_stations(self) -> list[Station]:
        return list(self._stations)

    def find_by_code(self, code: str) -> Station | None:
        return self._by_code.get(code)
