"""Parser for SRT schedule search responses.

The search endpoint answers with JSON shaped like::

    {"outDataSets": {"dsOutput0": [{"strResult": "SUCC", ...}],
                     "dsOutput1": [{"stlbTrnNo": "301", ...}, ...]}}

Each row is mapped field by field to a Train. A row that lacks a field or
carries an unparsable number or time is dropped rather than filled with a
default; the number of dropped rows is logged.
"""

import json
import logging
from datetime import time
from typing import Any

from srt_booking.adapters.srt_api.signals import extract_alert_message
from srt_booking.domain.errors import ResponseParseError, UpstreamError
from srt_booking.domain.models.train import Train

logger = logging.getLogger(__name__)

RESULT_FAIL = "FAIL"

# Train field -> remote field
TRAIN_FIELD_SOURCES: dict[str, str] = {
    "train_number": "stlbTrnNo",
    "departure_time": "dptTm",
    "arrival_time": "arvTm",
    "departure_station_name": "dptRsStnNm",
    "arrival_station_name": "arvRsStnNm",
    "duration_minutes": "reqTime",
    "special_seat_availability": "sprmRsvPsbStr",
    "normal_seat_availability": "gnrmRsvPsbStr",
    "reservation_availability": "rsvPsbStr",
    "special_fare": "sprmRsvPrc",
    "normal_fare": "gnrmRsvPrc",
}


class RowParseError(ValueError):
    """A single schedule row could not be mapped to a Train."""


def _require(row: dict[str, Any], remote_field: str) -> str:
    value = row.get(remote_field)
    if value is None:
        raise RowParseError(f"missing {remote_field}")
    text = str(value).strip()
    if not text:
        raise RowParseError(f"empty {remote_field}")
    return text


def _parse_hhmmss(row: dict[str, Any], remote_field: str) -> time:
    text = _require(row, remote_field)
    if len(text) != 6 or not text.isdigit():
        raise RowParseError(f"bad time in {remote_field}: {text!r}")
    try:
        return time(int(text[:2]), int(text[2:4]), int(text[4:]))
    except ValueError as e:
        raise RowParseError(f"bad time in {remote_field}: {text!r}") from e


def _parse_duration_minutes(row: dict[str, Any], remote_field: str) -> int:
    """Parse an HHMM duration into minutes."""
    text = _require(row, remote_field)
    if len(text) != 4 or not text.isdigit():
        raise RowParseError(f"bad duration in {remote_field}: {text!r}")
    hours, minutes = int(text[:2]), int(text[2:])
    if minutes >= 60:
        raise RowParseError(f"bad duration in {remote_field}: {text!r}")
    return hours * 60 + minutes


def _parse_amount(row: dict[str, Any], remote_field: str) -> int:
    text = _require(row, remote_field).replace(",", "")
    if not text.isdigit():
        raise RowParseError(f"bad amount in {remote_field}: {text!r}")
    return int(text)


def parse_train(row: dict[str, Any]) -> Train:
    """Map one remote schedule row to a Train.

    Raises:
        RowParseError: If any field is missing or unparsable.
    """
    if not isinstance(row, dict):
        raise RowParseError("row is not an object")

    sources = TRAIN_FIELD_SOURCES
    return Train(
        train_number=_require(row, sources["train_number"]),
        departure_time=_parse_hhmmss(row, sources["departure_time"]),
        arrival_time=_parse_hhmmss(row, sources["arrival_time"]),
        departure_station_name=_require(row, sources["departure_station_name"]),
        arrival_station_name=_require(row, sources["arrival_station_name"]),
        duration_minutes=_parse_duration_minutes(row, sources["duration_minutes"]),
        special_seat_availability=_require(row, sources["special_seat_availability"]),
        normal_seat_availability=_require(row, sources["normal_seat_availability"]),
        reservation_availability=_require(row, sources["reservation_availability"]),
        special_fare=_parse_amount(row, sources["special_fare"]),
        normal_fare=_parse_amount(row, sources["normal_fare"]),
    )


def _result_status(data: dict[str, Any]) -> dict[str, Any] | None:
    """Find the status row, either ``resultMap[0]`` or ``outDataSets.dsOutput0[0]``."""
    result_map = data.get("resultMap")
    if isinstance(result_map, list) and result_map and isinstance(result_map[0], dict):
        return result_map[0]

    out_data_sets = data.get("outDataSets")
    if isinstance(out_data_sets, dict):
        status_rows = out_data_sets.get("dsOutput0")
        if isinstance(status_rows, list) and status_rows and isinstance(status_rows[0], dict):
            return status_rows[0]
    return None


def _load_json(body: str) -> dict[str, Any]:
    try:
        data = json.loads(body)
    except ValueError:
        # HTML answer: the site reports query errors as an inline alert.
        message = extract_alert_message(body)
        if message:
            raise UpstreamError(message) from None
        raise ResponseParseError("Schedule response is not JSON") from None

    if not isinstance(data, dict):
        raise ResponseParseError("Schedule response is not a JSON object")
    return data


def parse_schedule_response(body: str) -> list[Train]:
    """Parse a schedule search body into trains.

    Raises:
        UpstreamError: If the site reports a failed search.
        ResponseParseError: If the body is neither the expected JSON nor an
            HTML alert.
    """
    data = _load_json(body)

    status = _result_status(data)
    if status is not None and status.get("strResult") == RESULT_FAIL:
        raise UpstreamError(str(status.get("msgTxt") or "Schedule search failed"))

    out_data_sets = data.get("outDataSets")
    if not isinstance(out_data_sets, dict):
        return []
    rows = out_data_sets.get("dsOutput1")
    if not rows:
        return []
    if not isinstance(rows, list):
        raise ResponseParseError("dsOutput1 is not a list")

    trains: list[Train] = []
    dropped = 0
    for row in rows:
        try:
            trains.append(parse_train(row))
        except RowParseError as e:
            dropped += 1
            logger.debug(f"Dropping schedule row: {e}")

    if dropped:
        logger.warning(f"Dropped {dropped} of {len(rows)} schedule row(s) that failed to parse")
    return trains
