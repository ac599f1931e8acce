"""Tests for domain models."""

import dataclasses
from datetime import datetime, time, timezone

import pytest

from srt_booking.domain.errors import (
    ErrorCode,
    InvalidCredentialsError,
    NotAuthenticatedError,
    TicketingError,
)
from srt_booking.domain.models import ErrorDetails, Session, Station, Train


def make_train(special: str = "매진", normal: str = "매진", reservation: str = "매진") -> Train:
    return Train(
        train_number="301",
        departure_time=time(5, 30),
        arrival_time=time(8, 1),
        departure_station_name="수서",
        arrival_station_name="부산",
        duration_minutes=151,
        special_seat_availability=special,
        normal_seat_availability=normal,
        reservation_availability=reservation,
        special_fare=77400,
        normal_fare=52600,
    )


def test_station_creation() -> None:
    """Given station data, when creating a Station, then all fields are set correctly."""
    station = Station(code="0551", name="수서")

    assert station.code == "0551"
    assert station.name == "수서"


def test_session_is_immutable() -> None:
    session = Session("local", "token", "user", datetime(2025, 3, 1, tzinfo=timezone.utc))

    with pytest.raises(dataclasses.FrozenInstanceError):
        session.upstream_token = "other"  # type: ignore[misc]


def test_session_without_token_is_not_usable() -> None:
    """Given an empty upstream token, when checking, then the session is not usable."""
    created = datetime(2025, 3, 1, tzinfo=timezone.utc)

    assert Session("local", "token", "user", created).is_usable is True
    assert Session("local", "", "user", created).is_usable is False


def test_sold_out_train_is_not_bookable() -> None:
    train = make_train()

    assert train.is_bookable() is False
    assert train.has_special_seat() is False
    assert train.has_normal_seat() is False


def test_train_with_normal_seat_is_bookable() -> None:
    """Given only normal seats available, when checking, then the train is bookable."""
    train = make_train(normal="예약가능")

    assert train.has_normal_seat() is True
    assert train.is_bookable() is True


def test_train_with_reservation_text_is_bookable() -> None:
    assert make_train(reservation="예약가능").is_bookable() is True


def test_error_details_serializes_for_json() -> None:
    details = ErrorDetails(status_code=401, reason="로그인이 필요합니다.")

    assert details.model_dump() == {"status_code": 401, "reason": "로그인이 필요합니다."}


def test_ticketing_errors_carry_code_and_message() -> None:
    """Given domain errors, when formatting, then code and message are included."""
    error = InvalidCredentialsError("비밀번호 오류")

    assert isinstance(error, TicketingError)
    assert error.code is ErrorCode.INVALID_CREDENTIALS
    assert str(error) == "INVALID_CREDENTIALS: 비밀번호 오류"
    assert NotAuthenticatedError().code is ErrorCode.NOT_AUTHENTICATED
