"""JSON HTTP API over the booking service (Starlette).

The session handle travels in the ``X-Session-Handle`` header. Storing it in
a browser cookie is up to the front end.
"""

import logging
from datetime import date, datetime, time
from typing import Any

from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.routing import Route

from srt_booking.adapters.json_format import availability_to_json, station_to_json, train_to_json
from srt_booking.adapters.web.rate_limit_middleware import RateLimitMiddleware
from srt_booking.domain.errors import (
    AuthTransportError,
    InvalidCredentialsError,
    NoInitialSessionError,
    NotAuthenticatedError,
    QueryError,
    SessionExpiredError,
    TicketingError,
    TransportFailureError,
    VerificationFailedError,
)
from srt_booking.domain.models import ErrorDetails
from srt_booking.domain.ports import BookingService

logger = logging.getLogger(__name__)

SESSION_HEADER = "X-Session-Handle"

MSG_LOGIN_REQUIRED = "로그인이 필요합니다."
MSG_SESSION_EXPIRED = "세션이 만료되었습니다. 다시 로그인해주세요."
MSG_CREDENTIALS_REQUIRED = "아이디와 비밀번호를 입력해주세요"
MSG_MISSING_FIELDS = "필수 정보가 누락되었습니다."
MSG_VERIFICATION_FAILED = "로그인 확인에 실패했습니다. 다시 시도해주세요."
MSG_UPSTREAM_UNAVAILABLE = "SRT 서버와 통신하지 못했습니다. 잠시 후 다시 시도해주세요."


class BadRequestError(ValueError):
    """Raised for malformed API input."""


def error_response(status_code: int, reason: str) -> JSONResponse:
    details = ErrorDetails(status_code=status_code, reason=reason)
    return JSONResponse({"error": details.model_dump()}, status_code=status_code)


def _status_and_reason(error: TicketingError) -> tuple[int, str]:
    """Map a domain error to an HTTP status and a user-facing message."""
    if isinstance(error, NotAuthenticatedError):
        return 401, MSG_LOGIN_REQUIRED
    if isinstance(error, SessionExpiredError):
        return 401, MSG_SESSION_EXPIRED
    if isinstance(error, InvalidCredentialsError):
        return 401, error.message
    if isinstance(error, VerificationFailedError):
        return 401, MSG_VERIFICATION_FAILED
    if isinstance(error, (NoInitialSessionError, AuthTransportError, TransportFailureError)):
        return 502, MSG_UPSTREAM_UNAVAILABLE
    if isinstance(error, QueryError):
        return 502, error.message
    return 500, error.message


async def handle_ticketing_error(_request: Request, exc: TicketingError) -> Response:
    status_code, reason = _status_and_reason(exc)
    logger.info(f"Request failed with {exc.code.value} ({status_code})")
    return error_response(status_code, reason)


async def handle_bad_request(_request: Request, exc: Exception) -> Response:
    return error_response(400, str(exc))


def parse_date(value: str | None, field: str) -> date:
    """Parse a YYYYMMDD date."""
    if not value:
        raise BadRequestError(MSG_MISSING_FIELDS)
    try:
        return datetime.strptime(value, "%Y%m%d").date()
    except ValueError as e:
        raise BadRequestError(f"{field} must be YYYYMMDD") from e


def parse_time(value: str | None) -> time | None:
    """Parse HH, HHMM or HHMMSS. Empty means from midnight."""
    if not value:
        return None
    formats = {2: "%H", 4: "%H%M", 6: "%H%M%S"}
    fmt = formats.get(len(value))
    try:
        if fmt is None:
            raise ValueError(value)
        return datetime.strptime(value, fmt).time()
    except ValueError as e:
        raise BadRequestError("time must be HH, HHMM or HHMMSS") from e


async def _read_payload(request: Request) -> dict[str, Any]:
    """Read a JSON object body."""
    try:
        payload = await request.json()
    except ValueError as e:
        raise BadRequestError("Body is not valid JSON") from e
    if not isinstance(payload, dict):
        raise BadRequestError("Body must be a JSON object")
    return payload


def _session_handle(request: Request) -> str:
    return request.headers.get(SESSION_HEADER, "")


class BookingApi:
    """Route handlers bound to one booking service."""

    def __init__(self, service: BookingService) -> None:
        self._service = service

    async def login(self, request: Request) -> Response:
        payload = await _read_payload(request)
        username = str(payload.get("username") or "").strip()
        password = str(payload.get("password") or "")
        if not username or not password:
            raise BadRequestError(MSG_CREDENTIALS_REQUIRED)

        handle = await self._service.login(username, password)
        return JSONResponse({"sessionHandle": handle})

    async def session(self, request: Request) -> Response:
        handle = _session_handle(request)
        return JSONResponse({"authenticated": self._service.is_authenticated(handle)})

    async def stations(self, _request: Request) -> Response:
        stations = self._service.get_stations()
        return JSONResponse({"stations": [station_to_json(s) for s in stations]})

    async def dates(self, request: Request) -> Response:
        params = request.query_params
        departure = params.get("dep")
        arrival = params.get("arr")
        if not departure or not arrival:
            raise BadRequestError(MSG_MISSING_FIELDS)
        from_param = params.get("from")
        from_date = parse_date(from_param, "from") if from_param else date.today()

        availability = await self._service.get_available_dates(
            _session_handle(request), departure, arrival, from_date
        )
        return JSONResponse({"availableDates": [availability_to_json(a) for a in availability]})

    async def trains(self, request: Request) -> Response:
        payload = await _read_payload(request)
        departure = payload.get("departureStation")
        arrival = payload.get("arrivalStation")
        if not departure or not arrival:
            raise BadRequestError(MSG_MISSING_FIELDS)
        travel_date = parse_date(str(payload.get("date") or ""), "date")
        departure_time = parse_time(str(payload.get("time") or ""))

        trains = await self._service.search_trains(
            _session_handle(request), str(departure), str(arrival), travel_date, departure_time
        )
        return JSONResponse({"trains": [train_to_json(t) for t in trains]})

    async def logout(self, request: Request) -> Response:
        await self._service.logout(_session_handle(request))
        return Response(status_code=204)


async def healthz(_request: Request) -> Response:
    """Health check endpoint for load balancers and monitoring."""
    return JSONResponse({"status": "ok"})


def create_api_app(service: BookingService, rate_limit_per_minute: int | None = None) -> Starlette:
    """Create the Starlette application for a booking service.

    Args:
        service: Booking service the routes delegate to.
        rate_limit_per_minute: Per-IP request quota. None disables rate limiting.
    """
    api = BookingApi(service)
    routes = [
        Route("/api/srt/login", api.login, methods=["POST"]),
        Route("/api/srt/session", api.session, methods=["GET"]),
        Route("/api/srt/stations", api.stations, methods=["GET"]),
        Route("/api/srt/dates", api.dates, methods=["GET"]),
        Route("/api/srt/trains", api.trains, methods=["POST"]),
        Route("/api/srt/logout", api.logout, methods=["POST"]),
        Route("/healthz", healthz, methods=["GET"]),
    ]
    middleware = []
    if rate_limit_per_minute is not None:
        middleware.append(
            Middleware(RateLimitMiddleware, requests_per_minute=rate_limit_per_minute)
        )

    return Starlette(
        routes=routes,
        middleware=middleware,
        exception_handlers={
            TicketingError: handle_ticketing_error,
            BadRequestError: handle_bad_request,
        },
    )
