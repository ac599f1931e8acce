"""Per-IP rate limiting for the booking API, using throttled-py."""

import logging
from collections.abc import Awaitable, Callable
from typing import Any

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from throttled import RateLimiterType, Throttled, rate_limiter, store

from srt_booking.domain.models import ErrorDetails

logger = logging.getLogger(__name__)

# Paths never counted against the quota.
EXEMPT_PATHS = frozenset({"/healthz"})

MSG_TOO_MANY_REQUESTS = "요청이 너무 많습니다. 잠시 후 다시 시도해주세요."


def extract_client_ip(request: Request) -> str:
    """Extract client IP address from request, supporting X-Forwarded-For header.

    X-Forwarded-For may hold a chain ("client, proxy1, proxy2"); the first
    entry is the original client.
    """
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        client_ip = forwarded_for.split(",")[0].strip()
        if client_ip:
            return client_ip

    if request.client and request.client.host:
        return request.client.host

    logger.warning("Could not determine client IP, using 'unknown'")
    return "unknown"


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Middleware to enforce rate limiting per IP address.

    Every login or search fans out into requests to the SRT site, so the
    quota also bounds how hard one client can drive the upstream.
    """

    def __init__(
        self,
        app: Callable,
        requests_per_minute: int = 100,
    ) -> None:
        """Initialize rate limiting middleware.

        Args:
            app: The ASGI application to wrap.
            requests_per_minute: Maximum number of requests allowed per IP per minute.
                Zero or less disables the limit.
        """
        super().__init__(app)
        self.requests_per_minute = requests_per_minute
        self.quota = None
        self.bucket_store = store.MemoryStore()
        if requests_per_minute > 0:
            self.quota = rate_limiter.per_min(requests_per_minute, burst=requests_per_minute)
            logger.info(f"API rate limit: {requests_per_minute} requests per minute per client")
        else:
            logger.info("API rate limit disabled")

    def _extract_retry_after(self, result: Any) -> float:
        """Read retry_after from a throttled-py result, defaulting to one minute."""
        for source in (getattr(result, "state", None), result):
            if source is not None and hasattr(source, "retry_after"):
                return float(source.retry_after)
        return 60.0

    def _create_rate_limit_response(self, client_ip: str, retry_after: float) -> Response:
        logger.warning(f"Client {client_ip} over the API rate limit, retry in {retry_after:.1f}s")
        details = ErrorDetails(status_code=429, reason=MSG_TOO_MANY_REQUESTS)
        return JSONResponse(
            {"error": details.model_dump()},
            status_code=429,
            headers={"Retry-After": str(max(1, int(retry_after)))},
        )

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        if self.quota is None or request.url.path in EXEMPT_PATHS:
            return await call_next(request)

        client_ip = extract_client_ip(request)
        result = Throttled(
            key=f"api:{client_ip}",
            using=RateLimiterType.TOKEN_BUCKET.value,
            quota=self.quota,
            store=self.bucket_store,
        ).limit()
        if result.limited:
            return self._create_rate_limit_response(client_ip, self._extract_retry_after(result))

        response: Response = await call_next(request)
        return response
