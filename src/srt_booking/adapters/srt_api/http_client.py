"""HTTP transport for the SRT ticketing site.

Sends one request with the shared browser header set and the caller's
session cookie, and turns aiohttp failures into TransportFailureError.
Classifying the body is left to the callers.
"""

import asyncio
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING

import aiohttp

from srt_booking.adapters.api_rate_limiter import ApiRateLimiter
from srt_booking.adapters.api_request_logger import log_api_request
from srt_booking.adapters.srt_api.constants import SESSION_COOKIE, SRT_BASE_URL, build_headers
from srt_booking.domain.errors import TransportFailureError

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from aiohttp import ClientResponse, ClientSession

DEFAULT_TIMEOUT_SECONDS = 10.0


@dataclass(frozen=True)
class UpstreamRequest:
    """One request to the remote site, relative to its base URL."""

    method: str
    path: str
    form: Mapping[str, str] | None = None
    params: Mapping[str, str] | None = None
    referer: str | None = None


@dataclass(frozen=True)
class RawResponse:
    """Body and metadata of a remote response.

    ``upstream_token`` is the session cookie the server set on this
    response (or a redirect leading to it), if any.
    """

    status: int
    text: str
    content_type: str
    url: str
    upstream_token: str | None = None


def _session_cookie(response: "ClientResponse") -> str | None:
    morsel = response.cookies.get(SESSION_COOKIE)
    if morsel is not None and morsel.value:
        return morsel.value
    return None


def _latest_session_cookie(response: "ClientResponse") -> str | None:
    """Return the last session cookie set along the redirect chain."""
    token = None
    for hop in (*response.history, response):
        token = _session_cookie(hop) or token
    return token


class SrtHttpClient:
    """HTTP client for the SRT site using a shared aiohttp session.

    The aiohttp session should use ``aiohttp.DummyCookieJar`` so that cookies
    of different users never mix; the session cookie is sent explicitly on
    every request instead.
    """

    def __init__(
        self,
        session: "ClientSession",
        base_url: str = SRT_BASE_URL,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        rate_limiter: ApiRateLimiter | None = None,
    ) -> None:
        self._session = session
        self._base_url = base_url.rstrip("/")
        self._timeout_seconds = timeout_seconds
        self._rate_limiter = rate_limiter or ApiRateLimiter("srt")

    @property
    def base_url(self) -> str:
        return self._base_url

    def url_for(self, path: str) -> str:
        return f"{self._base_url}{path}"

    def _build_request_headers(
        self, request: UpstreamRequest, upstream_token: str | None
    ) -> dict[str, str]:
        headers = build_headers(upstream_token)
        if request.referer:
            headers["Referer"] = self.url_for(request.referer)
            headers["Origin"] = self._base_url
        return headers

    async def send(
        self,
        request: UpstreamRequest,
        upstream_token: str | None = None,
        timeout: float | None = None,
    ) -> RawResponse:
        """Send a request and read the full body.

        Args:
            request: The request to send.
            upstream_token: Session cookie value to present, if any.
            timeout: Total timeout in seconds; defaults to the configured one.

        Returns:
            The response body and metadata, whatever the HTTP status.

        Raises:
            TransportFailureError: On timeout or connection failure.
        """
        url = self.url_for(request.path)
        headers = self._build_request_headers(request, upstream_token)
        total = timeout if timeout is not None else self._timeout_seconds
        client_timeout = aiohttp.ClientTimeout(total=total)

        log_api_request(
            request.method,
            url,
            params=request.params,
            headers=headers,
            payload=request.form,
        )

        await self._rate_limiter.acquire()

        try:
            async with self._session.request(
                request.method,
                url,
                params=request.params,
                data=dict(request.form) if request.form is not None else None,
                headers=headers,
                timeout=client_timeout,
            ) as response:
                text = await response.text(errors="replace")
                raw = RawResponse(
                    status=response.status,
                    text=text,
                    content_type=response.headers.get("Content-Type", ""),
                    url=str(response.url),
                    upstream_token=_latest_session_cookie(response),
                )
        except asyncio.TimeoutError as e:
            logger.warning(f"Timeout calling {request.method} {request.path}")
            raise TransportFailureError("timeout") from e
        except aiohttp.ClientError as e:
            logger.warning(f"Error calling {request.method} {request.path}: {e}")
            raise TransportFailureError(type(e).__name__) from e

        if raw.status >= 400:
            logger.warning(
                f"SRT returned status {raw.status} for {request.path}: {raw.text[:200]}"
            )
        return raw
