"""Authenticated request dispatcher for the SRT site."""

import logging

from srt_booking.adapters.srt_api.http_client import RawResponse, SrtHttpClient, UpstreamRequest
from srt_booking.adapters.srt_api.signals import is_login_required
from srt_booking.domain.errors import SessionExpiredError
from srt_booking.domain.models.session import Session

logger = logging.getLogger(__name__)


class SrtRequestDispatcher:
    """Executes requests as a session and detects expiry.

    The dispatcher never logs in again and never retries. On
    SessionExpiredError the caller drops the session and asks for a fresh
    login; TransportFailureError leaves the session untouched.
    """

    def __init__(self, http_client: SrtHttpClient) -> None:
        self._http_client = http_client

    async def call(
        self,
        session: Session,
        request: UpstreamRequest,
        timeout: float | None = None,
    ) -> RawResponse:
        """Send a request with the session's upstream token attached.

        Args:
            session: The session to act as.
            request: The request to send.
            timeout: Per-call timeout in seconds (optional).

        Returns:
            The raw response.

        Raises:
            SessionExpiredError: If the body carries a login-required marker,
                whatever the HTTP status.
            TransportFailureError: On timeout or connection failure.
        """
        if not session.is_usable:
            raise SessionExpiredError()

        response = await self._http_client.send(
            request, upstream_token=session.upstream_token, timeout=timeout
        )

        if is_login_required(response.text):
            logger.info(
                f"Session {session.local_id[:8]}... expired upstream "
                f"({request.method} {request.path}, status {response.status})"
            )
            raise SessionExpiredError()

        return response
