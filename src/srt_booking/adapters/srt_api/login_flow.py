"""Login flow executor for the SRT site.

Replays the browser login sequence:

1. GET the main page unauthenticated and take the initial session cookie.
2. POST the credentials form with that cookie and browser-like headers.
3. Fail on an inline ``alert('...')``, with the site's own message.
4. Treat an inline redirect as provisional success.
5. Reload the main page as the session and require a logged-in page, since
   the site also returns redirect-shaped bodies for banner content.
6. Store a Session with the latest session cookie the server issued.

Credentials are never logged; the request logger redacts the form fields.
"""

import logging
import re
import uuid
from datetime import datetime, timezone

from srt_booking.adapters.srt_api.constants import (
    LOGIN_ID_FIELD,
    LOGIN_PASSWORD_FIELD,
    LOGIN_PATH,
    LOGIN_TYPE_EMAIL,
    LOGIN_TYPE_FIELD,
    LOGIN_TYPE_MEMBERSHIP,
    LOGIN_TYPE_PHONE,
    LOGOUT_PAGE_ID,
    MAIN_PATH,
)
from srt_booking.adapters.srt_api.dispatcher import SrtRequestDispatcher
from srt_booking.adapters.srt_api.http_client import RawResponse, SrtHttpClient, UpstreamRequest
from srt_booking.adapters.srt_api.signals import (
    LoginSignalKind,
    classify_login_response,
    is_logged_in,
)
from srt_booking.domain.errors import (
    AuthError,
    AuthTransportError,
    InvalidCredentialsError,
    NoInitialSessionError,
    SessionExpiredError,
    TransportFailureError,
    VerificationFailedError,
)
from srt_booking.domain.models.session import Session
from srt_booking.domain.ports.authenticator import Authenticator
from srt_booking.domain.ports.session_store import SessionStore

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"[^@]+@[^@]+\.[^@]+")
PHONE_PATTERN = re.compile(r"\d{3}-\d{3,4}-\d{4}")


def detect_login_type(username: str) -> tuple[str, str]:
    """Return the account-type code and the id as the form expects it."""
    if EMAIL_PATTERN.fullmatch(username):
        return LOGIN_TYPE_EMAIL, username
    if PHONE_PATTERN.fullmatch(username):
        return LOGIN_TYPE_PHONE, username.replace("-", "")
    return LOGIN_TYPE_MEMBERSHIP, username


class SrtLoginFlow(Authenticator):
    """Turns (username, password) into a verified, stored Session."""

    def __init__(
        self,
        http_client: SrtHttpClient,
        dispatcher: SrtRequestDispatcher,
        session_store: SessionStore,
    ) -> None:
        self._http_client = http_client
        self._dispatcher = dispatcher
        self._session_store = session_store

    async def _send(self, request: UpstreamRequest, token: str | None) -> RawResponse:
        try:
            return await self._http_client.send(request, upstream_token=token)
        except TransportFailureError as e:
            raise AuthTransportError(e.message) from e

    async def _fetch_initial_token(self) -> str:
        response = await self._send(UpstreamRequest("GET", MAIN_PATH), token=None)
        if not response.upstream_token:
            logger.warning(f"Main page returned no session cookie (status {response.status})")
            raise NoInitialSessionError()
        return response.upstream_token

    async def _submit_credentials(self, username: str, password: str, token: str) -> RawResponse:
        login_type, login_id = detect_login_type(username)
        request = UpstreamRequest(
            "POST",
            LOGIN_PATH,
            form={
                LOGIN_TYPE_FIELD: login_type,
                LOGIN_ID_FIELD: login_id,
                LOGIN_PASSWORD_FIELD: password,
            },
            referer=MAIN_PATH,
        )
        return await self._send(request, token)

    async def _verify_token(self, token: str) -> RawResponse:
        request = UpstreamRequest("GET", MAIN_PATH, referer=LOGIN_PATH)
        return await self._send(request, token)

    async def _authenticate(self, username: str, password: str) -> str:
        """Run the login sequence and return the verified session cookie."""
        token = await self._fetch_initial_token()

        login_response = await self._submit_credentials(username, password, token)
        token = login_response.upstream_token or token

        signal = classify_login_response(login_response.text)
        if signal.kind is LoginSignalKind.FAILURE:
            logger.info("Login rejected by SRT")
            if signal.message:
                raise InvalidCredentialsError(signal.message)
            raise InvalidCredentialsError()
        if signal.kind is not LoginSignalKind.SUCCESS:
            logger.warning(
                "Login response carried neither failure nor redirect "
                f"(status {login_response.status})"
            )
            raise InvalidCredentialsError()

        verify_response = await self._verify_token(token)
        token = verify_response.upstream_token or token
        if not is_logged_in(verify_response.text):
            logger.warning("Provisional login was not confirmed by the main page")
            raise VerificationFailedError()
        return token

    async def login(self, username: str, password: str, local_id: str | None = None) -> Session:
        """Log in and store the verified session.

        A failed attempt leaves no session under local_id, including one
        stored by an earlier login with the same handle.

        Args:
            username: Membership number, e-mail address, or phone number.
            password: Account password.
            local_id: Local session handle to use; generated when omitted.

        Returns:
            The stored Session.

        Raises:
            NoInitialSessionError: The main page set no session cookie.
            InvalidCredentialsError: The site rejected the login.
            VerificationFailedError: The logged-in page could not be reached.
            AuthTransportError: A request failed at the transport level.
        """
        try:
            token = await self._authenticate(username, password)
        except AuthError:
            if local_id is not None and self._session_store.get(local_id) is not None:
                self._session_store.remove(local_id)
                logger.info(f"Login failed, dropped earlier session {local_id[:8]}...")
            raise

        session = Session(
            local_id=local_id or uuid.uuid4().hex,
            upstream_token=token,
            owner_identity=username,
            created_at=datetime.now(timezone.utc),
        )
        self._session_store.put(session.local_id, session)
        logger.info(f"Login verified, session {session.local_id[:8]}... stored")
        return session

    async def verify(self, session: Session, timeout: float | None = None) -> bool:
        """Reload the main page as the session and report whether it is logged in.

        Only a login prompt or a main page without a logout control counts as
        logged out. An error status says nothing about the session.

        Raises:
            TransportFailureError: On timeout, connection failure, or an error
                status from the site.
        """
        try:
            response = await self._dispatcher.call(
                session, UpstreamRequest("GET", MAIN_PATH, referer=MAIN_PATH), timeout=timeout
            )
        except SessionExpiredError:
            return False
        if not 200 <= response.status < 300:
            raise TransportFailureError(f"status {response.status}")
        return is_logged_in(response.text)

    async def logout(self, session: Session) -> None:
        """Ask the site to end the session.

        Raises:
            SessionExpiredError: If the site already considers it ended.
            TransportFailureError: On timeout or connection failure.
        """
        await self._dispatcher.call(
            session,
            UpstreamRequest("GET", LOGIN_PATH, params={"pageId": LOGOUT_PAGE_ID}),
        )
        logger.info(f"Logged out session {session.local_id[:8]}... upstream")
