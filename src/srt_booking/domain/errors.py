"""Domain error codes and exceptions for the ticketing client."""

from enum import Enum

GENERIC_LOGIN_FAILURE = "로그인에 실패했습니다."


class ErrorCode(Enum):
    """Domain error codes."""

    NO_INITIAL_SESSION = "NO_INITIAL_SESSION"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    VERIFICATION_FAILED = "VERIFICATION_FAILED"
    AUTH_TRANSPORT_FAILURE = "AUTH_TRANSPORT_FAILURE"
    SESSION_EXPIRED = "SESSION_EXPIRED"
    TRANSPORT_FAILURE = "TRANSPORT_FAILURE"
    NOT_AUTHENTICATED = "NOT_AUTHENTICATED"
    UPSTREAM_ERROR = "UPSTREAM_ERROR"
    RESPONSE_PARSE_ERROR = "RESPONSE_PARSE_ERROR"


class TicketingError(Exception):
    """Base domain error with code and user-safe message."""

    def __init__(self, code: ErrorCode, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class AuthError(TicketingError):
    """Raised when the login flow cannot produce a verified session."""


class NoInitialSessionError(AuthError):
    """Raised when the landing page sets no session cookie."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.NO_INITIAL_SESSION,
            message="Remote site did not issue an initial session",
        )


class InvalidCredentialsError(AuthError):
    """Raised when the remote site rejects the login.

    The message is the site's own alert text, so it never says more about
    which credential was wrong than the site itself does.
    """

    def __init__(self, message: str = GENERIC_LOGIN_FAILURE) -> None:
        super().__init__(code=ErrorCode.INVALID_CREDENTIALS, message=message)


class VerificationFailedError(AuthError):
    """Raised when a provisional login is not confirmed by a logged-in page."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.VERIFICATION_FAILED,
            message="Login could not be verified",
        )


class AuthTransportError(AuthError):
    """Raised when a network failure interrupts the login flow."""

    def __init__(self, detail: str = "") -> None:
        super().__init__(
            code=ErrorCode.AUTH_TRANSPORT_FAILURE,
            message=f"Login request failed{': ' + detail if detail else ''}",
        )


class DispatchError(TicketingError):
    """Raised by authenticated calls to the remote site."""


class SessionExpiredError(DispatchError):
    """Raised when the remote site reports that login is required."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.SESSION_EXPIRED,
            message="Session expired, please log in again",
        )


class TransportFailureError(DispatchError):
    """Raised on timeouts and connection failures. Safe for the caller to retry."""

    def __init__(self, detail: str = "") -> None:
        super().__init__(
            code=ErrorCode.TRANSPORT_FAILURE,
            message=f"Remote request failed{': ' + detail if detail else ''}",
        )


class ClientError(TicketingError):
    """Raised by the facade before any remote call is made."""


class NotAuthenticatedError(ClientError):
    """Raised when a session handle is unknown."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.NOT_AUTHENTICATED,
            message="Login required",
        )


class QueryError(TicketingError):
    """Raised when a query response cannot be turned into domain data."""


class UpstreamError(QueryError):
    """Raised when the remote site answers a query with its own error message."""

    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.UPSTREAM_ERROR, message=message)


class ResponseParseError(QueryError):
    """Raised when a response body has an unexpected shape."""

    def __init__(self, detail: str) -> None:
        super().__init__(code=ErrorCode.RESPONSE_PARSE_ERROR, message=detail)
