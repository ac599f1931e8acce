"""Signal detector for SRT response bodies.

The site answers with HTTP 200 whether a login worked or not, and reports
expired sessions inside the page. Outcomes are therefore classified by
matching the literal markers below against the body text. Nothing outside
this module should match on response text for control flow.
"""

import re
from dataclasses import dataclass
from enum import Enum
from urllib.parse import unquote_plus

FAILURE_MARKER = "alert("
SUCCESS_MARKERS = ("location.replace", "location.href")
LOGGED_IN_MARKERS = ("로그아웃", "logout")
LOGIN_REQUIRED_MARKERS = (
    "로그인이 필요합니다",
    "로그인 후 이용",
    "로그인 후 사용",
    "세션이 만료",
    "NotLoggedIn",
)

_ALERT_MESSAGE = re.compile(r"""alert\(\s*(['"])(.*?)\1\s*\)""", re.DOTALL)


class LoginSignalKind(Enum):
    FAILURE = "failure"
    SUCCESS = "success"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class LoginSignal:
    """Classification of a login response body."""

    kind: LoginSignalKind
    message: str | None = None


def extract_alert_message(body: str) -> str | None:
    """Return the decoded text of the first inline ``alert('...')``, if any."""
    match = _ALERT_MESSAGE.search(body)
    if not match:
        return None
    message = unquote_plus(match.group(2)).strip()
    return message or None


def classify_login_response(body: str) -> LoginSignal:
    """Classify a login POST body as failure, success, or neither.

    A failure alert wins over a redirect: the site can emit both when it
    bounces a rejected login back to the main page.
    """
    if FAILURE_MARKER in body:
        return LoginSignal(LoginSignalKind.FAILURE, extract_alert_message(body))
    if any(marker in body for marker in SUCCESS_MARKERS):
        return LoginSignal(LoginSignalKind.SUCCESS)
    return LoginSignal(LoginSignalKind.UNKNOWN)


def is_login_required(body: str) -> bool:
    """True when the body says the session is missing or expired."""
    return any(marker in body for marker in LOGIN_REQUIRED_MARKERS)


def is_logged_in(body: str) -> bool:
    """True when the page shows a logout control and no login prompt."""
    if is_login_required(body):
        return False
    return any(marker in body for marker in LOGGED_IN_MARKERS)
