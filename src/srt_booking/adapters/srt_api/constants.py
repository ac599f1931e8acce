"""Constants for the SRT ticketing site adapter.

The site (https://etk.srail.kr) has no public API. Every path, form field and
header below mirrors what its own browser pages send.
"""

SRT_BASE_URL = "https://etk.srail.kr"

MAIN_PATH = "/main.do"
LOGIN_PATH = "/cmc/01/selectLoginInfo.do"
SEARCH_PATH = "/hpg/contents/search/list.do"
LOGOUT_PAGE_ID = "TK0701000000"
SEARCH_PAGE_ID = "TK0101010000"

SESSION_COOKIE = "JSESSIONID"
# Membership-channel cookie the browser always sends alongside the session id.
CHANNEL_COOKIE = "SR_MB_CD=1"

# Login form fields
LOGIN_TYPE_FIELD = "srchDvCd"
LOGIN_ID_FIELD = "srchDvNm"
LOGIN_PASSWORD_FIELD = "hmpgPwdCphd"

# Account-type codes for LOGIN_TYPE_FIELD
LOGIN_TYPE_MEMBERSHIP = "1"
LOGIN_TYPE_EMAIL = "2"
LOGIN_TYPE_PHONE = "3"

# Schedule search fixed fields
TRIP_TYPE_ONE_WAY = "1"
DEFAULT_PASSENGER_COUNT = "1"
SEAT_CLASS_GENERAL = "015"
ARRIVE_TIME_BASIS = "N"
DEFAULT_DEPARTURE_TIME = "000000"

# The site varies its markup by user-agent and locale, so every request
# (login and authenticated calls alike) uses exactly this header set.
BROWSER_HEADERS: dict[str, str] = {
    "Content-Type": "application/x-www-form-urlencoded; charset=UTF-8",
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
    "Accept-Language": "ko-KR,ko;q=0.8,en-US;q=0.6,en;q=0.4",
    "Accept-Encoding": "gzip, deflate",
    "Connection": "keep-alive",
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    ),
}


def build_headers(upstream_token: str | None = None) -> dict[str, str]:
    """Build the shared browser header set, with the session cookie if given."""
    headers = dict(BROWSER_HEADERS)
    if upstream_token:
        headers["Cookie"] = f"{SESSION_COOKIE}={upstream_token}; {CHANNEL_COOKIE}"
    return headers
