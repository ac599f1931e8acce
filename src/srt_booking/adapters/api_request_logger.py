"""Utility for logging upstream requests when SRT_LOG_REQUESTS is enabled."""

import json
import logging
import os
from collections.abc import Mapping
from typing import Any

logger = logging.getLogger(__name__)

REDACTED = "***REDACTED***"

_SENSITIVE_HEADERS = {"authorization", "cookie", "set-cookie", "x-api-key"}

# Login form fields: account id and password.
_SENSITIVE_FORM_FIELDS = {"srchdvnm", "hmpgpwdcphd"}


def should_log_requests() -> bool:
    """Check if request logging is enabled via SRT_LOG_REQUESTS environment variable."""
    return os.getenv("SRT_LOG_REQUESTS", "").lower() == "true"


def _build_url_with_params(url: str, params: Mapping[str, Any] | None) -> str:
    """Build full URL with query parameters."""
    if not params:
        return url
    param_str = "&".join(f"{k}={v}" for k, v in sorted(params.items()))
    return f"{url}?{param_str}" if "?" not in url else f"{url}&{param_str}"


def redact_headers(headers: Mapping[str, str]) -> dict[str, str]:
    """Redact sensitive headers from logging."""
    return {k: REDACTED if k.lower() in _SENSITIVE_HEADERS else v for k, v in headers.items()}


def redact_form(form: Mapping[str, Any]) -> dict[str, Any]:
    """Redact credential fields from a form payload."""
    return {k: REDACTED if k.lower() in _SENSITIVE_FORM_FIELDS else v for k, v in form.items()}


def _format_payload(payload: Any) -> str:
    """Format payload for logging."""
    if isinstance(payload, Mapping):
        payload = redact_form(payload)
    try:
        return (
            json.dumps(payload, indent=2, ensure_ascii=False)
            if isinstance(payload, dict)
            else str(payload)
        )
    except (TypeError, ValueError):
        return str(payload)


def log_api_request(
    method: str,
    url: str,
    params: Mapping[str, Any] | None = None,
    headers: Mapping[str, str] | None = None,
    payload: Any = None,
) -> None:
    """Log request details if SRT_LOG_REQUESTS is enabled.

    Args:
        method: HTTP method (GET, POST, etc.).
        url: Request URL.
        params: Query parameters (optional).
        headers: Request headers (optional, sensitive headers are redacted).
        payload: Request payload/body (optional, credential fields are redacted).
    """
    if not should_log_requests():
        return

    full_url = _build_url_with_params(url, params)
    log_parts = [f"{method} {full_url}"]

    if headers:
        safe_headers = redact_headers(headers)
        log_parts.append(f"Headers: {json.dumps(safe_headers, indent=2, ensure_ascii=False)}")

    if payload is not None:
        log_parts.append(f"Payload: {_format_payload(payload)}")

    logger.info("API Request:\n" + "\n".join(log_parts))
