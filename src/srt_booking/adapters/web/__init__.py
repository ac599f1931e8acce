"""Web adapters: JSON API and middleware."""

from srt_booking.adapters.web.api_app import create_api_app
from srt_booking.adapters.web.rate_limit_middleware import RateLimitMiddleware

__all__ = ["RateLimitMiddleware", "create_api_app"]
