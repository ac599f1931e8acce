"""Rate limiter for outgoing requests to the ticketing site.

Keeps a minimum delay between requests so bursts (such as a date-window
scan) do not trip the site's anti-automation checks. Each client owns its
limiter; nothing is shared at module or class level.
"""

import asyncio
import logging
import time

logger = logging.getLogger(__name__)


class ApiRateLimiter:
    """Ensures a minimum delay between requests to one remote site.

    Async-safe using asyncio.Lock.
    """

    def __init__(self, api_name: str, min_delay_seconds: float = 0.0) -> None:
        """Initialize the rate limiter.

        Args:
            api_name: Name of the remote API (for logging).
            min_delay_seconds: Minimum delay between requests in seconds.
        """
        if min_delay_seconds < 0:
            raise ValueError("min_delay_seconds must not be negative")
        self.api_name = api_name
        self.min_delay_seconds = min_delay_seconds
        self._last_request_time: float | None = None
        self._lock = asyncio.Lock()

    async def acquire(self) -> None:
        """Acquire permission to make a request.

        Blocks until enough time has passed since the last request.
        """
        async with self._lock:
            if self._last_request_time is not None and self.min_delay_seconds > 0:
                elapsed = time.monotonic() - self._last_request_time
                wait_time = self.min_delay_seconds - elapsed
                if wait_time > 0:
                    logger.debug(f"{self.api_name}: waiting {wait_time:.2f}s before next request")
                    await asyncio.sleep(wait_time)

            self._last_request_time = time.monotonic()
