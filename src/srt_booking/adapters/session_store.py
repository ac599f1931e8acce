"""In-memory store of upstream sessions keyed by local session id.

Keys hash onto a fixed number of stripes. Each stripe owns its own dict and
lock, so a write excludes reads and writes of the same key while keys on
other stripes proceed without contention. Store access never awaits.
"""

import logging
import threading

from srt_booking.domain.models.session import Session
from srt_booking.domain.ports.session_store import SessionStore

logger = logging.getLogger(__name__)

DEFAULT_STRIPE_COUNT = 16


class _Stripe:
    __slots__ = ("lock", "sessions")

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.sessions: dict[str, Session] = {}


class InMemorySessionStore(SessionStore):
    """Thread-safe mapping from local session id to Session.

    There is no expiry timer: the remote site is the only authority on
    validity, so staleness is discovered when a query uses the token.
    """

    def __init__(self, stripe_count: int = DEFAULT_STRIPE_COUNT) -> None:
        if stripe_count < 1:
            raise ValueError("stripe_count must be at least 1")
        self._stripes = tuple(_Stripe() for _ in range(stripe_count))

    def _stripe_for(self, local_id: str) -> _Stripe:
        return self._stripes[hash(local_id) % len(self._stripes)]

    def put(self, local_id: str, session: Session) -> None:
        """Insert or overwrite the session for a local id."""
        stripe = self._stripe_for(local_id)
        with stripe.lock:
            stripe.sessions[local_id] = session
        logger.debug(f"Stored session for handle {local_id[:8]}...")

    def get(self, local_id: str) -> Session | None:
        """Look up the session for a local id."""
        stripe = self._stripe_for(local_id)
        with stripe.lock:
            return stripe.sessions.get(local_id)

    def remove(self, local_id: str) -> None:
        """Remove the session for a local id. Removing an absent id is a no-op."""
        stripe = self._stripe_for(local_id)
        with stripe.lock:
            removed = stripe.sessions.pop(local_id, None)
        if removed is not None:
            logger.debug(f"Removed session for handle {local_id[:8]}...")

    def __contains__(self, local_id: object) -> bool:
        return isinstance(local_id, str) and self.get(local_id) is not None

    def __len__(self) -> int:
        total = 0
        for stripe in self._stripes:
            with stripe.lock:
                total += len(stripe.sessions)
        return total
