"""Session store port."""

from typing import Protocol

from srt_booking.domain.models.session import Session


class SessionStore(Protocol):
    """Port for holding upstream sessions by local session id."""

    def put(self, local_id: str, session: Session) -> None:
        """Insert or overwrite the session for a local id."""
        ...

    def get(self, local_id: str) -> Session | None:
        """Look up the session for a local id."""
        ...

    def remove(self, local_id: str) -> None:
        """Remove the session for a local id. Removing an absent id is a no-op."""
        ...
