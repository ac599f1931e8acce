"""Authenticator port."""

from typing import Protocol

from srt_booking.domain.models.session import Session


class Authenticator(Protocol):
    """Port for establishing and ending upstream sessions."""

    async def login(self, username: str, password: str, local_id: str | None = None) -> Session:
        """Log in upstream and store the resulting session."""
        ...

    async def verify(self, session: Session, timeout: float | None = None) -> bool:
        """Check with the remote site that a session is still logged in."""
        ...

    async def logout(self, session: Session) -> None:
        """End the upstream session."""
        ...
