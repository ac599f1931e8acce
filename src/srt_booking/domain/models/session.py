"""Upstream session domain model."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Session:
    """A logged-in session on the remote ticketing site, keyed by a local handle."""

    local_id: str
    upstream_token: str
    owner_identity: str
    created_at: datetime

    @property
    def is_usable(self) -> bool:
        """A session is usable only while it carries an upstream token."""
        return bool(self.upstream_token)
