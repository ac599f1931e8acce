"""Tests for the in-memory session store."""

import threading
from datetime import datetime, timezone

import pytest

from srt_booking.adapters.session_store import InMemorySessionStore
from srt_booking.domain.models import Session


def make_session(local_id: str, token: str = "token") -> Session:
    return Session(local_id, token, "user", datetime(2025, 3, 1, tzinfo=timezone.utc))


class TestInMemorySessionStore:
    """Tests for InMemorySessionStore."""

    def test_get_returns_stored_session(self) -> None:
        store = InMemorySessionStore()
        session = make_session("a")

        store.put("a", session)

        assert store.get("a") == session
        assert "a" in store

    def test_get_unknown_returns_none(self) -> None:
        assert InMemorySessionStore().get("missing") is None

    def test_put_overwrites(self) -> None:
        store = InMemorySessionStore()
        store.put("a", make_session("a", "old"))
        store.put("a", make_session("a", "new"))

        assert store.get("a").upstream_token == "new"  # type: ignore[union-attr]
        assert len(store) == 1

    def test_remove_is_idempotent(self) -> None:
        """Given a removed id, when removing again, then nothing happens."""
        store = InMemorySessionStore()
        store.put("a", make_session("a"))

        store.remove("a")
        store.remove("a")

        assert store.get("a") is None
        assert len(store) == 0

    def test_invalid_stripe_count(self) -> None:
        with pytest.raises(ValueError):
            InMemorySessionStore(stripe_count=0)

    def test_concurrent_writers_keep_every_session(self) -> None:
        """Given many threads writing distinct ids, when done, then every session is present."""
        store = InMemorySessionStore(stripe_count=4)

        def writer(prefix: int) -> None:
            for i in range(200):
                local_id = f"{prefix}-{i}"
                store.put(local_id, make_session(local_id))

        threads = [threading.Thread(target=writer, args=(n,)) for n in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(store) == 8 * 200
        assert store.get("7-199") is not None
