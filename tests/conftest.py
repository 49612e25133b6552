"""Shared fixtures for the mood journal tests."""

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

sys.path.insert(0, str(Path(__file__).parent.parent))

from content import QuoteSource, SongSearch  # noqa: E402
from database import AccountStore  # noqa: E402
from errors import InvalidInput  # noqa: E402


class InMemoryEntryStore:
    """EntryStore stand-in with the same save/find contract."""

    def __init__(self):
        self.rows = []

    def save(self, email, mood, triggers=None, created_at=None):
        if not email or not mood:
            raise InvalidInput("Email and mood are required")
        doc = {
            "email": email,
            "mood": mood,
            "triggers": list(triggers or []),
            "created_at": created_at or datetime.now(timezone.utc),
        }
        self.rows.append(doc)
        return doc

    def find(self, email, since, until=None, triggers=None):
        wanted = set(triggers or [])
        hits = [
            r for r in self.rows
            if r["email"] == email
            and r["created_at"] >= since
            and (until is None or r["created_at"] <= until)
            and (not wanted or wanted & set(r["triggers"]))
        ]
        hits.sort(key=lambda r: r["created_at"], reverse=True)
        return [{"mood": r["mood"], "triggers": r["triggers"], "created_at": r["created_at"]} for r in hits]


@pytest.fixture
def now():
    return datetime(2024, 5, 20, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def entry_store():
    return InMemoryEntryStore()


@pytest.fixture
def seeded_store(entry_store, now):
    """a@x.com: happy [work, sleep] two hours ago, sad [work] one hour ago."""
    entry_store.save("a@x.com", "happy", ["work", "sleep"], created_at=now - timedelta(hours=2))
    entry_store.save("a@x.com", "sad", ["work"], created_at=now - timedelta(hours=1))
    return entry_store


@pytest.fixture
def mongo_db():
    """pymongo Database double: db[name] returns one MagicMock per collection."""
    collections = {}

    def _collection(name):
        return collections.setdefault(name, MagicMock(name=name))

    db = MagicMock()
    db.__getitem__.side_effect = _collection
    return db


@pytest.fixture
def accounts():
    return MagicMock(spec=AccountStore)


@pytest.fixture
def songs():
    return MagicMock(spec=SongSearch)


@pytest.fixture
def quotes():
    return MagicMock(spec=QuoteSource)


@pytest.fixture
def client(accounts, entry_store, songs, quotes):
    """TestClient with stores and content clients swapped out; no MongoDB needed."""
    from main import app, get_account_store, get_entry_store, get_quote_source, get_song_search

    app.dependency_overrides[get_account_store] = lambda: accounts
    app.dependency_overrides[get_entry_store] = lambda: entry_store
    app.dependency_overrides[get_song_search] = lambda: songs
    app.dependency_overrides[get_quote_source] = lambda: quotes
    # 500s come back as responses instead of being re-raised
    yield TestClient(app, raise_server_exceptions=False)
    app.dependency_overrides.clear()
