"""
Shared fixtures for unit tests.
"""
import sqlite3
from contextlib import closing

import pytest
from fastapi.testclient import TestClient

from memories_api.api.main import create_app
from memories_api.auth.tokens import TokenIssuer
from memories_api.memory.service import MemoryService
from memories_api.persist.sqlite_store import MemoryStore


@pytest.fixture
def store(tmp_path):
    """Create a temporary MemoryStore instance."""
    db_path = tmp_path / "memories.db"
    store = MemoryStore(db_path)
    yield store
    store.close()


@pytest.fixture
def count_memories(store):
    """Count every stored memory, read straight from the database file."""
    def count() -> int:
        with closing(sqlite3.connect(str(store.db_path))) as conn:
            return conn.execute("SELECT COUNT(*) FROM memories").fetchone()[0]
    return count


@pytest.fixture
def alice(store):
    return store.create_user(
        github_id=1001,
        login="alice",
        name="Alice",
        avatar_url="https://avatars.example.com/alice.png",
    )


@pytest.fixture
def bob(store):
    return store.create_user(
        github_id=1002,
        login="bob",
        name="Bob",
        avatar_url="https://avatars.example.com/bob.png",
    )


@pytest.fixture
def service(store):
    return MemoryService(store)


@pytest.fixture
def issuer(settings):
    return TokenIssuer(settings.auth)


@pytest.fixture
def app(settings, store, fake_resolver, issuer):
    return create_app(
        settings=settings,
        store=store,
        identity_resolver=fake_resolver,
        token_issuer=issuer,
    )


@pytest.fixture
def client(app):
    """Create test client."""
    return TestClient(app)


@pytest.fixture
def alice_headers(issuer, alice):
    return {"Authorization": f"Bearer {issuer.issue(alice)}"}


@pytest.fixture
def bob_headers(issuer, bob):
    return {"Authorization": f"Bearer {issuer.issue(bob)}"}


@pytest.fixture
def sample_content():
    """Content longer than the excerpt length."""
    return (
        "We drove down to the coast before sunrise, stopped for coffee in a tiny town, "
        "and spent the whole afternoon building sandcastles that the tide kept taking back. "
        "Nobody wanted to leave."
    )
