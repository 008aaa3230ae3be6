"""Test configuration and fixtures."""

import uuid
from typing import Dict, Optional

import pytest

from memories_api.auth.identity import ExternalIdentity
from memories_api.config.settings import Settings
from memories_api.memory.errors import ValidationError


class FakeIdentityResolver:
    """Resolves codes from a fixed table instead of calling GitHub."""

    def __init__(self, identities: Optional[Dict[str, ExternalIdentity]] = None):
        self.identities = identities or {}
        self.calls = []

    async def resolve(self, code: str) -> ExternalIdentity:
        self.calls.append(code)
        if code not in self.identities:
            raise ValidationError("Unexpected response from GitHub: 1 invalid field(s)")
        return self.identities[code]


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings pointing at a temporary database."""
    settings = Settings()
    settings.database.path = str(tmp_path / "memories.db")
    settings.auth.jwt_secret = "test-secret"
    return settings


@pytest.fixture
def octocat() -> ExternalIdentity:
    return ExternalIdentity(
        id=583231,
        login="octocat",
        name="The Octocat",
        avatar_url="https://avatars.githubusercontent.com/u/583231?v=4",
    )


@pytest.fixture
def hubot() -> ExternalIdentity:
    return ExternalIdentity(
        id=480938,
        login="hubot",
        name="Hubot",
        avatar_url="https://avatars.githubusercontent.com/u/480938?v=4",
    )


@pytest.fixture
def fake_resolver(octocat, hubot) -> FakeIdentityResolver:
    return FakeIdentityResolver({"octocat-code": octocat, "hubot-code": hubot})


@pytest.fixture
def missing_id() -> str:
    """A well-formed id that matches no row."""
    return str(uuid.uuid4())
