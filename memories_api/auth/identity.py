"""
GitHub identity resolution and local user upsert.

Exchanges an OAuth authorization code for the GitHub account behind it,
then finds or creates the matching local user.
"""

import sqlite3
from typing import Optional, Protocol, Tuple

import httpx
from pydantic import AnyHttpUrl, BaseModel, Field
from pydantic import ValidationError as SchemaError

from memories_api.config.settings import GitHubCfg
from memories_api.memory.errors import IdentityProviderError, ValidationError
from memories_api.memory.schemas import User
from memories_api.persist.sqlite_store import MemoryStore
from memories_api.telemetry import get_logger


logger = get_logger(__name__)


class ExternalIdentity(BaseModel):
    """The subset of a GitHub user profile we keep."""

    id: int = Field(..., description="GitHub account id")
    login: str = Field(..., description="GitHub login handle")
    name: Optional[str] = Field(None, description="Display name, may be unset on GitHub")
    avatar_url: AnyHttpUrl = Field(..., description="Avatar image URL")

    @property
    def display_name(self) -> str:
        return self.name or self.login


class _AccessTokenResponse(BaseModel):
    access_token: str


class IdentityResolver(Protocol):
    """Anything that can turn an OAuth code into an external identity."""

    async def resolve(self, code: str) -> ExternalIdentity:
        ...


class GitHubIdentityResolver:
    """
    Resolves OAuth codes against GitHub.

    Flow:
    1. POST the code with client credentials to get an access token
    2. GET the user profile with that token
    """

    def __init__(self, cfg: GitHubCfg, transport: Optional[httpx.AsyncBaseTransport] = None):
        """
        Args:
            cfg: GitHub OAuth app settings
            transport: Optional httpx transport (tests pass a MockTransport)
        """
        self.cfg = cfg
        self._transport = transport

    async def resolve(self, code: str) -> ExternalIdentity:
        """
        Exchange ``code`` for the GitHub identity behind it.

        Raises:
            ValidationError: if GitHub's responses don't have the expected shape
                (for example an expired or reused code)
            IdentityProviderError: on transport or HTTP errors
        """
        async with httpx.AsyncClient(
            transport=self._transport, timeout=self.cfg.timeout_s
        ) as client:
            try:
                token_response = await client.post(
                    self.cfg.access_token_url,
                    params={
                        "code": code,
                        "client_id": self.cfg.client_id,
                        "client_secret": self.cfg.client_secret,
                    },
                    headers={"Accept": "application/json"},
                )
                token_response.raise_for_status()
                token = self._parse(_AccessTokenResponse, token_response.json())

                user_response = await client.get(
                    self.cfg.user_url,
                    headers={"Authorization": f"Bearer {token.access_token}"},
                )
                user_response.raise_for_status()
                user_payload = user_response.json()
            except httpx.HTTPError as e:
                logger.warning("identity_provider_error", error=str(e))
                raise IdentityProviderError(f"GitHub request failed: {e}") from e
            except ValueError as e:
                # Body was not JSON
                logger.warning("identity_provider_error", error=str(e))
                raise IdentityProviderError("GitHub returned a non-JSON response") from e

        return self._parse(ExternalIdentity, user_payload)

    @staticmethod
    def _parse(model, payload):
        try:
            return model.model_validate(payload)
        except SchemaError as e:
            raise ValidationError(f"Unexpected response from GitHub: {e.error_count()} invalid field(s)") from e


def register_user(store: MemoryStore, identity: ExternalIdentity) -> Tuple[User, bool]:
    """
    Find the local user for an identity, creating it on first sign-in.

    Existing users are returned unchanged.

    Returns:
        (user, created)
    """
    user = store.get_user_by_github_id(identity.id)
    if user is not None:
        logger.info("user_resolved", user_id=user.id, github_id=identity.id)
        return user, False

    try:
        user = store.create_user(
            github_id=identity.id,
            login=identity.login,
            name=identity.display_name,
            avatar_url=str(identity.avatar_url),
        )
    except sqlite3.IntegrityError:
        # Another request registered the same account first
        user = store.get_user_by_github_id(identity.id)
        if user is None:
            raise
        return user, False

    logger.info("user_registered", user_id=user.id, github_id=identity.id, login=identity.login)
    return user, True
