"""
FastAPI dependencies.

Collaborators are built once by ``create_app`` and kept on ``app.state``;
these providers hand them to the route handlers.
"""

from typing import Optional

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from memories_api.auth.identity import IdentityResolver
from memories_api.auth.tokens import TokenIssuer
from memories_api.memory.errors import Unauthorized
from memories_api.memory.service import MemoryService
from memories_api.persist.sqlite_store import MemoryStore


_bearer = HTTPBearer(auto_error=False)


def get_store(request: Request) -> MemoryStore:
    """Dependency to get the store."""
    store = getattr(request.app.state, "store", None)
    if store is None:
        raise HTTPException(status_code=503, detail="Store not initialized")
    return store


def get_memory_service(store: MemoryStore = Depends(get_store)) -> MemoryService:
    """Dependency to get the memory service."""
    return MemoryService(store)


def get_identity_resolver(request: Request) -> IdentityResolver:
    """Dependency to get the identity resolver."""
    return request.app.state.identity_resolver


def get_token_issuer(request: Request) -> TokenIssuer:
    """Dependency to get the token issuer."""
    return request.app.state.token_issuer


def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer),
    issuer: TokenIssuer = Depends(get_token_issuer),
) -> str:
    """
    Local user id from the ``Authorization: Bearer`` header.

    Raises:
        Unauthorized: if the header is missing or the token does not verify
    """
    if credentials is None or not credentials.credentials:
        raise Unauthorized("Missing bearer token")
    return issuer.verify(credentials.credentials)
