"""
Sign-in endpoint: GitHub OAuth code in, local user and bearer token out.
"""

from fastapi import APIRouter, Depends

from memories_api.auth.identity import IdentityResolver, register_user
from memories_api.auth.tokens import TokenIssuer
from memories_api.persist.sqlite_store import MemoryStore
from .deps import get_identity_resolver, get_store, get_token_issuer
from .schemas import ErrorResponse, RegisterRequest, RegisterResponse


router = APIRouter(
    tags=["auth"],
    responses={
        400: {"model": ErrorResponse, "description": "Missing or rejected code"},
        502: {"model": ErrorResponse, "description": "GitHub unreachable"},
    },
)


@router.post("/register", response_model=RegisterResponse)
async def register(
    request: RegisterRequest,
    resolver: IdentityResolver = Depends(get_identity_resolver),
    store: MemoryStore = Depends(get_store),
    issuer: TokenIssuer = Depends(get_token_issuer),
):
    """
    Sign in with GitHub.

    Resolves the code to a GitHub account, creates the local user on first
    sign-in, and returns the user with a signed bearer token.
    """
    identity = await resolver.resolve(request.code)
    user, _ = register_user(store, identity)
    return RegisterResponse(user=user, token=issuer.issue(user))
