"""
Memory domain.

Provides:
- User and Memory models, list-view excerpts
- Error taxonomy
- Access policy (view / mutate / feed decisions)

The service layer lives in ``memories_api.memory.service``.
"""

from .errors import (
    MemoriesError,
    ValidationError,
    Unauthorized,
    Forbidden,
    NotFound,
    IdentityProviderError,
)
from .schemas import User, UserProfile, Memory, MemorySummary, excerpt, EXCERPT_LENGTH
from .policy import AccessPolicy, Actor

__all__ = [
    "MemoriesError",
    "ValidationError",
    "Unauthorized",
    "Forbidden",
    "NotFound",
    "IdentityProviderError",
    "User",
    "UserProfile",
    "Memory",
    "MemorySummary",
    "excerpt",
    "EXCERPT_LENGTH",
    "AccessPolicy",
    "Actor",
]
