"""
Authentication: GitHub sign-in and bearer tokens.
"""

from .identity import ExternalIdentity, IdentityResolver, GitHubIdentityResolver, register_user
from .tokens import TokenIssuer

__all__ = [
    "ExternalIdentity",
    "IdentityResolver",
    "GitHubIdentityResolver",
    "register_user",
    "TokenIssuer",
]
