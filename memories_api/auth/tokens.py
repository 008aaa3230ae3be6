"""
Bearer token issuing and verification.

Tokens are HS256 JWTs whose ``sub`` claim is the local user id.
"""

from datetime import datetime, timedelta, timezone

import jwt

from memories_api.config.settings import AuthCfg
from memories_api.memory.errors import Unauthorized
from memories_api.memory.schemas import User
from memories_api.telemetry import get_logger


logger = get_logger(__name__)


class TokenIssuer:
    """Signs and verifies bearer tokens with a shared secret."""

    def __init__(self, cfg: AuthCfg):
        self.cfg = cfg

    def issue(self, user: User) -> str:
        """Sign a token for ``user``, valid for ``token_ttl_days``."""
        now = datetime.now(timezone.utc)
        claims = {
            "sub": user.id,
            "name": user.name,
            "avatarUrl": user.avatar_url,
            "iat": now,
            "exp": now + timedelta(days=self.cfg.token_ttl_days),
        }
        return jwt.encode(claims, self.cfg.jwt_secret, algorithm=self.cfg.algorithm)

    def verify(self, token: str) -> str:
        """
        Return the user id a token was issued for.

        Raises:
            Unauthorized: if the token is malformed, expired, wrongly signed
                or has no subject
        """
        try:
            claims = jwt.decode(
                token,
                self.cfg.jwt_secret,
                algorithms=[self.cfg.algorithm],
                options={"require": ["sub", "exp"]},
            )
        except jwt.ExpiredSignatureError as e:
            logger.info("token_rejected", reason="expired")
            raise Unauthorized("Token expired") from e
        except jwt.InvalidTokenError as e:
            logger.info("token_rejected", reason=type(e).__name__)
            raise Unauthorized("Invalid token") from e

        sub = claims.get("sub")
        if not isinstance(sub, str) or not sub:
            logger.info("token_rejected", reason="missing_sub")
            raise Unauthorized("Invalid token")
        return sub
