"""Application settings and configuration schema."""

import os
from typing import List, Optional

from pydantic import BaseModel, Field


class DatabaseCfg(BaseModel):
    """SQLite storage configuration."""
    path: str = "data/memories.db"


class GitHubCfg(BaseModel):
    """OAuth application credentials for the GitHub identity provider."""
    client_id: Optional[str] = None
    client_secret: Optional[str] = None
    access_token_url: str = "https://github.com/login/oauth/access_token"
    user_url: str = "https://api.github.com/user"
    timeout_s: float = 10.0


class AuthCfg(BaseModel):
    """Bearer token signing configuration."""
    jwt_secret: str = "spacetime"
    algorithm: str = "HS256"
    token_ttl_days: int = 30


class ServerCfg(BaseModel):
    """HTTP server configuration."""
    host: str = "0.0.0.0"
    port: int = 3333
    cors_origins: List[str] = Field(default_factory=lambda: ["*"])


class Settings(BaseModel):
    """Main application settings."""
    database: DatabaseCfg = DatabaseCfg()
    github: GitHubCfg = GitHubCfg()
    auth: AuthCfg = AuthCfg()
    server: ServerCfg = ServerCfg()
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        """
        Build settings from environment variables.

        Unset variables keep their defaults.
        """
        settings = cls()

        if os.getenv("MEMORIES_DB_PATH"):
            settings.database.path = os.getenv("MEMORIES_DB_PATH")

        settings.github.client_id = os.getenv("GITHUB_CLIENT_ID", settings.github.client_id)
        settings.github.client_secret = os.getenv("GITHUB_CLIENT_SECRET", settings.github.client_secret)

        if os.getenv("JWT_SECRET"):
            settings.auth.jwt_secret = os.getenv("JWT_SECRET")
        if os.getenv("JWT_TTL_DAYS"):
            settings.auth.token_ttl_days = int(os.getenv("JWT_TTL_DAYS"))

        settings.server.host = os.getenv("HOST", settings.server.host)
        if os.getenv("PORT"):
            settings.server.port = int(os.getenv("PORT"))
        if os.getenv("CORS_ORIGINS"):
            settings.server.cors_origins = [
                origin.strip() for origin in os.getenv("CORS_ORIGINS").split(",") if origin.strip()
            ]

        settings.log_level = os.getenv("LOG_LEVEL", settings.log_level)
        return settings
