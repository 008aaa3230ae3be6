"""
Pydantic schemas for FastAPI endpoints.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from memories_api.memory.schemas import Memory, MemorySummary, User, UserProfile


class RegisterRequest(BaseModel):
    """Request model for /register endpoint."""

    code: str = Field(..., description="OAuth authorization code returned by GitHub")


class RegisterResponse(BaseModel):
    """Response model for /register endpoint."""

    user: User = Field(..., description="Local user for the GitHub account")
    token: str = Field(..., description="Bearer token for subsequent requests")


class MemoryRequest(BaseModel):
    """Request body for creating or updating a memory.

    Owner fields in the payload are ignored.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "content": "First day at the beach with the whole family.",
                "coverUrl": "https://images.example.com/beach.jpg",
                "date": "2023-01-14T00:00:00Z",
                "isPublic": True,
            }
        },
    )

    content: str = Field(..., description="Full text")
    cover_url: str = Field(..., description="Cover image URL")
    date: Optional[datetime] = Field(None, description="When the remembered event happened (ISO-8601)")
    is_public: bool = Field(False, description="Visible to people other than the owner")

    @field_validator("is_public", mode="before")
    @classmethod
    def _null_is_private(cls, value: Any) -> Any:
        return False if value is None else value


class MemoryResponse(BaseModel):
    """Response model wrapping a single memory."""

    memory: Memory


class PublicFeedResponse(BaseModel):
    """Response model for /user/{userId}/memories endpoint."""

    user: UserProfile
    memories: List[MemorySummary] = Field(default_factory=list)


class HealthResponse(BaseModel):
    """Response model for /health endpoint."""

    status: str = Field(..., description="Service status")
    components: Dict[str, bool] = Field(default_factory=dict, description="Component availability")


class ErrorResponse(BaseModel):
    """Body of every error response."""

    message: str
    error: str
    issues: Optional[List[Dict[str, Any]]] = None
