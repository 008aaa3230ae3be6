"""
Memory system data models.

Defines User, Memory and the list-view projection. Field names are
snake_case in Python and camelCase on the wire.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


EXCERPT_LENGTH = 115
EXCERPT_SUFFIX = "..."


def excerpt(content: str, length: int = EXCERPT_LENGTH) -> str:
    """
    Preview text used by list views.

    The suffix is appended unconditionally, even when ``content`` is shorter
    than ``length``.
    """
    return content[:length] + EXCERPT_SUFFIX


class _WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class User(_WireModel):
    """A local account created on first successful GitHub sign-in."""

    id: str = Field(..., description="Local user identifier (UUID4)")
    github_id: int = Field(..., description="GitHub account id")
    name: str = Field(..., description="Display name")
    login: str = Field(..., description="GitHub login handle")
    avatar_url: str = Field(..., description="Avatar image URL")


class UserProfile(_WireModel):
    """Public part of a user shown next to their public feed."""

    name: str
    avatar_url: str


class Memory(_WireModel):
    """
    A journal entry owned by exactly one user.

    The owner is fixed at creation. ``is_public`` only controls whether
    other people may read the entry.
    """

    id: str = Field(..., description="Memory identifier (UUID4)")
    user_id: str = Field(..., description="Owner's local user id")
    content: str = Field(..., description="Full text")
    cover_url: str = Field(..., description="Cover image URL")
    date: Optional[datetime] = Field(None, description="When the remembered event happened")
    is_public: bool = Field(False, description="Visible to people other than the owner")
    created_at: datetime = Field(..., description="Insert timestamp (UTC)")

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "id": "0b8e3a52-3f7e-4a43-9c8a-5b0b9f3c1d2e",
                "userId": "6c1f0f0e-8f0a-4a3e-a7a5-3d0c1f9b2e11",
                "content": "First day at the beach with the whole family.",
                "coverUrl": "https://images.example.com/beach.jpg",
                "date": "2023-01-14T00:00:00Z",
                "isPublic": True,
                "createdAt": "2023-05-02T18:21:07Z",
            }
        },
    )

    def summary(self) -> "MemorySummary":
        """Project to the list-view shape."""
        return MemorySummary(
            id=self.id,
            cover_url=self.cover_url,
            excerpt=excerpt(self.content),
            date=self.date,
            created_at=self.created_at,
        )


class MemorySummary(_WireModel):
    """List-view entry: full content replaced by an excerpt."""

    id: str
    cover_url: str
    excerpt: str
    date: Optional[datetime] = None
    created_at: datetime
