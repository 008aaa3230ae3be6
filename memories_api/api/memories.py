"""
Memory API endpoints.

Own feed, single-memory CRUD and the public feed of a user. All writes and
private reads go through MemoryService, which applies the access policy.
"""

import uuid
from typing import List

from fastapi import APIRouter, Depends, Response, status

from memories_api.memory.schemas import MemorySummary
from memories_api.memory.service import MemoryService
from .deps import get_current_user_id, get_memory_service
from .schemas import ErrorResponse, MemoryRequest, MemoryResponse, PublicFeedResponse


router = APIRouter(
    tags=["memories"],
    responses={
        400: {"model": ErrorResponse, "description": "Malformed id or body"},
        401: {"model": ErrorResponse, "description": "Missing token, or not the owner"},
        404: {"model": ErrorResponse, "description": "Memory or user not found"},
    },
)


@router.get("/memories", response_model=List[MemorySummary])
async def list_memories(
    user_id: str = Depends(get_current_user_id),
    service: MemoryService = Depends(get_memory_service),
):
    """
    List the caller's memories, oldest first.

    Content is replaced by a 115-character excerpt followed by "...".
    """
    return service.list_own(user_id)


@router.get("/memories/{id}", response_model=MemoryResponse)
async def get_memory(
    id: uuid.UUID,
    user_id: str = Depends(get_current_user_id),
    service: MemoryService = Depends(get_memory_service),
):
    """Get one memory. Private memories are only visible to their owner."""
    return MemoryResponse(memory=service.get(user_id, str(id)))


@router.get("/user/{userId}/memories", response_model=PublicFeedResponse)
async def list_public_memories(
    userId: uuid.UUID,
    service: MemoryService = Depends(get_memory_service),
):
    """
    Public feed of a user. No authentication required.

    Returns 404 if the user does not exist; an empty list if they have no
    public memories.
    """
    profile, memories = service.public_feed(str(userId))
    return PublicFeedResponse(user=profile, memories=memories)


@router.post("/memories", response_model=MemoryResponse, status_code=status.HTTP_201_CREATED)
async def create_memory(
    request: MemoryRequest,
    user_id: str = Depends(get_current_user_id),
    service: MemoryService = Depends(get_memory_service),
):
    """Create a memory owned by the caller."""
    memory = service.create(
        user_id,
        content=request.content,
        cover_url=request.cover_url,
        date=request.date,
        is_public=request.is_public,
    )
    return MemoryResponse(memory=memory)


@router.put("/memories/{id}", response_model=MemoryResponse)
async def update_memory(
    id: uuid.UUID,
    request: MemoryRequest,
    user_id: str = Depends(get_current_user_id),
    service: MemoryService = Depends(get_memory_service),
):
    """Replace content, cover, date and visibility of one of the caller's memories."""
    memory = service.update(
        user_id,
        str(id),
        content=request.content,
        cover_url=request.cover_url,
        date=request.date,
        is_public=request.is_public,
    )
    return MemoryResponse(memory=memory)


@router.delete("/memories/{id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_memory(
    id: uuid.UUID,
    user_id: str = Depends(get_current_user_id),
    service: MemoryService = Depends(get_memory_service),
):
    """Delete one of the caller's memories."""
    service.delete(user_id, str(id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
