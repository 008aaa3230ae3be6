"""
Memory operations: store calls wrapped in access policy checks.
"""

from datetime import datetime
from typing import List, Optional, Tuple

from .errors import NotFound, Unauthorized
from .policy import AccessPolicy, Actor
from .schemas import Memory, MemorySummary, UserProfile
from memories_api.persist.sqlite_store import MemoryStore
from memories_api.telemetry import get_logger


logger = get_logger(__name__)


class MemoryService:
    """
    Entry point for every memory operation.

    The store handle is passed in once at startup; the service keeps no
    other state between calls.
    """

    def __init__(self, store: MemoryStore, policy: Optional[AccessPolicy] = None):
        self.store = store
        self.policy = policy or AccessPolicy()

    def list_own(self, actor: Actor) -> List[MemorySummary]:
        """The actor's memories as excerpts, oldest first."""
        owner_id = self.policy.can_list_own(actor)
        return [m.summary() for m in self.store.list_memories(owner_id)]

    def public_feed(self, owner_id: str) -> Tuple[UserProfile, List[MemorySummary]]:
        """
        A user's public memories as excerpts.

        Raises:
            NotFound: if no user has this id
        """
        user = self.store.get_user(owner_id)
        if user is None:
            raise NotFound("A user with this id does not exist.")

        memories = [
            m.summary()
            for m in self.store.list_memories(owner_id, public_only=True)
            if self.policy.include_in_public_feed(m)
        ]
        return UserProfile(name=user.name, avatar_url=user.avatar_url), memories

    def get(self, actor: Actor, memory_id: str) -> Memory:
        """Full memory, if the actor may see it."""
        return self.policy.can_view_one(actor, self.store.get_memory(memory_id), memory_id)

    def create(
        self,
        actor: Actor,
        content: str,
        cover_url: str,
        date: Optional[datetime] = None,
        is_public: bool = False,
    ) -> Memory:
        """
        Create a memory owned by the actor.

        Raises:
            Unauthorized: if the actor is anonymous, or its token names a
                user that no longer exists
        """
        owner_id = self.policy.can_create(actor)
        if self.store.get_user(owner_id) is None:
            logger.info("token_rejected", reason="unknown_user", user_id=owner_id)
            raise Unauthorized("Unknown user")

        memory = self.store.create_memory(
            user_id=owner_id,
            content=content,
            cover_url=cover_url,
            date=date,
            is_public=is_public,
        )
        logger.info("memory_created", memory_id=memory.id, user_id=owner_id, is_public=is_public)
        return memory

    def update(
        self,
        actor: Actor,
        memory_id: str,
        content: str,
        cover_url: str,
        date: Optional[datetime] = None,
        is_public: bool = False,
    ) -> Memory:
        """
        Replace the mutable fields of the actor's memory.

        Raises:
            NotFound: if the memory is absent, including when a concurrent
                delete removed it between the ownership check and the write
            Forbidden: if the actor is not the owner
        """
        self.policy.can_mutate(actor, self.store.get_memory(memory_id), memory_id)

        updated = self.store.update_memory(
            memory_id,
            content=content,
            cover_url=cover_url,
            date=date,
            is_public=is_public,
        )
        if updated is None:
            raise NotFound(f"Memory {memory_id} not found")

        logger.info("memory_updated", memory_id=memory_id, user_id=actor)
        return updated

    def delete(self, actor: Actor, memory_id: str) -> None:
        """Delete the actor's memory."""
        self.policy.can_mutate(actor, self.store.get_memory(memory_id), memory_id)

        if not self.store.delete_memory(memory_id):
            raise NotFound(f"Memory {memory_id} not found")

        logger.info("memory_deleted", memory_id=memory_id, user_id=actor)
