"""
Memory access policy.

Decides whether an actor may list, view, create, update or delete memories.
An actor is a local user id, or None for an anonymous caller.

Reads are allowed when the memory is public OR the actor owns it. Writes
require an authenticated actor AND ownership; the public flag never grants
write access.
"""

from typing import Optional

from .errors import Forbidden, NotFound, Unauthorized
from .schemas import Memory
from memories_api.telemetry import get_logger


logger = get_logger(__name__)

Actor = Optional[str]


class AccessPolicy:
    """
    Policy engine for memory access.

    Every check that takes a memory first confirms it exists (NotFound),
    then evaluates ownership or visibility (Forbidden).
    """

    def require_authenticated(self, actor: Actor) -> str:
        """
        Return the actor's user id.

        Raises:
            Unauthorized: if the actor is anonymous
        """
        if not actor:
            raise Unauthorized("Authentication required")
        return actor

    def can_list_own(self, actor: Actor) -> str:
        """Listing your own memories needs authentication only."""
        return self.require_authenticated(actor)

    def can_create(self, actor: Actor) -> str:
        """
        Return the owner id for a new memory.

        The owner is always the actor; payload owner fields are never consulted.
        """
        return self.require_authenticated(actor)

    def include_in_public_feed(self, memory: Memory) -> bool:
        """Whether a memory belongs in its owner's public feed."""
        return memory.is_public

    def can_view_one(self, actor: Actor, memory: Optional[Memory], memory_id: str = "") -> Memory:
        """
        Check read access to a single memory.

        Returns:
            The memory, when visible to the actor

        Raises:
            NotFound: if the memory does not exist
            Forbidden: if it is private and the actor is not its owner
        """
        memory = self._require_exists(memory, memory_id)

        if memory.is_public:
            return memory
        if actor and actor == memory.user_id:
            return memory

        logger.info("access_denied", action="view", memory_id=memory.id, actor=actor)
        raise Forbidden("This memory is private")

    def can_mutate(self, actor: Actor, memory: Optional[Memory], memory_id: str = "") -> Memory:
        """
        Check write access (update or delete) to a memory.

        Raises:
            NotFound: if the memory does not exist
            Forbidden: if the actor is anonymous or not the owner
        """
        memory = self._require_exists(memory, memory_id)

        if actor and actor == memory.user_id:
            return memory

        logger.info("access_denied", action="mutate", memory_id=memory.id, actor=actor)
        raise Forbidden("Only the owner can change this memory")

    @staticmethod
    def _require_exists(memory: Optional[Memory], memory_id: str) -> Memory:
        if memory is None:
            raise NotFound(f"Memory {memory_id} not found" if memory_id else "Memory not found")
        return memory
