"""
Persistence layer.

Provides:
- SQLite-backed store for users and memories
"""

from .sqlite_store import MemoryStore

__all__ = [
    "MemoryStore",
]
