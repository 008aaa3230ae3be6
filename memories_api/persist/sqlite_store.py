"""
SQLite-backed store for users and memories.

Two tables:
- users: local accounts keyed by id, unique on github_id
- memories: journal entries, each referencing its owner in users

Timestamps are stored as ISO-8601 text in UTC so lexical order matches
chronological order.
"""

import sqlite3
import threading
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Union

from memories_api.memory.schemas import Memory, User
from memories_api.telemetry import get_logger


logger = get_logger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _to_text(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat()


def _from_text(value: Optional[str]) -> Optional[datetime]:
    if value is None:
        return None
    return datetime.fromisoformat(value)


class MemoryStore:
    """
    File-backed SQLite store for users and memories.

    One connection is opened per store and shared across requests; a lock
    serializes statements. WAL mode lets readers proceed during writes.
    """

    def __init__(self, db_path: Union[str, Path]):
        """
        Open (and if needed create) the database at the given path.

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        self._lock = threading.Lock()
        self._conn = sqlite3.connect(
            str(self.db_path),
            check_same_thread=False,  # Shared by the request handlers
            timeout=10.0,
        )
        self._conn.row_factory = sqlite3.Row

        self._conn.execute("PRAGMA journal_mode=WAL")
        self._conn.execute("PRAGMA synchronous=NORMAL")
        self._conn.execute("PRAGMA foreign_keys=ON")

        self._init_tables()
        logger.info("store_opened", db_path=str(self.db_path))

    def _init_tables(self) -> None:
        """Create tables if they don't exist."""
        self._conn.execute("""
            CREATE TABLE IF NOT EXISTS users (
                id TEXT PRIMARY KEY,
                github_id INTEGER NOT NULL UNIQUE,
                name TEXT NOT NULL,
                login TEXT NOT NULL,
                avatar_url TEXT NOT NULL
            )
        """)
        self._conn.execute("""
            CREATE TABLE IF NOT EXISTS memories (
                id TEXT PRIMARY KEY,
                user_id TEXT NOT NULL REFERENCES users(id),
                content TEXT NOT NULL,
                cover_url TEXT NOT NULL,
                date TEXT,
                is_public INTEGER NOT NULL DEFAULT 0,
                created_at TEXT NOT NULL
            )
        """)
        # Feed queries filter by owner and sort by creation time
        self._conn.execute("""
            CREATE INDEX IF NOT EXISTS idx_memories_user_created
            ON memories(user_id, created_at)
        """)
        self._conn.commit()

    # ===== Users =====

    @staticmethod
    def _row_to_user(row: sqlite3.Row) -> User:
        return User(
            id=row["id"],
            github_id=row["github_id"],
            name=row["name"],
            login=row["login"],
            avatar_url=row["avatar_url"],
        )

    def create_user(self, github_id: int, login: str, name: str, avatar_url: str) -> User:
        """
        Insert a new user with a generated id.

        Raises:
            sqlite3.IntegrityError: if a user with this github_id exists
        """
        user = User(
            id=str(uuid.uuid4()),
            github_id=github_id,
            name=name,
            login=login,
            avatar_url=avatar_url,
        )
        with self._lock:
            self._conn.execute(
                "INSERT INTO users (id, github_id, name, login, avatar_url) VALUES (?, ?, ?, ?, ?)",
                (user.id, user.github_id, user.name, user.login, user.avatar_url),
            )
            self._conn.commit()
        return user

    def get_user(self, user_id: str) -> Optional[User]:
        """Get a user by local id, or None."""
        with self._lock:
            row = self._conn.execute(
                "SELECT * FROM users WHERE id = ?", (user_id,)
            ).fetchone()
        return self._row_to_user(row) if row else None

    def get_user_by_github_id(self, github_id: int) -> Optional[User]:
        """Get a user by GitHub account id, or None."""
        with self._lock:
            row = self._conn.execute(
                "SELECT * FROM users WHERE github_id = ?", (github_id,)
            ).fetchone()
        return self._row_to_user(row) if row else None

    # ===== Memories =====

    @staticmethod
    def _row_to_memory(row: sqlite3.Row) -> Memory:
        return Memory(
            id=row["id"],
            user_id=row["user_id"],
            content=row["content"],
            cover_url=row["cover_url"],
            date=_from_text(row["date"]),
            is_public=bool(row["is_public"]),
            created_at=_from_text(row["created_at"]),
        )

    def create_memory(
        self,
        user_id: str,
        content: str,
        cover_url: str,
        date: Optional[datetime] = None,
        is_public: bool = False,
    ) -> Memory:
        """
        Insert a memory owned by ``user_id``.

        Returns:
            The stored Memory with its generated id and created_at
        """
        memory = Memory(
            id=str(uuid.uuid4()),
            user_id=user_id,
            content=content,
            cover_url=cover_url,
            # Same UTC normalization a later read applies
            date=_from_text(_to_text(date)),
            is_public=is_public,
            created_at=_from_text(_to_text(_utcnow())),
        )
        with self._lock:
            self._conn.execute(
                """
                INSERT INTO memories (id, user_id, content, cover_url, date, is_public, created_at)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    memory.id,
                    memory.user_id,
                    memory.content,
                    memory.cover_url,
                    _to_text(memory.date),
                    int(memory.is_public),
                    _to_text(memory.created_at),
                ),
            )
            self._conn.commit()
        return memory

    def get_memory(self, memory_id: str) -> Optional[Memory]:
        """Get a memory by id, or None."""
        with self._lock:
            row = self._conn.execute(
                "SELECT * FROM memories WHERE id = ?", (memory_id,)
            ).fetchone()
        return self._row_to_memory(row) if row else None

    def list_memories(self, user_id: str, public_only: bool = False) -> List[Memory]:
        """
        List memories owned by a user, oldest first.

        Args:
            user_id: Owner's local id
            public_only: Only return memories flagged public
        """
        query = "SELECT * FROM memories WHERE user_id = ?"
        if public_only:
            query += " AND is_public = 1"
        query += " ORDER BY created_at ASC, rowid ASC"

        with self._lock:
            rows = self._conn.execute(query, (user_id,)).fetchall()
        return [self._row_to_memory(row) for row in rows]

    def update_memory(
        self,
        memory_id: str,
        content: str,
        cover_url: str,
        date: Optional[datetime],
        is_public: bool,
    ) -> Optional[Memory]:
        """
        Overwrite the mutable fields of a memory in one statement.

        Returns:
            The updated Memory, or None if no row had this id
        """
        with self._lock:
            cursor = self._conn.execute(
                """
                UPDATE memories
                SET content = ?, cover_url = ?, date = ?, is_public = ?
                WHERE id = ?
                """,
                (content, cover_url, _to_text(date), int(is_public), memory_id),
            )
            self._conn.commit()
            if cursor.rowcount == 0:
                return None
            row = self._conn.execute(
                "SELECT * FROM memories WHERE id = ?", (memory_id,)
            ).fetchone()
        return self._row_to_memory(row)

    def delete_memory(self, memory_id: str) -> bool:
        """
        Delete a memory.

        Returns:
            True if deleted, False if not found
        """
        with self._lock:
            cursor = self._conn.execute(
                "DELETE FROM memories WHERE id = ?", (memory_id,)
            )
            self._conn.commit()
        return cursor.rowcount > 0

    def close(self) -> None:
        """Close database connection."""
        self._conn.close()
        logger.info("store_closed", db_path=str(self.db_path))

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
