"""Process-wide store of knowledge items, partitioned by builder session.

Holds the raw uploaded, pasted and scraped items that feed the retrieval
pipeline. Sessions expire by age and the store prunes itself when too many
sessions accumulate; callers receive the removed session ids so they can
drop the matching vector partitions.
"""

import logging
import threading
import time

from agent_builder.knowledge.models import KnowledgeItem, KnowledgeSession

logger = logging.getLogger(__name__)

MAX_FILES_PER_SESSION = 5
DEFAULT_MAX_AGE_SECONDS = 24 * 60 * 60
STARTUP_MAX_AGE_SECONDS = 2 * 60 * 60
MAX_SESSIONS = 50
SESSIONS_KEPT_ON_PRUNE = 25


class KnowledgeSessionStore:
    """In-memory map of session id to KnowledgeSession."""

    def __init__(self, max_files: int = MAX_FILES_PER_SESSION) -> None:
        self._sessions: dict[str, KnowledgeSession] = {}
        self._lock = threading.Lock()
        self._max_files = max_files

    def __len__(self) -> int:
        return len(self._sessions)

    def get(self, session_id: str) -> KnowledgeSession | None:
        """Return a copy of the session's knowledge, or None if unknown."""
        with self._lock:
            session = self._sessions.get(session_id)
            return session.model_copy(deep=True) if session else None

    def has_items(self, session_id: str) -> bool:
        """Whether the session holds any file or source, without copying it."""
        with self._lock:
            session = self._sessions.get(session_id)
            return session is not None and bool(session.files or session.sources)

    def items(self, session_id: str) -> list[KnowledgeItem]:
        session = self.get(session_id)
        return session.items if session else []

    def add_files(self, session_id: str, files: list[KnowledgeItem]) -> list[KnowledgeItem]:
        """Store uploaded files, capped per session.

        Args:
            session_id: Builder session.
            files: Parsed file or pasted-text items.

        Returns:
            The items actually stored; files beyond the cap are dropped.
        """
        with self._lock:
            session = self._sessions.setdefault(session_id, KnowledgeSession())
            room = max(self._max_files - len(session.files), 0)
            accepted = files[:room]
            session.files.extend(accepted)
            session.touch()

        if len(accepted) < len(files):
            logger.warning(
                f"Session {session_id} reached the {self._max_files} file limit, "
                f"dropped {len(files) - len(accepted)} files"
            )
        return accepted

    def add_source(self, session_id: str, item: KnowledgeItem) -> KnowledgeItem:
        """Store a scraped URL or standalone text source."""
        with self._lock:
            session = self._sessions.setdefault(session_id, KnowledgeSession())
            session.sources.append(item)
            session.touch()
        return item

    def remove_item(self, session_id: str, item_id: str) -> KnowledgeItem | None:
        """Remove an item from either collection.

        Returns:
            The removed item, or None if the session or item is unknown.
        """
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                return None

            for collection in (session.files, session.sources):
                for index, item in enumerate(collection):
                    if item.id == item_id:
                        session.touch()
                        return collection.pop(index)
        return None

    def cleanup_old_sessions(self, max_age_seconds: float = DEFAULT_MAX_AGE_SECONDS) -> list[str]:
        """Delete sessions not updated within ``max_age_seconds``.

        Returns:
            Ids of the deleted sessions.
        """
        now = time.monotonic()
        with self._lock:
            expired = [
                session_id
                for session_id, session in self._sessions.items()
                if now - session.last_updated > max_age_seconds
            ]
            for session_id in expired:
                del self._sessions[session_id]

        for session_id in expired:
            logger.info(f"Cleaned up old knowledge session: {session_id}")
        return expired

    def prune(self, max_sessions: int = MAX_SESSIONS, keep: int = SESSIONS_KEPT_ON_PRUNE) -> list[str]:
        """Keep only the ``keep`` most recent sessions once ``max_sessions`` is exceeded.

        Returns:
            Ids of the deleted sessions.
        """
        with self._lock:
            if len(self._sessions) <= max_sessions:
                return []
            by_age = sorted(self._sessions, key=lambda sid: self._sessions[sid].last_updated)
            removed = by_age[: len(by_age) - keep]
            for session_id in removed:
                del self._sessions[session_id]

        logger.info(f"Cleaned up {len(removed)} oldest knowledge sessions to prevent bloat")
        return removed

    def cleanup_all(self) -> int:
        """Delete every session.

        Returns:
            Number of sessions removed.
        """
        with self._lock:
            count = len(self._sessions)
            self._sessions.clear()

        logger.info(f"Cleaned up all {count} knowledge sessions")
        return count
