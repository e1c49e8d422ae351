"""Short-lived chat state per session (history and feedback counters)."""

import threading
import time
from typing import Literal

from pydantic import BaseModel, Field

CHAT_SESSION_TTL_SECONDS = 10 * 60


class ChatTurn(BaseModel):
    role: Literal["user", "assistant"]
    content: str


class ChatSession(BaseModel):
    """Conversation state that expires after inactivity."""

    messages: list[ChatTurn] = Field(default_factory=list)
    conversations: int = 0
    thumbs_up: int = 0
    thumbs_down: int = 0
    last_active: float = Field(default_factory=time.monotonic)


class ChatSessionStore:
    """TTL map of session id to ChatSession.

    An expired or missing session is replaced by a fresh one on access.
    """

    def __init__(self, ttl_seconds: float = CHAT_SESSION_TTL_SECONDS) -> None:
        self._sessions: dict[str, ChatSession] = {}
        self._ttl = ttl_seconds
        self._lock = threading.Lock()

    def _get_locked(self, session_id: str) -> ChatSession:
        now = time.monotonic()
        session = self._sessions.get(session_id)
        if session is None or now - session.last_active > self._ttl:
            session = ChatSession(last_active=now)
            self._sessions[session_id] = session
        else:
            session.last_active = now
        return session

    def get(self, session_id: str) -> ChatSession:
        with self._lock:
            return self._get_locked(session_id).model_copy(deep=True)

    def record_turn(self, session_id: str, user_message: str, reply: str) -> ChatSession:
        """Append a user/assistant exchange and count the conversation."""
        with self._lock:
            session = self._get_locked(session_id)
            session.messages.append(ChatTurn(role="user", content=user_message))
            session.messages.append(ChatTurn(role="assistant", content=reply))
            session.conversations += 1
            return session.model_copy(deep=True)

    def record_feedback(self, session_id: str, helpful: bool) -> ChatSession:
        with self._lock:
            session = self._get_locked(session_id)
            if helpful:
                session.thumbs_up += 1
            else:
                session.thumbs_down += 1
            return session.model_copy(deep=True)

    def clear_all(self) -> None:
        with self._lock:
            self._sessions.clear()
