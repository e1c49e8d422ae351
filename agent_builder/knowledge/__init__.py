"""Session-scoped knowledge and chat state held in process memory."""

from agent_builder.knowledge.chat_sessions import ChatSession, ChatSessionStore
from agent_builder.knowledge.models import ItemKind, ItemStatus, KnowledgeItem, KnowledgeSession
from agent_builder.knowledge.store import KnowledgeSessionStore

__all__ = [
    "ChatSession",
    "ChatSessionStore",
    "ItemKind",
    "ItemStatus",
    "KnowledgeItem",
    "KnowledgeSession",
    "KnowledgeSessionStore",
]
