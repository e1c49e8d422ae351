"""Process-wide application state and the FastAPI dependencies exposing it.

All in-memory stores live on one AppState built when the app is created,
so routes, the retriever and the indexer share explicit instances instead
of module-level singletons.
"""

import logging
import os
from dataclasses import dataclass, field

from fastapi import Depends, HTTPException, Request, status

from agent_builder.agent.chat_agent import ChatService
from agent_builder.knowledge.chat_sessions import ChatSessionStore
from agent_builder.knowledge.store import STARTUP_MAX_AGE_SECONDS, KnowledgeSessionStore
from agent_builder.rag.config import RAGConfig, get_rag_config
from agent_builder.rag.embeddings import EmbeddingClient
from agent_builder.rag.ingestion import KnowledgeIndexer
from agent_builder.rag.retrieval import Retriever
from agent_builder.rag.vector_store import InMemoryVectorStore

logger = logging.getLogger(__name__)


def _startup_max_age() -> float:
    hours = os.getenv("KNOWLEDGE_MAX_AGE_HOURS")
    return float(hours) * 3600 if hours else STARTUP_MAX_AGE_SECONDS


@dataclass
class AppState:
    """Container for every store and service shared across requests."""

    config: RAGConfig
    knowledge: KnowledgeSessionStore
    chats: ChatSessionStore
    vectors: InMemoryVectorStore
    embeddings: EmbeddingClient
    indexer: KnowledgeIndexer
    retriever: Retriever
    chat_service: ChatService | None = field(default=None)

    @classmethod
    def create(
        cls,
        config: RAGConfig | None = None,
        embeddings: EmbeddingClient | None = None,
    ) -> "AppState":
        """Wire up stores and services.

        Args:
            config: Optional pipeline configuration, loaded from environment if omitted.
            embeddings: Optional embedding client (tests inject fakes here).

        Returns:
            Fully wired AppState.
        """
        config = config or get_rag_config()
        embeddings = embeddings or EmbeddingClient(config)
        knowledge = KnowledgeSessionStore()
        vectors = InMemoryVectorStore()

        return cls(
            config=config,
            knowledge=knowledge,
            chats=ChatSessionStore(),
            vectors=vectors,
            embeddings=embeddings,
            indexer=KnowledgeIndexer(
                embeddings,
                vectors,
                chunk_size=config.chunk_size,
                overlap=config.chunk_overlap,
            ),
            retriever=Retriever(
                knowledge,
                embeddings,
                vectors,
                top_k=config.top_k,
                embedding_timeout=config.embedding_timeout,
            ),
        )

    def get_chat_service(self) -> ChatService:
        """Return the chat service, creating it on first use.

        Raises:
            ValueError: If the chat model is not configured.
        """
        if self.chat_service is None:
            self.chat_service = ChatService(self.retriever, self.chats)
        return self.chat_service

    def forget_sessions(self, session_ids: list[str]) -> None:
        """Drop the vector partitions of removed knowledge sessions."""
        for session_id in session_ids:
            self.vectors.clear(session_id)

    def startup_cleanup(self) -> list[str]:
        """Expire stale knowledge sessions and prune excess ones.

        Returns:
            Ids of every removed session.
        """
        removed = self.knowledge.cleanup_old_sessions(_startup_max_age())
        removed += self.knowledge.prune()
        self.forget_sessions(removed)
        return removed

    def shutdown(self) -> None:
        """Discard all in-memory knowledge, vectors and chat state."""
        self.knowledge.cleanup_all()
        self.vectors.clear_all()
        self.chats.clear_all()


def get_state(request: Request) -> AppState:
    """FastAPI dependency returning the application's state."""
    return request.app.state.rag


def get_chat_service(state: AppState = Depends(get_state)) -> ChatService:
    """FastAPI dependency returning the chat service.

    Raises:
        HTTPException: 503 if the chat model has no API key configured.
    """
    try:
        return state.get_chat_service()
    except ValueError as e:
        logger.error(f"Chat service unavailable: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Chat model is not configured",
        ) from e
