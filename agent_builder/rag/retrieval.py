"""RAG search: embed the query, search the session index, format context.

The retriever never fails a chat turn. Embedding timeouts, provider errors
and dimension mismatches are logged and treated as "no relevant knowledge",
which makes the caller answer without grounding.
"""

import asyncio
import logging
from collections.abc import Sequence

from agent_builder.knowledge.store import KnowledgeSessionStore
from agent_builder.rag.embeddings import EmbeddingClient
from agent_builder.rag.exceptions import RAGError
from agent_builder.rag.models import SearchHit
from agent_builder.rag.vector_store import InMemoryVectorStore

logger = logging.getLogger(__name__)

DEFAULT_TOP_K = 3
DEFAULT_EMBEDDING_TIMEOUT = 5.0
HIT_SEPARATOR = "\n---\n"


def format_context(hits: Sequence[SearchHit]) -> str:
    """Render hits as a provenance-annotated context block.

    Args:
        hits: Search hits in descending-similarity order.

    Returns:
        ``"Source: <source>\\n<content>"`` blocks joined by ``"\\n---\\n"``,
        or an empty string when there are no hits.
    """
    return HIT_SEPARATOR.join(
        f"Source: {hit.record.metadata.source}\n{hit.record.content}" for hit in hits
    )


class Retriever:
    """Finds the knowledge relevant to a chat message."""

    def __init__(
        self,
        knowledge: KnowledgeSessionStore,
        embeddings: EmbeddingClient,
        vectors: InMemoryVectorStore,
        top_k: int = DEFAULT_TOP_K,
        embedding_timeout: float = DEFAULT_EMBEDDING_TIMEOUT,
    ) -> None:
        self._knowledge = knowledge
        self._embeddings = embeddings
        self._vectors = vectors
        self._top_k = top_k
        self._embedding_timeout = embedding_timeout

    async def search(self, session_id: str, query: str) -> list[SearchHit]:
        """Return the top-K hits for a query, or [] when nothing applies.

        Args:
            session_id: Builder session whose knowledge is searched.
            query: The user's message.

        Returns:
            Hits in descending-similarity order.
        """
        if not self._knowledge.has_items(session_id):
            logger.debug(f"No knowledge for session {session_id}, skipping retrieval")
            return []

        try:
            query_vector = await asyncio.wait_for(
                self._embeddings.embed(query),
                timeout=self._embedding_timeout,
            )
            hits = self._vectors.search(session_id, query_vector, top_k=self._top_k)
        except TimeoutError:
            logger.warning(
                f"Query embedding timed out after {self._embedding_timeout}s "
                f"for session {session_id}"
            )
            return []
        except RAGError as e:
            logger.warning(f"Retrieval failed for session {session_id}: {e}")
            return []

        if hits:
            logger.info(
                f"Retrieved {len(hits)} chunks for session {session_id} "
                f"(best score {hits[0].score:.3f})"
            )
        return hits

    async def retrieve(self, session_id: str, query: str) -> str:
        """Return the formatted context block for a query.

        Args:
            session_id: Builder session whose knowledge is searched.
            query: The user's message.

        Returns:
            Context string for prompt injection, empty when nothing matched.
        """
        return format_context(await self.search(session_id, query))
