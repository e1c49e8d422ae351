"""Knowledge indexing: chunk completed items, embed the chunks, append vectors."""

import logging
from collections.abc import Sequence

from pydantic import BaseModel, Field, computed_field

from agent_builder.knowledge.models import KnowledgeItem
from agent_builder.rag.chunker import DEFAULT_CHUNK_SIZE, DEFAULT_OVERLAP, chunk_knowledge
from agent_builder.rag.embeddings import EmbeddingClient
from agent_builder.rag.models import VectorRecord
from agent_builder.rag.vector_store import InMemoryVectorStore

logger = logging.getLogger(__name__)


class IngestionReport(BaseModel):
    """Outcome of indexing a set of knowledge items.

    Attributes:
        items: Items that were chunked.
        chunks: Chunks produced.
        indexed: Chunks embedded and stored.
        failed_chunk_ids: Chunks whose embedding batch failed.
    """

    items: int = 0
    chunks: int = 0
    indexed: int = 0
    failed_chunk_ids: list[str] = Field(default_factory=list)

    @computed_field
    @property
    def failed(self) -> int:
        return len(self.failed_chunk_ids)

    @computed_field
    @property
    def partial(self) -> bool:
        return bool(self.failed_chunk_ids)


class KnowledgeIndexer:
    """Runs the chunk -> embed -> add pipeline for a session."""

    def __init__(
        self,
        embeddings: EmbeddingClient,
        vectors: InMemoryVectorStore,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        overlap: int = DEFAULT_OVERLAP,
    ) -> None:
        self._embeddings = embeddings
        self._vectors = vectors
        self._chunk_size = chunk_size
        self._overlap = overlap

    async def index_items(
        self,
        session_id: str,
        items: Sequence[KnowledgeItem],
    ) -> IngestionReport:
        """Index knowledge items into the session's vector partition.

        Items that are not completed or have no content are skipped.
        Chunks whose embedding batch fails are left out and listed in
        the report; everything else is appended in a single write.

        Args:
            session_id: Builder session to index into.
            items: Knowledge items to index.

        Returns:
            Report of chunk and vector counts.

        Raises:
            DimensionMismatchError: If the embedding model's dimensionality
                differs from vectors already stored for the session.
        """
        chunks = chunk_knowledge(items, self._chunk_size, self._overlap)
        report = IngestionReport(
            items=len({chunk.metadata.item_id for chunk in chunks}),
            chunks=len(chunks),
        )
        if not chunks:
            return report

        vectors = await self._embeddings.embed_batch_aligned([chunk.content for chunk in chunks])

        records: list[VectorRecord] = []
        for chunk, vector in zip(chunks, vectors, strict=True):
            if vector is None:
                report.failed_chunk_ids.append(chunk.id)
                continue
            records.append(VectorRecord(**chunk.model_dump(), embedding=vector))

        self._vectors.add(session_id, records)
        report.indexed = len(records)

        if report.partial:
            logger.warning(
                f"Partial ingestion for session {session_id}: "
                f"{report.failed} of {report.chunks} chunks could not be embedded"
            )
        logger.info(
            f"Indexed {report.indexed} chunks from {report.items} items for session {session_id}"
        )
        return report

    def remove_item(self, session_id: str, item_id: str) -> int:
        """Drop every vector derived from a knowledge item."""
        return self._vectors.delete_item(session_id, item_id)

    async def reindex_session(
        self,
        session_id: str,
        items: Sequence[KnowledgeItem],
    ) -> IngestionReport:
        """Rebuild a session's vector partition from scratch."""
        self._vectors.clear(session_id)
        return await self.index_items(session_id, items)
