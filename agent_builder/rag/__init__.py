"""Retrieval-augmented generation core.

Turns knowledge items into searchable vectors and finds the chunks that
ground a chat answer.

Components:
    - chunker: fixed-size overlapping windows with provenance
    - embeddings: OpenAI embeddings with batched, fault-tolerant bulk calls
    - vector_store: in-memory per-session cosine-similarity index
    - ingestion: chunk -> embed -> append pipeline
    - retrieval: query embedding, top-K search and context formatting
"""

from agent_builder.rag.chunker import chunk_knowledge, chunk_text
from agent_builder.rag.config import RAGConfig, get_rag_config
from agent_builder.rag.embeddings import EmbeddingClient
from agent_builder.rag.exceptions import (
    ConfigurationError,
    DimensionMismatchError,
    EmptyInputError,
    ProviderError,
    RAGError,
)
from agent_builder.rag.ingestion import IngestionReport, KnowledgeIndexer
from agent_builder.rag.models import Chunk, ChunkMetadata, SearchHit, VectorRecord
from agent_builder.rag.retrieval import Retriever, format_context
from agent_builder.rag.vector_store import InMemoryVectorStore

__all__ = [
    "Chunk",
    "ChunkMetadata",
    "ConfigurationError",
    "DimensionMismatchError",
    "EmbeddingClient",
    "EmptyInputError",
    "InMemoryVectorStore",
    "IngestionReport",
    "KnowledgeIndexer",
    "ProviderError",
    "RAGConfig",
    "RAGError",
    "Retriever",
    "SearchHit",
    "VectorRecord",
    "chunk_knowledge",
    "chunk_text",
    "format_context",
    "get_rag_config",
]
