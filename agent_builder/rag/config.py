"""Retrieval pipeline configuration with environment variable loading.

Pydantic-based settings for chunking, embedding and top-K retrieval.
Supports OpenAI and OpenAI-compatible embedding APIs via custom base URL.
"""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field, model_validator

# Load environment variables from .env file
load_dotenv()

DEFAULT_EMBEDDING_MODEL = "text-embedding-3-small"


class RAGConfig(BaseModel):
    """Configuration for the chunk -> embed -> search pipeline.

    The API key may stay empty until the first provider call, so the
    service can start (and serve knowledge listings) without credentials.

    Attributes:
        api_key: API key for the embedding provider.
        base_url: API base URL (None for OpenAI default).
        embedding_model: Embedding model identifier.
        chunk_size: Window length in characters.
        chunk_overlap: Characters shared by consecutive windows.
        embedding_batch_size: Concurrent requests per embedding batch.
        top_k: Number of chunks retrieved per query.
        embedding_timeout: Seconds allowed for embedding a query.
    """

    api_key: str = Field(
        default_factory=lambda: os.getenv("EMBEDDING_API_KEY", os.getenv("OPENAI_API_KEY", "")),
        description="API key for the embedding provider",
    )
    base_url: str | None = Field(
        default_factory=lambda: os.getenv("EMBEDDING_BASE_URL") or None,
        description="API base URL (None for OpenAI default)",
    )
    embedding_model: str = Field(
        default_factory=lambda: os.getenv("EMBEDDING_MODEL", DEFAULT_EMBEDDING_MODEL),
        description="Embedding model to use",
    )
    chunk_size: int = Field(default=500, ge=1, description="Chunk window size in characters")
    chunk_overlap: int = Field(default=50, ge=0, description="Overlap between windows")
    embedding_batch_size: int = Field(
        default=10,
        ge=1,
        description="Number of texts embedded concurrently per batch",
    )
    top_k: int = Field(default=3, ge=1, description="Chunks retrieved per query")
    embedding_timeout: float = Field(
        default_factory=lambda: float(os.getenv("EMBEDDING_TIMEOUT", "5.0")),
        gt=0.0,
        description="Timeout in seconds for query embedding",
    )

    @model_validator(mode="after")
    def validate_overlap(self) -> "RAGConfig":
        """Reject overlap values that would stall the chunk window."""
        if self.chunk_overlap >= self.chunk_size:
            raise ValueError(
                f"chunk_overlap ({self.chunk_overlap}) must be smaller than "
                f"chunk_size ({self.chunk_size})"
            )
        return self


def get_rag_config() -> RAGConfig:
    """Create retrieval configuration from environment.

    Returns:
        Configured RAGConfig instance.
    """
    return RAGConfig()
