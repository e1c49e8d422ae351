"""OpenAI embedding client with batched, fault-tolerant bulk conversion.

Single embeddings fail loudly; bulk embeddings are best-effort. Inputs are
embedded in batches (concurrent requests within a batch, batches one after
another) and a failing batch only loses its own vectors.
"""

import asyncio
import logging
from collections.abc import Sequence

from openai import AsyncOpenAI

from agent_builder.rag.config import RAGConfig, get_rag_config
from agent_builder.rag.exceptions import EmptyInputError, ProviderError, RAGError

logger = logging.getLogger(__name__)

Vector = list[float]


def clean_text(text: str) -> str:
    """Collapse newlines to spaces and trim."""
    return text.replace("\n", " ").strip()


class EmbeddingClient:
    """Converts text into embedding vectors via the OpenAI embeddings API.

    The underlying AsyncOpenAI client is created on first use so the
    service can start without credentials.
    """

    def __init__(
        self,
        config: RAGConfig | None = None,
        client: AsyncOpenAI | None = None,
    ) -> None:
        """Initialize the embedding client.

        Args:
            config: Optional pipeline configuration.
                    Loads from environment if not provided.
            client: Optional pre-existing AsyncOpenAI client.
        """
        self._config = config or get_rag_config()
        self._client = client

    @property
    def model(self) -> str:
        return self._config.embedding_model

    @property
    def batch_size(self) -> int:
        return self._config.embedding_batch_size

    def _get_client(self) -> AsyncOpenAI:
        if self._client is None:
            if not self._config.api_key:
                raise ProviderError(
                    "Embedding API key required. Set EMBEDDING_API_KEY or OPENAI_API_KEY in .env"
                )
            self._client = AsyncOpenAI(
                api_key=self._config.api_key,
                base_url=self._config.base_url,
            )
        return self._client

    async def embed(self, text: str) -> Vector:
        """Embed a single text.

        Args:
            text: Text to embed. Newlines are collapsed before submission.

        Returns:
            The embedding vector.

        Raises:
            EmptyInputError: If the cleaned text is empty.
            ProviderError: If the provider call fails.
        """
        cleaned = clean_text(text)
        if not cleaned:
            raise EmptyInputError("Cannot create embedding for empty text")

        client = self._get_client()
        try:
            response = await client.embeddings.create(model=self.model, input=cleaned)
        except Exception as e:
            logger.error(f"Embedding request failed: {e}")
            raise ProviderError(f"Failed to create embedding: {e}") from e

        if not response.data:
            raise ProviderError("Embedding provider returned no vectors")
        return list(response.data[0].embedding)

    async def _embed_group(self, texts: Sequence[str]) -> list[Vector]:
        """Embed texts concurrently; the first failure cancels the rest.

        Raises:
            RAGError: The first error raised by any request in the group.
        """
        try:
            async with asyncio.TaskGroup() as group:
                tasks = [group.create_task(self.embed(text)) for text in texts]
        except ExceptionGroup as e:
            raise e.exceptions[0] from e
        return [task.result() for task in tasks]

    async def embed_batch_aligned(self, texts: Sequence[str]) -> list[Vector | None]:
        """Embed many texts, keeping one result slot per input.

        Blank inputs and inputs whose batch failed get ``None``.

        Args:
            texts: Texts to embed.

        Returns:
            List the same length as ``texts``.
        """
        results: list[Vector | None] = [None] * len(texts)
        pending = [i for i, text in enumerate(texts) if clean_text(text)]

        if len(pending) < len(texts):
            logger.debug(f"Dropped {len(texts) - len(pending)} blank inputs before embedding")

        for batch_number, start in enumerate(range(0, len(pending), self.batch_size)):
            indices = pending[start : start + self.batch_size]
            try:
                vectors = await self._embed_group([texts[i] for i in indices])
            except RAGError as e:
                logger.error(
                    f"Batch embedding error (batch {batch_number}, {len(indices)} texts): {e}"
                )
                continue

            for i, vector in zip(indices, vectors, strict=True):
                results[i] = vector

        return results

    async def embed_batch(self, texts: Sequence[str]) -> list[Vector]:
        """Embed many texts, best effort.

        Blank inputs are dropped and failed batches are skipped, so the
        result can be shorter than the input.

        Args:
            texts: Texts to embed.

        Returns:
            Vectors for every successfully embedded input, in input order.
        """
        aligned = await self.embed_batch_aligned(texts)
        return [vector for vector in aligned if vector is not None]
