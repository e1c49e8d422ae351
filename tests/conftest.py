"""Pytest fixtures and shared test configuration.

Provides reusable fixtures for unit and integration tests.

Fixtures:
    - embedding_provider: AsyncMock-backed stand-in for the OpenAI client
    - rag_config: Pipeline configuration with a test API key
    - embedding_client: EmbeddingClient wired to the fake provider
    - app_state: Fully wired AppState using the fake provider
    - async_client: HTTPX client for API testing
    - mock_session_id: Consistent session ID for tests

The fake provider embeds text as keyword counts over a small vocabulary,
so similarity follows which topics a text mentions.
"""

from collections.abc import AsyncGenerator
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import ASGITransport, AsyncClient

from agent_builder.api.app import create_app
from agent_builder.api.state import AppState
from agent_builder.rag.config import RAGConfig
from agent_builder.rag.embeddings import EmbeddingClient

VOCABULARY = ("pricing", "refund", "shipping", "hours", "warranty")


def keyword_vector(text: str) -> list[float]:
    """Embed text as occurrence counts of the test vocabulary."""
    lowered = text.lower()
    return [float(lowered.count(word)) for word in VOCABULARY]


def embedding_response(vector: list[float]) -> SimpleNamespace:
    """Build an object shaped like an OpenAI embeddings response."""
    return SimpleNamespace(data=[SimpleNamespace(embedding=vector)])


@pytest.fixture
def embedding_provider() -> MagicMock:
    """Fake AsyncOpenAI client whose embeddings follow keyword counts.

    Returns:
        MagicMock with an AsyncMock ``embeddings.create``.
    """

    async def create(*, model: str, input: str) -> SimpleNamespace:
        return embedding_response(keyword_vector(input))

    client = MagicMock()
    client.embeddings.create = AsyncMock(side_effect=create)
    return client


@pytest.fixture
def rag_config() -> RAGConfig:
    """Pipeline configuration with a test key and short timeout."""
    return RAGConfig(api_key="sk-test-key", embedding_timeout=1.0)


@pytest.fixture
def embedding_client(rag_config: RAGConfig, embedding_provider: MagicMock) -> EmbeddingClient:
    return EmbeddingClient(rag_config, client=embedding_provider)


@pytest.fixture
def app_state(rag_config: RAGConfig, embedding_client: EmbeddingClient) -> AppState:
    """Fresh application state using the fake embedding provider."""
    return AppState.create(rag_config, embedding_client)


@pytest.fixture
def mock_session_id() -> str:
    """Generate consistent session ID for testing.

    Returns:
        Predictable session ID for test assertions.
    """
    return "test-session-12345"


@pytest.fixture
async def async_client(app_state: AppState) -> AsyncGenerator[AsyncClient]:
    """Create async HTTP client for API testing.

    Yields:
        Configured AsyncClient bound to an app using ``app_state``.
    """
    transport = ASGITransport(app=create_app(app_state))
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
