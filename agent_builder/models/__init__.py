"""Pydantic models for API requests and responses.

Provides type safety, validation, and automatic OpenAPI documentation.

Models:
    - ChatRequest / ChatResponse: Grounded chat turn
    - FeedbackRequest / FeedbackResponse: Thumbs up/down on answers
    - KnowledgeUploadResponse / KnowledgeListResponse: File and text knowledge
    - TextSourceRequest / ScrapeRequest / SourceResponse: Single sources
    - DeleteKnowledgeResponse: Cascade delete outcome
"""

from agent_builder.models.schemas import (
    ChatRequest,
    ChatResponse,
    DeleteKnowledgeResponse,
    FeedbackRequest,
    FeedbackResponse,
    KnowledgeListResponse,
    KnowledgeUploadResponse,
    ScrapeRequest,
    SourceResponse,
    TextSourceRequest,
)

__all__ = [
    "ChatRequest",
    "ChatResponse",
    "DeleteKnowledgeResponse",
    "FeedbackRequest",
    "FeedbackResponse",
    "KnowledgeListResponse",
    "KnowledgeUploadResponse",
    "ScrapeRequest",
    "SourceResponse",
    "TextSourceRequest",
]
