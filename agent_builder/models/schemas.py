from pydantic import BaseModel, Field, field_validator

from agent_builder.agent.prompts import AgentType
from agent_builder.knowledge.models import KnowledgeItem
from agent_builder.rag.ingestion import IngestionReport


class ChatRequest(BaseModel):
    """Request payload for chat completion endpoint.

    Attributes:
        session_id: Builder session whose knowledge grounds the answer.
        message: User's question or prompt.
        agent_type: Persona to answer as.
    """

    session_id: str = Field(..., min_length=1)
    message: str = Field(..., min_length=1)
    agent_type: AgentType = AgentType.FAQ

    @field_validator("message", mode="before")
    @classmethod
    def strip_message(cls, v: str) -> str:
        """Strip whitespace from message before validation."""
        if isinstance(v, str):
            return v.strip()
        return v


class ChatResponse(BaseModel):
    """Response from the chatbot with source attribution.

    Attributes:
        reply: The assistant's generated answer.
        session_id: Session identifier for follow-up questions.
        sources: Knowledge sources the answer was grounded on.
        grounded: Whether any knowledge was injected into the prompt.
    """

    reply: str
    session_id: str
    sources: list[str] = Field(default_factory=list)
    grounded: bool = False


class FeedbackRequest(BaseModel):
    session_id: str = Field(..., min_length=1)
    helpful: bool


class FeedbackResponse(BaseModel):
    session_id: str
    conversations: int
    thumbs_up: int
    thumbs_down: int


class KnowledgeUploadResponse(BaseModel):
    """Response after processing uploaded files and pasted text.

    Attributes:
        success: Whether every accepted item was parsed.
        items: Items stored for the session.
        dropped: Files rejected by the per-session file limit.
        ingestion: Chunking and embedding outcome.
        message: Human-readable summary.
    """

    success: bool
    items: list[KnowledgeItem]
    dropped: int = 0
    ingestion: IngestionReport
    message: str


class KnowledgeListResponse(BaseModel):
    files: list[KnowledgeItem] = Field(default_factory=list)
    sources: list[KnowledgeItem] = Field(default_factory=list)


class TextSourceRequest(BaseModel):
    """Standalone text knowledge source."""

    session_id: str = Field(..., min_length=1)
    title: str = Field(default="Text Source", min_length=1)
    content: str = Field(..., min_length=1)


class ScrapeRequest(BaseModel):
    """URL to scrape into a knowledge source."""

    session_id: str = Field(..., min_length=1)
    url: str = Field(..., min_length=1)

    @field_validator("url", mode="before")
    @classmethod
    def strip_url(cls, v: str) -> str:
        """Strip whitespace from URL before validation."""
        if isinstance(v, str):
            return v.strip()
        return v


class SourceResponse(BaseModel):
    """Response after adding a single knowledge source.

    Attributes:
        success: Whether the source was fetched and parsed.
        item: The stored item (status completed or error).
        ingestion: Chunking and embedding outcome.
        error: Failure reason when unsuccessful.
    """

    success: bool
    item: KnowledgeItem
    ingestion: IngestionReport
    error: str | None = None


class DeleteKnowledgeResponse(BaseModel):
    item_id: str
    removed_vectors: int
