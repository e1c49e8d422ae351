"""Knowledge items and the per-session collections that hold them."""

import time
import uuid
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class ItemKind(str, Enum):
    """Origin of a knowledge item."""

    FILE = "file"
    URL = "url"
    TEXT = "text"


class ItemStatus(str, Enum):
    """Processing status of a knowledge item."""

    PENDING = "pending"
    COMPLETED = "completed"
    ERROR = "error"


class KnowledgeItem(BaseModel):
    """A unit of raw knowledge uploaded, pasted or scraped by a user.

    Attributes:
        id: Opaque identifier, unique within the process.
        kind: Where the content came from.
        title: Display title (file name, page title, etc.).
        content: Raw text content, or the error message for failed items.
        status: Processing status; only completed items are indexed.
        source: Optional URL or filename used as provenance label.
        metadata: Free-form details (word count, description, timestamps).
        added_at: Creation time.
    """

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    kind: ItemKind
    title: str
    content: str = ""
    status: ItemStatus = ItemStatus.PENDING
    source: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)
    added_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @property
    def is_indexable(self) -> bool:
        """Whether the item may be chunked and embedded."""
        return self.status == ItemStatus.COMPLETED and bool(self.content.strip())

    @property
    def source_label(self) -> str:
        return self.source or self.title


class KnowledgeSession(BaseModel):
    """All knowledge a single builder session has collected.

    Attributes:
        files: Uploaded files and pasted text.
        sources: Scraped URLs and standalone text sources.
        last_updated: Monotonic timestamp of the last mutation.
    """

    files: list[KnowledgeItem] = Field(default_factory=list)
    sources: list[KnowledgeItem] = Field(default_factory=list)
    last_updated: float = Field(default_factory=time.monotonic)

    @property
    def items(self) -> list[KnowledgeItem]:
        return [*self.files, *self.sources]

    def touch(self) -> None:
        self.last_updated = time.monotonic()
