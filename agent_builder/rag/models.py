"""Records flowing through the chunk -> embed -> search pipeline."""

from pydantic import BaseModel, Field


class ChunkMetadata(BaseModel):
    """Provenance of a chunk.

    Attributes:
        source: Source locator of the item, falling back to its title.
        type: Kind of the originating knowledge item (file, url, text).
        item_id: Identifier of the originating knowledge item.
    """

    source: str
    type: str
    item_id: str


class Chunk(BaseModel):
    """A bounded window of a knowledge item's content."""

    id: str
    content: str
    metadata: ChunkMetadata


class VectorRecord(Chunk):
    """A chunk paired with its embedding vector."""

    embedding: list[float] = Field(..., min_length=1)

    @property
    def dimension(self) -> int:
        return len(self.embedding)


class SearchHit(BaseModel):
    """A record returned by similarity search together with its score."""

    record: VectorRecord
    score: float
