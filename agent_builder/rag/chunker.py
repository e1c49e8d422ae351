"""Fixed-size overlapping text chunking.

Windows are purely character-offset based: window i starts at
i * (chunk_size - overlap) and holds at most chunk_size characters.
"""

import logging
from collections.abc import Iterable, Iterator

from agent_builder.knowledge.models import KnowledgeItem
from agent_builder.rag.exceptions import ConfigurationError
from agent_builder.rag.models import Chunk, ChunkMetadata

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 500
DEFAULT_OVERLAP = 50


def validate_chunk_params(chunk_size: int, overlap: int) -> None:
    """Check chunk parameters before any window is produced.

    Raises:
        ConfigurationError: If the window could not advance.
    """
    if chunk_size <= 0:
        raise ConfigurationError(f"chunk_size must be positive, got {chunk_size}")
    if overlap < 0:
        raise ConfigurationError(f"overlap must not be negative, got {overlap}")
    if overlap >= chunk_size:
        raise ConfigurationError(
            f"overlap ({overlap}) must be smaller than chunk_size ({chunk_size})"
        )


class TextWindows:
    """Lazy, restartable sequence of trimmed overlapping windows.

    Each call to ``iter()`` starts again from offset 0.
    """

    def __init__(self, text: str, chunk_size: int, overlap: int) -> None:
        self._text = text
        self._chunk_size = chunk_size
        self._step = chunk_size - overlap

    def offsets(self) -> Iterator[int]:
        """Yield the start offset of every window, including blank ones."""
        yield from range(0, len(self._text), self._step)

    def __iter__(self) -> Iterator[str]:
        for start in self.offsets():
            window = self._text[start : start + self._chunk_size].strip()
            if window:
                yield window


def chunk_text(
    text: str,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    overlap: int = DEFAULT_OVERLAP,
) -> TextWindows:
    """Split text into overlapping windows.

    Args:
        text: Raw content to split.
        chunk_size: Maximum characters per window.
        overlap: Characters shared between consecutive windows.

    Returns:
        Iterable of trimmed, non-blank windows in offset order.

    Raises:
        ConfigurationError: If overlap >= chunk_size or sizes are invalid.
    """
    validate_chunk_params(chunk_size, overlap)
    return TextWindows(text, chunk_size, overlap)


def chunk_knowledge(
    items: Iterable[KnowledgeItem],
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    overlap: int = DEFAULT_OVERLAP,
) -> list[Chunk]:
    """Chunk every indexable knowledge item.

    Items that are not completed, or whose content is blank, are skipped.
    Chunk ids take the form ``<item_id>-chunk-<index>`` and are stable
    for identical content and parameters.

    Args:
        items: Knowledge items in the order they should be indexed.
        chunk_size: Maximum characters per chunk.
        overlap: Characters shared between consecutive chunks.

    Returns:
        Flat list of chunks, grouped by item in input order.
    """
    validate_chunk_params(chunk_size, overlap)

    chunks: list[Chunk] = []
    for item in items:
        if not item.is_indexable:
            logger.debug(f"Skipping knowledge item {item.id} ({item.status.value})")
            continue

        metadata = ChunkMetadata(
            source=item.source_label,
            type=item.kind.value,
            item_id=item.id,
        )
        for index, window in enumerate(chunk_text(item.content, chunk_size, overlap)):
            chunks.append(
                Chunk(
                    id=f"{item.id}-chunk-{index}",
                    content=window,
                    metadata=metadata,
                )
            )

    return chunks
