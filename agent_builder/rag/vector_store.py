"""In-memory, per-session vector store with cosine-similarity search.

Each session owns an immutable tuple of records. Writes build a new tuple
and swap it in under a lock, so a concurrent search always scores a
complete snapshot and concurrent adds never lose records.
"""

import logging
import threading
from collections.abc import Sequence

import numpy as np

from agent_builder.rag.exceptions import DimensionMismatchError
from agent_builder.rag.models import SearchHit, VectorRecord

logger = logging.getLogger(__name__)


def cosine_similarities(matrix: np.ndarray, query: np.ndarray) -> np.ndarray:
    """Cosine similarity of every row of ``matrix`` against ``query``.

    Rows (or a query) with zero norm score 0.0.
    """
    norms = np.linalg.norm(matrix, axis=1) * np.linalg.norm(query)
    dots = matrix @ query
    scores = np.zeros(len(matrix), dtype=np.float64)
    np.divide(dots, norms, out=scores, where=norms > 0)
    return scores


class InMemoryVectorStore:
    """Append-only collection of vector records partitioned by session."""

    def __init__(self) -> None:
        self._records: dict[str, tuple[VectorRecord, ...]] = {}
        self._dimensions: dict[str, int] = {}
        self._lock = threading.Lock()

    def add(self, session_id: str, records: Sequence[VectorRecord]) -> None:
        """Append records to a session.

        The first record ever stored fixes the session's dimensionality.
        Either every record in ``records`` is stored or none is.

        Args:
            session_id: Session partition key.
            records: Records to append, in order.

        Raises:
            DimensionMismatchError: If any record's vector length differs
                from the session's dimensionality.
        """
        if not records:
            return

        with self._lock:
            expected = self._dimensions.get(session_id, records[0].dimension)
            for record in records:
                if record.dimension != expected:
                    raise DimensionMismatchError(expected, record.dimension)

            self._records[session_id] = (*self._records.get(session_id, ()), *records)
            self._dimensions[session_id] = expected

        logger.debug(f"Added {len(records)} vectors to session {session_id}")

    def search(
        self,
        session_id: str,
        query_vector: Sequence[float],
        top_k: int = 3,
    ) -> list[SearchHit]:
        """Return the records most similar to the query.

        Ties keep insertion order.

        Args:
            session_id: Session partition key.
            query_vector: Query embedding.
            top_k: Maximum number of hits.

        Returns:
            Up to ``top_k`` hits by descending cosine similarity, or an
            empty list for unknown or empty sessions.

        Raises:
            DimensionMismatchError: If the query length differs from the
                session's dimensionality.
        """
        with self._lock:
            records = self._records.get(session_id, ())
            dimension = self._dimensions.get(session_id)

        if not records or top_k <= 0:
            return []
        if len(query_vector) != dimension:
            raise DimensionMismatchError(dimension, len(query_vector))

        matrix = np.asarray([record.embedding for record in records], dtype=np.float64)
        query = np.asarray(query_vector, dtype=np.float64)
        scores = cosine_similarities(matrix, query)

        order = np.argsort(-scores, kind="stable")[:top_k]
        return [SearchHit(record=records[i], score=float(scores[i])) for i in order]

    def get_all(self, session_id: str) -> list[VectorRecord]:
        """All records of a session in insertion order."""
        with self._lock:
            return list(self._records.get(session_id, ()))

    def count(self, session_id: str) -> int:
        with self._lock:
            return len(self._records.get(session_id, ()))

    def sessions(self) -> list[str]:
        with self._lock:
            return list(self._records)

    def delete_item(self, session_id: str, item_id: str) -> int:
        """Remove every record derived from one knowledge item.

        Args:
            session_id: Session partition key.
            item_id: Identifier of the knowledge item.

        Returns:
            Number of records removed.
        """
        with self._lock:
            records = self._records.get(session_id, ())
            kept = tuple(r for r in records if r.metadata.item_id != item_id)
            removed = len(records) - len(kept)
            if removed:
                self._records[session_id] = kept

        if removed:
            logger.info(f"Removed {removed} vectors of item {item_id} from session {session_id}")
        return removed

    def clear(self, session_id: str) -> None:
        """Drop a session's records and its dimensionality."""
        with self._lock:
            self._records.pop(session_id, None)
            self._dimensions.pop(session_id, None)

    def clear_all(self) -> None:
        with self._lock:
            self._records.clear()
            self._dimensions.clear()
