"""Error taxonomy for the retrieval pipeline."""


class RAGError(Exception):
    """Base class for retrieval pipeline errors."""

    pass


class ConfigurationError(RAGError):
    """Raised when chunking or retrieval parameters are invalid."""

    pass


class EmptyInputError(RAGError):
    """Raised when an embedding is requested for blank text."""

    pass


class ProviderError(RAGError):
    """Raised when the embedding provider call fails."""

    pass


class DimensionMismatchError(RAGError):
    """Raised when a vector's length differs from the session dimensionality.

    Attributes:
        expected: Dimensionality established for the session.
        actual: Dimensionality of the offending vector.
    """

    def __init__(self, expected: int, actual: int) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(f"Expected vector of dimension {expected}, got {actual}")
