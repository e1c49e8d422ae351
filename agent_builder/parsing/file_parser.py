"""Uploaded file parsing using pypdf.

Turns uploaded files into knowledge items. PDFs are validated and
extracted page by page, plain text is decoded as UTF-8 and Word documents
get a placeholder. A file that cannot be parsed becomes an ``error`` item
carrying the failure message instead of raising.
"""

import io
import logging

from pydantic import BaseModel, Field
from pypdf import PdfReader
from pypdf.errors import PdfReadError

from agent_builder.knowledge.models import ItemKind, ItemStatus, KnowledgeItem

logger = logging.getLogger(__name__)

# Constants
MAX_FILE_SIZE = 10 * 1024 * 1024  # 10MB
MAX_CONTENT_CHARS = 10_000
PDF_MAGIC_BYTES = b"%PDF"
PDF_MIME_TYPE = "application/pdf"
DOCX_PLACEHOLDER = "DOCX file uploaded. Text extraction requires additional processing."


class PDFContent(BaseModel):
    """Extracted content from a PDF file.

    Attributes:
        text: Combined text content from all pages.
        pages: Total number of pages in the document.
        metadata: Document metadata (title, author, etc.).
    """

    text: str
    pages: int = Field(ge=0)
    metadata: dict[str, str | None]


class FileParseError(Exception):
    """Raised when an uploaded file cannot be turned into text."""

    pass


class PDFParseError(FileParseError):
    """Raised when PDF parsing fails."""

    pass


def _validate_pdf_bytes(file_content: bytes) -> None:
    """Validate PDF file content before parsing.

    Args:
        file_content: Raw bytes of the PDF file.

    Raises:
        PDFParseError: If validation fails.
    """
    if not file_content:
        raise PDFParseError("Empty file provided")

    if len(file_content) > MAX_FILE_SIZE:
        size_mb = len(file_content) / (1024 * 1024)
        raise PDFParseError(f"File size ({size_mb:.1f}MB) exceeds maximum allowed (10MB)")

    if not file_content.lstrip()[:10].startswith(PDF_MAGIC_BYTES):
        raise PDFParseError("Invalid PDF: file does not start with PDF header")


def _extract_metadata(reader: PdfReader) -> dict[str, str | None]:
    """Extract the title and author from a PDF reader."""
    metadata: dict[str, str | None] = {}

    try:
        if reader.metadata:
            metadata["title"] = reader.metadata.get("/Title")
            metadata["author"] = reader.metadata.get("/Author")
    except Exception as e:
        logger.warning(f"Failed to extract some metadata: {e}")

    return {k: v for k, v in metadata.items() if v is not None}


def parse_pdf(file_content: bytes) -> PDFContent:
    """Parse a PDF file and extract its text content.

    Args:
        file_content: Raw bytes of the PDF file.

    Returns:
        PDFContent with extracted text, page count, and metadata.

    Raises:
        PDFParseError: If the file is invalid, too large, empty, or corrupt.
    """
    _validate_pdf_bytes(file_content)

    try:
        reader = PdfReader(io.BytesIO(file_content))
        pages = len(reader.pages)
    except PdfReadError as e:
        raise PDFParseError(f"Corrupt or invalid PDF: {e}") from e
    except Exception as e:
        raise PDFParseError(f"Failed to read PDF: {e}") from e

    if pages == 0:
        raise PDFParseError("PDF contains no pages")

    text_parts: list[str] = []
    for i, page in enumerate(reader.pages):
        try:
            page_text = page.extract_text()
            if page_text:
                text_parts.append(page_text)
        except Exception as e:
            logger.warning(f"Failed to extract text from page {i + 1}: {e}")
            continue

    text = "\n\n".join(text_parts)

    if not text.strip():
        logger.warning("PDF contains no extractable text (may be scanned/image-based)")

    return PDFContent(
        text=text,
        pages=pages,
        metadata=_extract_metadata(reader),
    )


def extract_text(filename: str, content_type: str | None, data: bytes) -> str:
    """Extract text from an uploaded file based on its type.

    Args:
        filename: Original file name.
        content_type: MIME type reported by the client.
        data: Raw file bytes.

    Returns:
        Extracted text.

    Raises:
        FileParseError: If the file is too large or cannot be parsed.
    """
    content_type = content_type or ""
    lower_name = filename.lower()

    if content_type == PDF_MIME_TYPE or lower_name.endswith(".pdf"):
        return parse_pdf(data).text

    if len(data) > MAX_FILE_SIZE:
        size_mb = len(data) / (1024 * 1024)
        raise FileParseError(f"File size ({size_mb:.1f}MB) exceeds maximum allowed (10MB)")

    if content_type == "text/plain" or lower_name.endswith(".txt"):
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise FileParseError(f"Text file is not valid UTF-8: {e}") from e

    if "word" in content_type or lower_name.endswith(".docx"):
        return DOCX_PLACEHOLDER

    return data.decode("utf-8", errors="replace")


def parse_file(filename: str, content_type: str | None, data: bytes) -> KnowledgeItem:
    """Turn an uploaded file into a knowledge item.

    Args:
        filename: Original file name.
        content_type: MIME type reported by the client.
        data: Raw file bytes.

    Returns:
        A completed item with content capped at 10,000 characters, or an
        error item whose content is the parse error.
    """
    metadata: dict[str, str | int] = {"mime_type": content_type or "application/octet-stream"}

    try:
        text = extract_text(filename, content_type, data)
    except FileParseError as e:
        logger.warning(f"File parse error for {filename}: {e}")
        return KnowledgeItem(
            kind=ItemKind.FILE,
            title=filename,
            source=filename,
            content=str(e),
            status=ItemStatus.ERROR,
            metadata={**metadata, "error": str(e)},
        )

    content = text[:MAX_CONTENT_CHARS]
    metadata["word_count"] = len(content.split())
    return KnowledgeItem(
        kind=ItemKind.FILE,
        title=filename,
        source=filename,
        content=content,
        status=ItemStatus.COMPLETED,
        metadata=metadata,
    )


def text_item(content: str, title: str = "Pasted Text") -> KnowledgeItem:
    """Build a completed knowledge item from pasted text."""
    content = content[:MAX_CONTENT_CHARS]
    return KnowledgeItem(
        kind=ItemKind.TEXT,
        title=title,
        content=content,
        status=ItemStatus.COMPLETED,
        metadata={"mime_type": "text/plain", "word_count": len(content.split())},
    )
