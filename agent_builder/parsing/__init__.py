"""Ingestion triggers: turn uploads, pasted text and web pages into knowledge items.

Responsibilities:
    - PDF text extraction with pypdf
    - Plain text decoding and DOCX placeholders
    - Web page fetching with httpx and regex text extraction
    - Status assignment (completed or error) for every produced item

Output feeds the chunk -> embed -> index pipeline in ``agent_builder.rag``.
"""

from agent_builder.parsing.file_parser import (
    FileParseError,
    PDFContent,
    PDFParseError,
    parse_file,
    parse_pdf,
    text_item,
)
from agent_builder.parsing.web_scraper import ScrapeResult, scrape_to_item, scrape_website

__all__ = [
    "FileParseError",
    "PDFContent",
    "PDFParseError",
    "ScrapeResult",
    "parse_file",
    "parse_pdf",
    "scrape_to_item",
    "scrape_website",
    "text_item",
]
