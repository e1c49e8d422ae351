"""Web page scraping for URL knowledge sources.

Fetches a page with httpx and extracts a title, meta description and
plain text using regular expressions. Scrape failures are returned as
unsuccessful results, never raised.
"""

import logging
import re
from datetime import UTC, datetime
from urllib.parse import urlparse

import httpx
from pydantic import BaseModel

from agent_builder.knowledge.models import ItemKind, ItemStatus, KnowledgeItem

logger = logging.getLogger(__name__)

MAX_SCRAPED_CHARS = 5000
MAX_DESCRIPTION_CHARS = 200
SCRAPE_TIMEOUT_SECONDS = 10.0
USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
)

_TITLE_RE = re.compile(r"<title[^>]*>([^<]+)</title>", re.IGNORECASE)
_SCRIPT_RE = re.compile(r"<script[^>]*>.*?</script>", re.IGNORECASE | re.DOTALL)
_STYLE_RE = re.compile(r"<style[^>]*>.*?</style>", re.IGNORECASE | re.DOTALL)
_TAG_RE = re.compile(r"<[^>]+>")
_WHITESPACE_RE = re.compile(r"\s+")
_DESCRIPTION_RE = re.compile(
    r"<meta[^>]*name=[\"']description[\"'][^>]*content=[\"']([^\"']+)[\"'][^>]*>",
    re.IGNORECASE,
)


class ScrapeResult(BaseModel):
    """Outcome of scraping a single URL.

    Attributes:
        url: The requested URL.
        title: Page title, falling back to the host name.
        content: Visible text, whitespace-collapsed and truncated.
        description: Meta description, truncated.
        success: Whether the page was fetched and parsed.
        error: Failure reason when unsuccessful.
    """

    url: str
    title: str = ""
    content: str = ""
    description: str = ""
    success: bool
    error: str | None = None


def extract_page(html: str, url: str) -> ScrapeResult:
    """Extract title, description and text from raw HTML."""
    title_match = _TITLE_RE.search(html)
    title = title_match.group(1).strip() if title_match else urlparse(url).hostname or url

    text = _SCRIPT_RE.sub("", html)
    text = _STYLE_RE.sub("", text)
    text = _TAG_RE.sub(" ", text)
    text = _WHITESPACE_RE.sub(" ", text).strip()[:MAX_SCRAPED_CHARS]

    description_match = _DESCRIPTION_RE.search(html)
    description = (
        description_match.group(1).strip()[:MAX_DESCRIPTION_CHARS] if description_match else ""
    )

    return ScrapeResult(
        url=url,
        title=title,
        content=text,
        description=description,
        success=True,
    )


async def scrape_website(url: str, client: httpx.AsyncClient | None = None) -> ScrapeResult:
    """Fetch a URL and extract its text.

    Args:
        url: Page to scrape; must start with http.
        client: Optional pre-existing httpx client.

    Returns:
        ScrapeResult, unsuccessful on invalid URLs, HTTP errors or
        network failures.
    """
    if not url or not url.startswith("http"):
        return ScrapeResult(url=url, success=False, error="Invalid URL provided")

    try:
        if client is None:
            async with httpx.AsyncClient(
                headers={"User-Agent": USER_AGENT},
                timeout=SCRAPE_TIMEOUT_SECONDS,
                follow_redirects=True,
            ) as owned_client:
                response = await owned_client.get(url)
        else:
            response = await client.get(url, headers={"User-Agent": USER_AGENT})

        response.raise_for_status()
    except httpx.HTTPStatusError as e:
        logger.warning(f"Scraping {url} failed: {e}")
        return ScrapeResult(
            url=url,
            success=False,
            error=f"HTTP {e.response.status_code}: {e.response.reason_phrase}",
        )
    except httpx.InvalidURL as e:
        logger.warning(f"Scraping {url} failed: {e}")
        return ScrapeResult(url=url, success=False, error="Invalid URL provided")
    except httpx.HTTPError as e:
        logger.warning(f"Scraping {url} failed: {e}")
        return ScrapeResult(url=url, success=False, error=str(e) or "Failed to scrape website")

    return extract_page(response.text, url)


def scrape_to_item(result: ScrapeResult) -> KnowledgeItem:
    """Convert a scrape result into a url knowledge item."""
    if not result.success:
        return KnowledgeItem(
            kind=ItemKind.URL,
            title=result.url,
            source=result.url,
            content=result.error or "Failed to scrape website",
            status=ItemStatus.ERROR,
            metadata={"error": result.error},
        )

    return KnowledgeItem(
        kind=ItemKind.URL,
        title=result.title,
        source=result.url,
        content=result.content,
        status=ItemStatus.COMPLETED,
        metadata={
            "word_count": len(result.content.split()),
            "description": result.description,
            "last_scraped": datetime.now(UTC).isoformat(),
        },
    )
