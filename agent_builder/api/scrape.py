"""URL scraping endpoint for web knowledge sources."""

import logging

from fastapi import APIRouter, Depends

from agent_builder.api.knowledge import index_or_fail
from agent_builder.api.state import AppState, get_state
from agent_builder.models.schemas import ScrapeRequest, SourceResponse
from agent_builder.parsing.web_scraper import scrape_to_item, scrape_website
from agent_builder.rag.ingestion import IngestionReport

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/scrape", tags=["scrape"])


@router.post("", response_model=SourceResponse)
async def scrape_source(
    request: ScrapeRequest,
    state: AppState = Depends(get_state),
) -> SourceResponse:
    """Scrape a web page into a session's knowledge.

    Failed scrapes are stored as ``error`` items so the builder can show
    them; they are never indexed.

    Args:
        request: Session and URL to scrape.
        state: Application state.

    Returns:
        SourceResponse with the stored item and ingestion report.
    """
    result = await scrape_website(request.url)
    item = state.knowledge.add_source(request.session_id, scrape_to_item(result))

    if not result.success:
        logger.warning(f"Stored failed scrape of {request.url}: {result.error}")
        return SourceResponse(
            success=False,
            item=item,
            ingestion=IngestionReport(),
            error=result.error,
        )

    report = await index_or_fail(state, request.session_id, [item])
    logger.info(f"Scraped {request.url} into session {request.session_id}")
    return SourceResponse(success=True, item=item, ingestion=report)
