"""Knowledge endpoints: file upload, pasted text, listing and deletion.

Each stored item that parsed successfully is chunked, embedded and appended
to the session's vector index before the response is returned.
"""

import logging

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile, status

from agent_builder.api.state import AppState, get_state
from agent_builder.knowledge.models import ItemStatus, KnowledgeItem
from agent_builder.models.schemas import (
    DeleteKnowledgeResponse,
    KnowledgeListResponse,
    KnowledgeUploadResponse,
    SourceResponse,
    TextSourceRequest,
)
from agent_builder.parsing.file_parser import MAX_FILE_SIZE, parse_file, text_item
from agent_builder.rag.exceptions import RAGError
from agent_builder.rag.ingestion import IngestionReport

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/knowledge", tags=["knowledge"])

# 10MB limit matches file_parser constant
MAX_UPLOAD_SIZE = MAX_FILE_SIZE


async def _read_and_validate_size(file: UploadFile) -> bytes:
    """Read file content and validate size.

    Args:
        file: The uploaded file.

    Returns:
        File content as bytes.

    Raises:
        HTTPException: 413 if file exceeds size limit.
    """
    content = await file.read()

    if len(content) > MAX_UPLOAD_SIZE:
        size_mb = len(content) / (1024 * 1024)
        raise HTTPException(
            status_code=status.HTTP_413_CONTENT_TOO_LARGE,
            detail=f"File {file.filename} ({size_mb:.1f}MB) exceeds maximum allowed (10MB)",
        )

    return content


async def index_or_fail(
    state: AppState,
    session_id: str,
    items: list[KnowledgeItem],
) -> IngestionReport:
    """Index freshly stored items, turning pipeline failures into a 500 response.

    Embedding batch failures do not raise; they show up in the report.
    When indexing raises, the items are removed from the session again so
    no stored item is left without its vectors.
    """
    try:
        return await state.indexer.index_items(session_id, items)
    except RAGError as e:
        logger.error(f"Failed to index knowledge for session {session_id}: {e}")
        for item in items:
            state.knowledge.remove_item(session_id, item.id)
            state.indexer.remove_item(session_id, item.id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to index knowledge",
        ) from e


@router.post("", response_model=KnowledgeUploadResponse)
async def upload_knowledge(
    session_id: str = Form(..., min_length=1),
    files: list[UploadFile] | None = File(default=None),
    pasted_text: str | None = Form(default=None),
    state: AppState = Depends(get_state),
) -> KnowledgeUploadResponse:
    """Upload files and/or pasted text into a session's knowledge.

    Args:
        session_id: Builder session.
        files: Uploaded files (PDF, text, DOCX, other text formats).
        pasted_text: Optional free text pasted by the user.
        state: Application state.

    Returns:
        KnowledgeUploadResponse with the stored items and ingestion report.

    Raises:
        400: Neither files nor text provided.
        413: A file exceeds the 10MB limit.
        500: Indexing failed.
    """
    files = files or []
    if not files and not (pasted_text and pasted_text.strip()):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No files or text provided",
        )

    parsed: list[KnowledgeItem] = []
    for file in files:
        content = await _read_and_validate_size(file)
        parsed.append(parse_file(file.filename or "upload", file.content_type, content))

    if pasted_text and pasted_text.strip():
        parsed.append(text_item(pasted_text))

    accepted = state.knowledge.add_files(session_id, parsed)
    report = await index_or_fail(state, session_id, accepted)

    return KnowledgeUploadResponse(
        success=all(item.status == ItemStatus.COMPLETED for item in accepted),
        items=accepted,
        dropped=len(parsed) - len(accepted),
        ingestion=report,
        message=f"Successfully processed {len(accepted)} items",
    )


@router.post("/text", response_model=SourceResponse)
async def add_text_source(
    request: TextSourceRequest,
    state: AppState = Depends(get_state),
) -> SourceResponse:
    """Add a standalone text source to a session's knowledge."""
    item = state.knowledge.add_source(request.session_id, text_item(request.content, request.title))
    report = await index_or_fail(state, request.session_id, [item])
    return SourceResponse(success=True, item=item, ingestion=report)


@router.get("", response_model=KnowledgeListResponse)
async def list_knowledge(
    session_id: str = Query(..., min_length=1),
    state: AppState = Depends(get_state),
) -> KnowledgeListResponse:
    """List a session's files and sources; unknown sessions are empty."""
    session = state.knowledge.get(session_id)
    if session is None:
        return KnowledgeListResponse()
    return KnowledgeListResponse(files=session.files, sources=session.sources)


@router.delete("/{session_id}/{item_id}", response_model=DeleteKnowledgeResponse)
async def delete_knowledge(
    session_id: str,
    item_id: str,
    state: AppState = Depends(get_state),
) -> DeleteKnowledgeResponse:
    """Remove a knowledge item and every vector derived from it.

    Raises:
        404: Unknown session or item.
    """
    item = state.knowledge.remove_item(session_id, item_id)
    if item is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Knowledge item not found",
        )

    removed = state.indexer.remove_item(session_id, item_id)
    logger.info(f"Deleted knowledge item {item_id} ({removed} vectors) from session {session_id}")
    return DeleteKnowledgeResponse(item_id=item_id, removed_vectors=removed)
