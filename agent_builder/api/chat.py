"""Chat endpoints: grounded replies and answer feedback."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from agent_builder.agent.chat_agent import ChatGenerationError, ChatService
from agent_builder.api.state import AppState, get_chat_service, get_state
from agent_builder.models.schemas import (
    ChatRequest,
    ChatResponse,
    FeedbackRequest,
    FeedbackResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/chat", tags=["chat"])


@router.post("", response_model=ChatResponse)
async def chat(
    request: ChatRequest,
    service: ChatService = Depends(get_chat_service),
) -> ChatResponse:
    """Answer a message using the session's knowledge when relevant.

    Args:
        request: Session, message and persona.
        service: Chat service.

    Returns:
        ChatResponse with the reply and the sources used.

    Raises:
        502: The language model failed to answer.
    """
    try:
        result = await service.reply(request.session_id, request.message, request.agent_type)
    except ChatGenerationError as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=str(e),
        ) from e

    return ChatResponse(
        reply=result.reply,
        session_id=request.session_id,
        sources=result.sources,
        grounded=result.grounded,
    )


@router.post("/feedback", response_model=FeedbackResponse)
async def chat_feedback(
    request: FeedbackRequest,
    state: AppState = Depends(get_state),
) -> FeedbackResponse:
    """Record a thumbs up or down for the session's answers."""
    session = state.chats.record_feedback(request.session_id, request.helpful)
    return FeedbackResponse(
        session_id=request.session_id,
        conversations=session.conversations,
        thumbs_up=session.thumbs_up,
        thumbs_down=session.thumbs_down,
    )
