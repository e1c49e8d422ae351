"""Agno chat service with retrieval-grounded answers.

Core module for the builder's chat turn. Each turn retrieves the session's
most relevant knowledge, folds it into the persona's system prompt and asks
an Agno agent backed by an OpenAI model for a reply.

Architecture decisions:

1. **Agent per turn** - The system prompt changes with every message
   (retrieved context differs per query), so a lightweight Agent is built
   for each turn around a shared model instance.

2. **Retrieval never fails a turn** - The retriever degrades to an empty
   context on timeouts and provider errors; the agent then answers from the
   persona prompt alone.

3. **Service wrapper** - Decouples the HTTP layer from Agno's interface and
   centralizes error handling and logging.
"""

import logging

from agno.agent import Agent
from agno.models.openai import OpenAIChat
from agno.run.base import RunStatus
from pydantic import BaseModel, Field

from agent_builder.agent.config import AgentConfig, get_agent_config
from agent_builder.agent.prompts import AgentType, build_system_prompt
from agent_builder.knowledge.chat_sessions import ChatSessionStore
from agent_builder.rag.retrieval import Retriever, format_context

logger = logging.getLogger(__name__)


class ChatGenerationError(Exception):
    """Raised when the language model fails to produce a reply."""

    pass


class ChatResult(BaseModel):
    """Outcome of a chat turn.

    Attributes:
        reply: The assistant's answer.
        sources: Unique source labels of the knowledge used, best first.
        grounded: Whether retrieved knowledge was injected into the prompt.
    """

    reply: str
    sources: list[str] = Field(default_factory=list)
    grounded: bool = False


class ChatService:
    """Answers chat messages with the configured persona and session knowledge."""

    def __init__(
        self,
        retriever: Retriever,
        chats: ChatSessionStore,
        config: AgentConfig | None = None,
    ) -> None:
        """Initialize the chat service.

        Args:
            retriever: RAG search over the session's knowledge.
            chats: Per-session chat state.
            config: Optional agent configuration.
                    Loads from environment if not provided.
        """
        self._retriever = retriever
        self._chats = chats
        self._config = config or get_agent_config()
        self._model = self._create_model()

    def _create_model(self) -> OpenAIChat:
        """Create the OpenAI model shared by every turn.

        Returns:
            Configured OpenAIChat instance.
        """
        return OpenAIChat(
            id=self._config.model_name,
            api_key=self._config.api_key,
            base_url=self._config.base_url,
            temperature=self._config.temperature,
            max_tokens=self._config.max_tokens,
        )

    def _create_agent(self, system_prompt: str) -> Agent:
        """Create the Agno agent for a single turn.

        Args:
            system_prompt: Persona prompt, with retrieved knowledge when available.

        Returns:
            Agent answering with the given system prompt.
        """
        return Agent(
            model=self._model,
            system_message=system_prompt,
            markdown=False,
        )

    async def reply(
        self,
        session_id: str,
        message: str,
        agent_type: AgentType = AgentType.FAQ,
    ) -> ChatResult:
        """Answer a message for a builder session.

        Args:
            session_id: Session whose knowledge grounds the answer.
            message: The user's message.
            agent_type: Persona to answer as.

        Returns:
            ChatResult with the reply and the sources used.

        Raises:
            ChatGenerationError: If the model call fails or the run ends in error.
        """
        hits = await self._retriever.search(session_id, message)
        context = format_context(hits)
        agent = self._create_agent(build_system_prompt(agent_type, context))

        try:
            response = await agent.arun(message, session_id=session_id)
        except Exception as e:
            logger.error(f"Chat generation failed for session {session_id}: {e}")
            raise ChatGenerationError("Failed to process chat request") from e

        if response.status == RunStatus.error:
            logger.error(f"Chat generation failed for session {session_id}: {response.content}")
            raise ChatGenerationError("Failed to process chat request")

        reply = response.content or ""
        self._chats.record_turn(session_id, message, reply)

        sources = list(dict.fromkeys(hit.record.metadata.source for hit in hits))
        return ChatResult(reply=reply, sources=sources, grounded=bool(context))
