"""Agno agent logic for the builder's chat turn.

Responsibilities:
    - Persona system prompts (sales, FAQ)
    - Grounding prompts with retrieved session knowledge
    - Reply generation with OpenAI models through Agno

Maintains clean separation from the HTTP layer.
"""

from agent_builder.agent.chat_agent import ChatGenerationError, ChatResult, ChatService
from agent_builder.agent.config import AgentConfig, get_agent_config
from agent_builder.agent.prompts import AgentType, build_system_prompt

__all__ = [
    "AgentConfig",
    "AgentType",
    "ChatGenerationError",
    "ChatResult",
    "ChatService",
    "build_system_prompt",
    "get_agent_config",
]
