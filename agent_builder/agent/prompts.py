"""Persona system prompts and grounded prompt assembly."""

from enum import Enum


class AgentType(str, Enum):
    """Chatbot personas a builder can configure."""

    SALES = "sales"
    FAQ = "faq"


SALES_PROMPT = (
    "You are a friendly sales assistant for this business. "
    "Help visitors understand the products and services, answer their questions "
    "clearly, and guide interested customers toward the next step. "
    "Keep answers short and never invent prices, features or policies."
)

FAQ_PROMPT = (
    "You are a helpful support assistant that answers frequently asked questions "
    "about this business. Answer briefly and accurately. "
    "If you are not sure about something, say so instead of guessing."
)

PERSONA_PROMPTS: dict[AgentType, str] = {
    AgentType.SALES: SALES_PROMPT,
    AgentType.FAQ: FAQ_PROMPT,
}

GROUNDING_INSTRUCTIONS = (
    "Use the above information to answer the user's question. "
    "If the information doesn't contain the answer, say so politely."
)


def build_system_prompt(agent_type: AgentType, context: str) -> str:
    """Combine the persona prompt with retrieved knowledge.

    Args:
        agent_type: Persona to answer as.
        context: Formatted retrieval context, possibly empty.

    Returns:
        The persona prompt alone when there is no context, otherwise the
        persona prompt followed by the context and grounding instructions.
    """
    persona = PERSONA_PROMPTS[agent_type]
    if not context:
        return persona
    return f"{persona}\n\nRelevant Information:\n{context}\n\n{GROUNDING_INSTRUCTIONS}"
