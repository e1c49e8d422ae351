"""Unit tests for AgentConfig, prompts and ChatService."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
import pytest_check as check
from agno.run.base import RunStatus
from pydantic import ValidationError

from agent_builder.agent.chat_agent import ChatGenerationError, ChatService
from agent_builder.agent.config import AgentConfig
from agent_builder.agent.prompts import FAQ_PROMPT, SALES_PROMPT, AgentType, build_system_prompt
from agent_builder.knowledge.chat_sessions import ChatSessionStore
from agent_builder.rag.models import ChunkMetadata, SearchHit, VectorRecord


def _hit(source: str, content: str) -> SearchHit:
    record = VectorRecord(
        id=f"{source}-chunk-0",
        content=content,
        metadata=ChunkMetadata(source=source, type="file", item_id=source),
        embedding=[1.0],
    )
    return SearchHit(record=record, score=0.8)


def _run_output(content: str | None, status: RunStatus = RunStatus.completed) -> SimpleNamespace:
    return SimpleNamespace(content=content, status=status)


def _retriever(hits: list[SearchHit]) -> MagicMock:
    retriever = MagicMock()
    retriever.search = AsyncMock(return_value=hits)
    return retriever


class TestAgentConfig:
    """Tests for AgentConfig validation."""

    def test_valid_config_with_all_fields(self) -> None:
        """Config accepts valid values for all fields."""
        config = AgentConfig(
            api_key="sk-test-key-12345",
            model_name="gpt-4o",
            temperature=0.5,
            max_tokens=2048,
        )

        check.equal(config.api_key, "sk-test-key-12345")
        check.equal(config.model_name, "gpt-4o")
        check.equal(config.temperature, 0.5)
        check.equal(config.max_tokens, 2048)

    def test_config_with_default_values(self) -> None:
        """Defaults keep replies short and focused."""
        config = AgentConfig(api_key="sk-test-key", model_name="gpt-4o-mini")

        check.equal(config.temperature, 0.3)
        check.equal(config.max_tokens, 150)

    def test_config_fails_with_missing_api_key(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            AgentConfig(api_key="")

        assert "API key required" in str(exc_info.value)

    def test_config_fails_without_key_in_environment(self) -> None:
        """The key read from the environment is validated too."""
        with patch.dict("os.environ", {"LLM_API_KEY": "", "OPENAI_API_KEY": ""}):
            with pytest.raises(ValidationError):
                AgentConfig()

    def test_config_fails_with_whitespace_api_key(self) -> None:
        with pytest.raises(ValidationError):
            AgentConfig(api_key="   ")

    def test_config_strips_api_key_whitespace(self) -> None:
        assert AgentConfig(api_key="  sk-test-key  ").api_key == "sk-test-key"

    def test_config_rejects_out_of_range_values(self) -> None:
        with pytest.raises(ValidationError):
            AgentConfig(api_key="sk-test", temperature=2.5)
        with pytest.raises(ValidationError):
            AgentConfig(api_key="sk-test", max_tokens=0)

    def test_config_reads_environment(self) -> None:
        with patch.dict("os.environ", {"LLM_API_KEY": "sk-env-key", "LLM_MODEL": "gpt-4o"}):
            config = AgentConfig()

        check.equal(config.api_key, "sk-env-key")
        check.equal(config.model_name, "gpt-4o")


class TestBuildSystemPrompt:
    def test_without_context_uses_persona_only(self) -> None:
        check.equal(build_system_prompt(AgentType.SALES, ""), SALES_PROMPT)
        check.equal(build_system_prompt(AgentType.FAQ, ""), FAQ_PROMPT)

    def test_context_is_injected(self) -> None:
        prompt = build_system_prompt(AgentType.FAQ, "Source: faq.txt\nRefunds take 5 days.")

        check.is_true(prompt.startswith(FAQ_PROMPT))
        check.is_in("Relevant Information:\nSource: faq.txt\nRefunds take 5 days.", prompt)
        check.is_in("say so politely", prompt)


@patch("agent_builder.agent.chat_agent.OpenAIChat")
@patch("agent_builder.agent.chat_agent.Agent")
class TestChatService:
    """Tests for ChatService with the Agno agent mocked out."""

    def _service(self, hits: list[SearchHit], chats: ChatSessionStore | None = None) -> ChatService:
        config = AgentConfig(api_key="sk-test", model_name="gpt-4o-mini")
        return ChatService(_retriever(hits), chats or ChatSessionStore(), config=config)

    def test_model_created_from_config(self, mock_agent_class: MagicMock, mock_openai_chat: MagicMock) -> None:
        self._service([])

        mock_openai_chat.assert_called_once_with(
            id="gpt-4o-mini",
            api_key="sk-test",
            base_url=None,
            temperature=0.3,
            max_tokens=150,
        )

    async def test_grounded_reply(self, mock_agent_class: MagicMock, mock_openai_chat: MagicMock) -> None:
        """Retrieved knowledge lands in the system prompt and sources are reported."""
        mock_agent_class.return_value.arun = AsyncMock(return_value=_run_output("Five days."))
        chats = ChatSessionStore()
        service = self._service(
            [_hit("faq.txt", "Refunds take 5 days."), _hit("faq.txt", "Refunds go to card."), _hit("site", "x")],
            chats,
        )

        result = await service.reply("s1", "How long do refunds take?", AgentType.FAQ)

        system_prompt = mock_agent_class.call_args.kwargs["system_message"]
        check.is_in("Source: faq.txt\nRefunds take 5 days.", system_prompt)
        check.equal(result.reply, "Five days.")
        check.equal(result.sources, ["faq.txt", "site"])
        check.is_true(result.grounded)
        check.equal(chats.get("s1").conversations, 1)

    async def test_ungrounded_reply(self, mock_agent_class: MagicMock, mock_openai_chat: MagicMock) -> None:
        """Without hits the persona prompt is used unchanged."""
        mock_agent_class.return_value.arun = AsyncMock(return_value=_run_output("Hello!"))

        result = await self._service([]).reply("s1", "hi", AgentType.SALES)

        check.equal(mock_agent_class.call_args.kwargs["system_message"], SALES_PROMPT)
        check.is_false(result.grounded)
        check.equal(result.sources, [])

    async def test_generation_failure_raises(
        self, mock_agent_class: MagicMock, mock_openai_chat: MagicMock
    ) -> None:
        mock_agent_class.return_value.arun = AsyncMock(side_effect=RuntimeError("model down"))
        chats = ChatSessionStore()

        with pytest.raises(ChatGenerationError):
            await self._service([], chats).reply("s1", "hi")

        assert chats.get("s1").conversations == 0

    async def test_error_status_run_raises(
        self, mock_agent_class: MagicMock, mock_openai_chat: MagicMock
    ) -> None:
        """A run that ends in error status is a failure, not a reply."""
        mock_agent_class.return_value.arun = AsyncMock(
            return_value=_run_output("OPENAI_API_KEY not set.", status=RunStatus.error)
        )
        chats = ChatSessionStore()

        with pytest.raises(ChatGenerationError):
            await self._service([], chats).reply("s1", "hi")

        assert chats.get("s1").messages == []

    async def test_empty_model_content(self, mock_agent_class: MagicMock, mock_openai_chat: MagicMock) -> None:
        mock_agent_class.return_value.arun = AsyncMock(return_value=_run_output(None))

        result = await self._service([]).reply("s1", "hi")

        assert result.reply == ""
