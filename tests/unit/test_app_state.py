"""Unit tests for AppState startup cleanup, shutdown and the app lifespan."""

import time
from unittest.mock import patch

import pytest
import pytest_check as check

from agent_builder.api.app import create_app
from agent_builder.api.state import AppState
from agent_builder.knowledge.models import ItemKind, ItemStatus, KnowledgeItem
from agent_builder.rag.models import ChunkMetadata, VectorRecord

HOUR = 60 * 60


def _seed(state: AppState, session_id: str) -> None:
    """Store one item and one vector for a session."""
    [item] = state.knowledge.add_files(
        session_id,
        [KnowledgeItem(kind=ItemKind.TEXT, title="t", content="pricing", status=ItemStatus.COMPLETED)],
    )
    state.vectors.add(
        session_id,
        [
            VectorRecord(
                id=f"{item.id}-chunk-0",
                content="pricing",
                metadata=ChunkMetadata(source="t", type="text", item_id=item.id),
                embedding=[1.0, 0.0],
            )
        ],
    )


@pytest.fixture(autouse=True)
def _default_max_age(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("KNOWLEDGE_MAX_AGE_HOURS", raising=False)


class TestStartupCleanup:
    """Tests for pruning stale knowledge when the app starts."""

    def test_stale_sessions_and_vectors_are_removed(self, app_state: AppState) -> None:
        """Sessions idle beyond two hours lose both knowledge and vectors."""
        _seed(app_state, "stale")
        later = time.monotonic() + 3 * HOUR
        with patch("agent_builder.knowledge.models.time.monotonic", return_value=later):
            _seed(app_state, "fresh")

        with patch("agent_builder.knowledge.store.time.monotonic", return_value=later + 10):
            removed = app_state.startup_cleanup()

        check.equal(removed, ["stale"])
        check.is_none(app_state.knowledge.get("stale"))
        check.is_not_none(app_state.knowledge.get("fresh"))
        check.equal(app_state.vectors.sessions(), ["fresh"])

    def test_max_age_from_environment(self, app_state: AppState, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("KNOWLEDGE_MAX_AGE_HOURS", "5")
        _seed(app_state, "idle")

        with patch("agent_builder.knowledge.store.time.monotonic", return_value=time.monotonic() + 3 * HOUR):
            removed = app_state.startup_cleanup()

        check.equal(removed, [])
        check.equal(app_state.vectors.sessions(), ["idle"])

    def test_excess_sessions_are_pruned(self, app_state: AppState) -> None:
        """Beyond fifty sessions only the 25 most recent survive, with their vectors."""
        for i in range(51):
            _seed(app_state, f"s{i:02d}")

        removed = app_state.startup_cleanup()

        check.equal(len(removed), 26)
        check.equal(len(app_state.knowledge), 25)
        check.equal(sorted(app_state.vectors.sessions()), sorted(f"s{i:02d}" for i in range(26, 51)))


class TestShutdown:
    def test_shutdown_clears_every_store(self, app_state: AppState) -> None:
        _seed(app_state, "a")
        app_state.chats.record_turn("a", "hi", "hello!")

        app_state.shutdown()

        check.equal(len(app_state.knowledge), 0)
        check.equal(app_state.vectors.sessions(), [])
        check.equal(app_state.chats.get("a").conversations, 0)


class TestLifespan:
    async def test_lifespan_clears_state_on_exit(self, app_state: AppState) -> None:
        """Fresh knowledge survives startup and everything is discarded at shutdown."""
        app = create_app(app_state)
        _seed(app_state, "live")

        async with app.router.lifespan_context(app):
            check.is_not_none(app_state.knowledge.get("live"))
            check.equal(app_state.vectors.sessions(), ["live"])

        check.equal(len(app_state.knowledge), 0)
        check.equal(app_state.vectors.sessions(), [])
