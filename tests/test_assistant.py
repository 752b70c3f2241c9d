"""Tests for the memory assistant pipeline."""

from datetime import timedelta
from unittest.mock import AsyncMock

import httpx
import pytest
from sqlmodel import Session

from cognote.schemas.chat import ConversationTurn
from cognote.services.assistant_service import MemoryAssistant
from cognote.services.llm_service import APOLOGY_MESSAGE, AnswerGenerator, LLMService
from cognote.utils.datetime import utc_now
from cognote.utils.exceptions import EmbeddingError, InvalidInputError

USER = "user-1"


@pytest.fixture(name="generator")
def generator_fixture() -> AsyncMock:
    generator = AsyncMock(spec=AnswerGenerator)
    generator.generate.return_value = "Generated answer"
    return generator


@pytest.fixture(name="assistant")
def assistant_fixture(session: Session, embedder, generator) -> MemoryAssistant:
    return MemoryAssistant(session, embedder, generator)


class TestProcessMessage:
    @pytest.mark.asyncio
    async def test_weekly_review_cites_only_recent_notes(
        self, assistant, generator, make_note, vec
    ):
        now = utc_now()
        recent = [
            make_note(
                title=f"Recent {i}",
                embedding=vec(1, 0),
                created_at=now - timedelta(days=i + 1),
            )
            for i in range(3)
        ]
        for days in (10, 30):
            make_note(
                title=f"Old {days}",
                embedding=vec(1, 0),
                created_at=now - timedelta(days=days),
            )

        result = await assistant.process_message(
            "Give me my weekly review", USER, embedding=vec(1, 0)
        )

        assert {s.note.id for s in result.sources} == {n.id for n in recent}
        assert result.memory_count == 3
        assert result.search_performed is True
        context = generator.generate.await_args.args[1]
        assert "Old 10" not in context
        assert "Old 30" not in context

    @pytest.mark.asyncio
    async def test_no_matches_still_answers(self, assistant, generator):
        result = await assistant.process_message("What about quantum physics?", USER)

        assert result.search_performed is True
        assert result.memory_count == 0
        assert result.sources == []
        assert result.answer == "Generated answer"
        assert generator.generate.await_args.args[1] == "No relevant memories found."

    @pytest.mark.asyncio
    async def test_provider_failure_returns_apology(
        self, session, embedder, make_note, vec
    ):
        llm = LLMService(
            base_url="http://llm.test/v1",
            api_key="test-key",
            transport=httpx.MockTransport(lambda request: httpx.Response(500)),
        )
        make_note(embedding=vec(1, 0))
        assistant = MemoryAssistant(session, embedder, AnswerGenerator(llm))

        result = await assistant.process_message("Anything?", USER, embedding=vec(1, 0))

        assert result.answer == APOLOGY_MESSAGE
        assert result.search_performed is True
        assert result.memory_count == 1

    @pytest.mark.asyncio
    async def test_empty_query_rejected(self, assistant, generator):
        with pytest.raises(InvalidInputError):
            await assistant.process_message("   ", USER)
        generator.generate.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_sources_capped_at_five(self, assistant, make_note, vec):
        for i in range(8):
            make_note(title=f"Note {i}", embedding=vec(1, 0))

        result = await assistant.process_message("Notes?", USER, embedding=vec(1, 0))

        assert len(result.sources) == 5
        assert result.memory_count == 8

    @pytest.mark.asyncio
    async def test_tenant_isolation(self, assistant, make_note, vec):
        make_note(user_id="user-2", title="Secret", embedding=vec(1, 0))

        result = await assistant.process_message("Secret?", USER, embedding=vec(1, 0))

        assert result.sources == []
        assert result.memory_count == 0

    @pytest.mark.asyncio
    async def test_embeds_query_when_no_embedding_given(
        self, assistant, embedder, make_note
    ):
        query = "kubernetes cluster upgrade"
        note = make_note(
            title="Infra",
            content="Nothing lexical matches here",
            embedding=await embedder.embed(query),
        )

        result = await assistant.process_message(query, USER)

        assert [s.note.id for s in result.sources] == [note.id]
        assert result.sources[0].mode == "vector"

    @pytest.mark.asyncio
    async def test_invalid_embedding_replaced(self, assistant, embedder, make_note):
        query = "kubernetes cluster upgrade"
        note = make_note(embedding=await embedder.embed(query))

        result = await assistant.process_message(query, USER, embedding=[0.5] * 12)

        assert [s.note.id for s in result.sources] == [note.id]

    @pytest.mark.asyncio
    async def test_embedding_failure_uses_lexical(self, assistant, embedder, make_note):
        embedder.embed = AsyncMock(side_effect=EmbeddingError("model offline"))
        note = make_note(content="Notes about kubernetes upgrades")

        result = await assistant.process_message("kubernetes", USER)

        assert [s.note.id for s in result.sources] == [note.id]
        assert result.sources[0].mode == "lexical"

    @pytest.mark.asyncio
    async def test_history_forwarded(self, assistant, generator):
        history = [
            ConversationTurn(role="user", content=f"message {i}") for i in range(8)
        ]

        await assistant.process_message("And then?", USER, history=history)

        recent_history = generator.generate.await_args.args[2]
        assert recent_history.splitlines()[0] == "user: message 2"
        assert len(recent_history.splitlines()) == 6
