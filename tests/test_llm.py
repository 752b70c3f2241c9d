"""Tests for the completion client and answer generator."""

import json

import httpx
import pytest

from cognote.services.llm_service import (
    APOLOGY_MESSAGE,
    RATE_LIMIT_MESSAGE,
    AnswerGenerator,
    LLMService,
)
from cognote.utils.exceptions import (
    CompletionError,
    CompletionTimeoutError,
    RateLimitError,
)


def make_llm(handler, api_key: str | None = "test-key") -> LLMService:
    return LLMService(
        base_url="http://llm.test/v1/",
        model="test-model",
        api_key=api_key,
        timeout=5,
        transport=httpx.MockTransport(handler),
    )


def completion(content: str) -> httpx.Response:
    return httpx.Response(200, json={"choices": [{"message": {"content": content}}]})


class TestComplete:
    @pytest.mark.asyncio
    async def test_success(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return completion("  The answer.  ")

        llm = make_llm(handler)
        answer = await llm.complete("system", "question", max_tokens=700, temperature=0.5)

        assert answer == "The answer."
        request = seen[0]
        assert str(request.url) == "http://llm.test/v1/chat/completions"
        assert request.headers["Authorization"] == "Bearer test-key"
        payload = json.loads(request.content)
        assert payload["model"] == "test-model"
        assert payload["max_tokens"] == 700
        assert payload["temperature"] == 0.5
        assert payload["messages"] == [
            {"role": "system", "content": "system"},
            {"role": "user", "content": "question"},
        ]

    @pytest.mark.asyncio
    async def test_no_auth_header_without_key(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return completion("ok")

        await make_llm(handler, api_key="").complete("s", "u", 10, 0.1)

        assert "Authorization" not in seen[0].headers

    @pytest.mark.asyncio
    async def test_rate_limit(self):
        llm = make_llm(lambda request: httpx.Response(429, json={"error": "slow down"}))

        with pytest.raises(RateLimitError):
            await llm.complete("s", "u", 10, 0.1)

    @pytest.mark.asyncio
    async def test_server_error(self):
        llm = make_llm(lambda request: httpx.Response(500, text="boom"))

        with pytest.raises(CompletionError) as exc_info:
            await llm.complete("s", "u", 10, 0.1)
        assert not isinstance(exc_info.value, RateLimitError)

    @pytest.mark.asyncio
    async def test_timeout(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        with pytest.raises(CompletionTimeoutError):
            await make_llm(handler).complete("s", "u", 10, 0.1)

    @pytest.mark.asyncio
    async def test_connection_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(CompletionError):
            await make_llm(handler).complete("s", "u", 10, 0.1)

    @pytest.mark.asyncio
    async def test_empty_content(self):
        llm = make_llm(lambda request: httpx.Response(200, json={"choices": []}))

        with pytest.raises(CompletionError):
            await llm.complete("s", "u", 10, 0.1)

    @pytest.mark.asyncio
    async def test_invalid_json(self):
        llm = make_llm(lambda request: httpx.Response(200, text="not json"))

        with pytest.raises(CompletionError):
            await llm.complete("s", "u", 10, 0.1)


class TestSummarize:
    @pytest.mark.asyncio
    async def test_summary_from_provider(self):
        llm = make_llm(lambda request: completion("Short summary"))

        assert await llm.summarize("A long memory body") == "Short summary"

    @pytest.mark.asyncio
    async def test_summary_falls_back_to_excerpt(self):
        llm = make_llm(lambda request: httpx.Response(503))

        summary = await llm.summarize("y" * 200)

        assert summary == "y" * 150 + "..."


class TestAnswerGenerator:
    @pytest.mark.asyncio
    async def test_generate_sends_question_history_and_context(self):
        payloads: list[dict] = []

        def handler(request: httpx.Request) -> httpx.Response:
            payloads.append(json.loads(request.content))
            return completion("Answer")

        generator = AnswerGenerator(make_llm(handler))
        answer = await generator.generate(
            "What is due?", "Memory 1: Taxes", "user: hello"
        )

        assert answer == "Answer"
        user_message = payloads[0]["messages"][1]["content"]
        assert user_message.startswith("Question: What is due?")
        assert "Recent conversation:\nuser: hello" in user_message
        assert "Memory 1: Taxes" in user_message
        assert payloads[0]["max_tokens"] == 700
        assert payloads[0]["temperature"] == 0.5

    @pytest.mark.asyncio
    async def test_rate_limit_message(self):
        generator = AnswerGenerator(make_llm(lambda request: httpx.Response(429)))

        assert await generator.generate("q", "ctx") == RATE_LIMIT_MESSAGE

    @pytest.mark.asyncio
    async def test_apology_on_failure(self):
        generator = AnswerGenerator(make_llm(lambda request: httpx.Response(500)))

        assert await generator.generate("q", "ctx") == APOLOGY_MESSAGE

    @pytest.mark.asyncio
    async def test_apology_on_timeout(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectTimeout("timed out", request=request)

        generator = AnswerGenerator(make_llm(handler))

        assert await generator.generate("q", "ctx") == APOLOGY_MESSAGE

    def test_user_message_without_history(self):
        message = AnswerGenerator.build_user_message("q", "ctx")

        assert message == "Question: q\n\nUser's memories:\nctx"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "body",
        [
            {"choices": [None]},
            {"choices": {"message": {"content": "hi"}}},
            {"choices": [{"message": {"content": [{"type": "text", "text": "hi"}]}}]},
            {"choices": ["hi"]},
            {"choices": [{"message": "hi"}]},
            {"choices": [{"message": {"content": "   "}}]},
            ["not", "an", "object"],
        ],
    )
    async def test_apology_on_malformed_reply(self, body):
        generator = AnswerGenerator(
            make_llm(lambda request: httpx.Response(200, json=body))
        )

        assert await generator.generate("q", "ctx") == APOLOGY_MESSAGE
