"""Completion provider client and answer generation."""

import logging

import httpx

from cognote.config import settings
from cognote.utils.exceptions import (
    CompletionError,
    CompletionTimeoutError,
    RateLimitError,
)

logger = logging.getLogger(__name__)

APOLOGY_MESSAGE = (
    "Sorry, I couldn't generate an answer right now. Please try again later."
)
RATE_LIMIT_MESSAGE = (
    "The assistant is currently busy (rate limit reached). "
    "Please try again in a moment."
)

ANSWER_SYSTEM_PROMPT = """You are Cognote's memory assistant. You answer questions using the user's own stored memories.

Instructions:
- Base your answer on the memories provided. Reference them by title when you use them.
- If no relevant memories are provided, say so plainly and suggest the user save a memory about the topic.
- For reviews or summaries, group related memories and call out action items, next steps and priorities.
- Be concise. Use short paragraphs or bullet lists in markdown."""

SUMMARY_SYSTEM_PROMPT = (
    "You are a summarization assistant. Create a concise summary "
    "(max 150 characters) of the following content. Be brief and capture "
    "the key points."
)


class LLMService:
    """Client for an OpenAI-compatible chat completions API."""

    def __init__(
        self,
        base_url: str | None = None,
        model: str | None = None,
        api_key: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize the LLM service.

        Args:
            base_url: API base URL (ending in /v1 or equivalent)
            model: Model to use for completions
            api_key: Optional API key for authentication
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.base_url = (base_url or settings.llm_base_url).rstrip("/")
        self.model = model or settings.llm_model
        self.api_key = api_key if api_key is not None else settings.llm_api_key
        self.timeout = timeout or settings.llm_timeout
        self._transport = transport

    def _get_headers(self) -> dict[str, str]:
        """Get request headers including auth if configured."""
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    async def complete(
        self,
        system_prompt: str,
        user_message: str,
        max_tokens: int,
        temperature: float,
    ) -> str:
        """
        Run a single chat completion.

        Args:
            system_prompt: System directive
            user_message: User turn
            max_tokens: Output length bound
            temperature: Sampling temperature

        Returns:
            Generated text

        Raises:
            RateLimitError: Provider answered 429
            CompletionTimeoutError: Provider did not answer in time
            CompletionError: Any other transport or response failure
        """
        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_message},
            ],
            "max_tokens": max_tokens,
            "temperature": temperature,
            "stream": False,
        }

        async with httpx.AsyncClient(transport=self._transport) as client:
            try:
                response = await client.post(
                    f"{self.base_url}/chat/completions",
                    headers=self._get_headers(),
                    json=payload,
                    timeout=self.timeout,
                )
                response.raise_for_status()
                result = response.json()
            except httpx.TimeoutException as e:
                raise CompletionTimeoutError(f"Completion timed out: {e}") from e
            except httpx.HTTPStatusError as e:
                if e.response.status_code == 429:
                    raise RateLimitError("Completion provider rate limit") from e
                raise CompletionError(
                    f"Completion provider returned {e.response.status_code}"
                ) from e
            except (httpx.HTTPError, ValueError) as e:
                raise CompletionError(f"Completion request failed: {e}") from e

        return self._extract_content(result)

    @staticmethod
    def _extract_content(result: object) -> str:
        """
        Pull ``choices[0].message.content`` out of an OpenAI-format payload.

        Raises:
            CompletionError: If any level has the wrong shape or the text is empty
        """
        if not isinstance(result, dict):
            raise CompletionError("Completion provider returned an unexpected payload")

        choices = result.get("choices")
        if not isinstance(choices, list) or not choices:
            raise CompletionError("Completion provider returned no choices")
        choice = choices[0]
        if not isinstance(choice, dict):
            raise CompletionError("Completion provider returned a malformed choice")
        message = choice.get("message")
        if not isinstance(message, dict):
            raise CompletionError("Completion provider returned a malformed message")
        content = message.get("content")
        if not isinstance(content, str) or not content.strip():
            raise CompletionError("Completion provider returned no content")
        return content.strip()

    async def summarize(self, content: str, max_chars: int = 150) -> str:
        """
        Short summary of a memory, falling back to its first characters.
        """
        fallback = content[:max_chars] + ("..." if len(content) > max_chars else "")
        if not content:
            return fallback
        try:
            return await self.complete(
                SUMMARY_SYSTEM_PROMPT, content, max_tokens=50, temperature=0.3
            )
        except CompletionError as e:
            logger.warning(f"Summary generation failed, using excerpt: {e}")
            return fallback


class AnswerGenerator:
    """Turns a question and its assembled context into an answer."""

    def __init__(
        self,
        llm: LLMService,
        max_tokens: int | None = None,
        temperature: float | None = None,
    ):
        self.llm = llm
        self.max_tokens = max_tokens or settings.llm_max_tokens
        self.temperature = (
            temperature if temperature is not None else settings.llm_temperature
        )

    @staticmethod
    def build_user_message(query: str, context: str, recent_history: str = "") -> str:
        parts = [f"Question: {query}"]
        if recent_history:
            parts.append(f"Recent conversation:\n{recent_history}")
        parts.append(f"User's memories:\n{context}")
        return "\n\n".join(parts)

    async def generate(self, query: str, context: str, recent_history: str = "") -> str:
        """
        Generate an answer.

        Never raises for provider failures; returns a fixed apology instead.
        """
        user_message = self.build_user_message(query, context, recent_history)
        try:
            answer = await self.llm.complete(
                ANSWER_SYSTEM_PROMPT,
                user_message,
                max_tokens=self.max_tokens,
                temperature=self.temperature,
            )
        except RateLimitError as e:
            logger.warning(f"Answer generation rate limited: {e}")
            return RATE_LIMIT_MESSAGE
        except CompletionTimeoutError as e:
            logger.error(f"Answer generation timed out: {e}")
            return APOLOGY_MESSAGE
        except CompletionError as e:
            logger.error(f"Answer generation failed: {e}")
            return APOLOGY_MESSAGE

        logger.info(f"Generated answer ({len(answer)} chars)")
        return answer


def get_llm_service() -> LLMService:
    """Factory function to create LLMService with configured settings."""
    return LLMService()
