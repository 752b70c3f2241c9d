"""Prompt context assembly from search results and conversation history."""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta

from cognote.config import settings
from cognote.schemas.chat import ConversationTurn
from cognote.services.search_service import SearchResult
from cognote.utils.datetime import ensure_utc, utc_now

logger = logging.getLogger(__name__)

REVIEW_PHRASES = ("weekly review", "week review", "this week", "past week")
NO_MEMORIES_CONTEXT = "No relevant memories found."
TRUNCATION_MARKER = "..."


def is_review_query(query: str) -> bool:
    """
    Keyword check for "review my week" style questions.

    This is a plain substring heuristic; phrasings it does not list are
    treated as ordinary questions.
    """
    text = query.lower()
    if any(phrase in text for phrase in REVIEW_PHRASES):
        return True
    return "review" in text and "week" in text


def _truncate(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    return text[:limit].rstrip() + TRUNCATION_MARKER


@dataclass
class AssembledContext:
    """Context pieces handed to the answer generator."""

    results: list[SearchResult]
    memories: str
    history: str
    review_mode: bool

    @property
    def text(self) -> str:
        if not self.history:
            return self.memories
        return f"{self.memories}\n\nRecent conversation:\n{self.history}"


class ContextAssembler:
    """Builds the prompt context for a question."""

    def __init__(
        self,
        excerpt_chars: int | None = None,
        history_turns: int | None = None,
        review_window_days: int | None = None,
    ):
        self.excerpt_chars = excerpt_chars or settings.context_excerpt_chars
        self.history_turns = history_turns or settings.context_history_turns
        self.review_window = timedelta(
            days=review_window_days or settings.review_window_days
        )

    def select_results(
        self,
        query: str,
        results: list[SearchResult],
        now: datetime | None = None,
    ) -> list[SearchResult]:
        """
        Apply the review-window filter when the query asks for a review.

        Args:
            query: The user's question
            results: Ranked search results
            now: Reference time (defaults to current UTC time)

        Returns:
            Results to use, in their original order
        """
        if not is_review_query(query):
            return results

        cutoff = ensure_utc(now or utc_now()) - self.review_window
        recent = [r for r in results if ensure_utc(r.note.created_at) >= cutoff]
        logger.info(
            f"Review query detected: kept {len(recent)} of {len(results)} results "
            f"created since {cutoff:%Y-%m-%d}"
        )
        return recent

    def format_result(self, index: int, result: SearchResult) -> str:
        """Render one result as a structured text block."""
        note = result.note
        created = ensure_utc(note.created_at).strftime("%Y-%m-%d")
        lines = [
            f"Memory {index}: {note.title}",
            f"Category: {note.category} | Type: {note.memory_type} | Created: {created}",
        ]
        if note.summary:
            lines.append(f"Summary: {note.summary}")
        lines.append(f"Content: {_truncate(note.content, self.excerpt_chars)}")
        if note.tags:
            lines.append(f"Tags: {', '.join(note.tags)}")
        if note.action_items:
            lines.append(f"Action items: {'; '.join(note.action_items)}")
        if note.next_steps:
            lines.append(f"Next steps: {'; '.join(note.next_steps)}")
        if note.priority:
            lines.append(f"Priority: {note.priority}")
        return "\n".join(lines)

    def format_memories(self, results: list[SearchResult]) -> str:
        if not results:
            return NO_MEMORIES_CONTEXT
        return "\n\n---\n\n".join(
            self.format_result(i, r) for i, r in enumerate(results, 1)
        )

    def format_history(self, history: list[ConversationTurn]) -> str:
        """Render the last few turns as ``role: content`` lines."""
        recent = history[-self.history_turns :] if history else []
        return "\n".join(f"{turn.role}: {turn.content}" for turn in recent)

    def build(
        self,
        query: str,
        results: list[SearchResult],
        history: list[ConversationTurn] | None = None,
        now: datetime | None = None,
    ) -> AssembledContext:
        """Filter results for the query and render all context pieces."""
        selected = self.select_results(query, results, now=now)
        return AssembledContext(
            results=selected,
            memories=self.format_memories(selected),
            history=self.format_history(history or []),
            review_mode=is_review_query(query),
        )

    def assemble(
        self,
        query: str,
        results: list[SearchResult],
        history: list[ConversationTurn] | None = None,
    ) -> str:
        """Return the full prompt-ready context string."""
        return self.build(query, results, history).text
