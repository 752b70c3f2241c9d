"""Utility modules."""

from cognote.utils.exceptions import (
    CognoteException,
    CompletionError,
    CompletionTimeoutError,
    EmbeddingError,
    InvalidInputError,
    NotFoundError,
    RateLimitError,
    ServiceError,
    VectorSearchError,
)

DEFAULT_CATEGORY = "Research"
DEFAULT_MEMORY_TYPE = "Note"

__all__ = [
    "CognoteException",
    "CompletionError",
    "CompletionTimeoutError",
    "EmbeddingError",
    "InvalidInputError",
    "NotFoundError",
    "RateLimitError",
    "ServiceError",
    "VectorSearchError",
    "DEFAULT_CATEGORY",
    "DEFAULT_MEMORY_TYPE",
    "parse_tags",
]


def parse_tags(tags: str | list[str] | None) -> list[str]:
    """
    Normalize tags given as a list or a comma-separated string.

    Args:
        tags: List of tags, comma-separated string, or None

    Returns:
        Ordered list of non-empty, de-duplicated tag strings
    """
    if tags is None:
        return []
    if isinstance(tags, str):
        tags = tags.split(",")
    parsed: list[str] = []
    for tag in tags:
        tag = tag.strip()
        if tag and tag not in parsed:
            parsed.append(tag)
    return parsed
