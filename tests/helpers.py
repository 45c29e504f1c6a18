"""Builders shared across test modules."""

from typing import List, Optional

from essay_writer.state.state import CompletionResult


def words(count: int, word: str = "word") -> str:
    """Text with exactly `count` words."""
    return " ".join([word] * count)


def ok(content: str, citations: Optional[List[str]] = None) -> CompletionResult:
    return CompletionResult(success=True, content=content, citations=citations or [])


def failed(error: str = "Completion API returned HTTP 500") -> CompletionResult:
    return CompletionResult(success=False, error=error)
