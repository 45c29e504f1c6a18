"""CitationAgent - Formats citation URLs into a works cited section."""

from datetime import date, datetime, timezone
from typing import List, Optional
from essay_writer.errors import UpstreamError
from essay_writer.state.state import CitationStyle
from essay_writer.utils.completion_client import CompletionClient
from essay_writer.utils.prompts import get_works_cited_prompt

WORKS_CITED_MAX_TOKENS = 1000


def format_access_date(day: date) -> str:
    """Render an access date as e.g. '19 October 2026'."""
    return f"{day.day} {day.strftime('%B %Y')}"


def citation_agent(
    citations: List[str],
    style: CitationStyle,
    client: CompletionClient,
    access_date: Optional[date] = None
) -> str:
    """
    CitationAgent asks the model to format citations in the given style.

    The output is free-form prose and is returned as-is apart from trimming.

    Args:
        citations: Source URLs
        style: Citation style
        client: Completion client instance
        access_date: Access date to stamp on entries (defaults to today, UTC)

    Returns:
        Formatted works cited block

    Raises:
        UpstreamError: If the completion call fails
    """
    print(f"📚 CitationAgent: Formatting {len(citations)} sources in {style.value}...")

    access_date = access_date or datetime.now(timezone.utc).date()
    result = client.complete(
        prompt=get_works_cited_prompt(citations, style, format_access_date(access_date)),
        max_tokens=WORKS_CITED_MAX_TOKENS,
        name="works_cited"
    )

    if not result.success:
        print(f"  ✗ Error in CitationAgent: {result.error}")
        raise UpstreamError("generate works cited", result.error)

    print("  ✓ Works cited generated")
    return result.content.strip()
