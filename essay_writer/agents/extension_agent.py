"""ExtensionAgent - Lengthens a draft that fell short of its target word count."""

from typing import Dict, Any, List
from essay_writer.graph.guards import ExtensionPolicy, made_progress
from essay_writer.state.state import GenerationState, StopReason
from essay_writer.utils.completion_client import CompletionClient, token_budget
from essay_writer.utils.prompts import get_extension_prompt
from essay_writer.utils.text import count_words


def merge_citations(current: List[str], new: List[str]) -> List[str]:
    """Union of two citation lists; existing entries keep their position."""
    merged = list(current)
    for citation in new:
        if citation not in merged:
            merged.append(citation)
    return merged


def extension_agent(state: GenerationState, client: CompletionClient, policy: ExtensionPolicy) -> Dict[str, Any]:
    """
    ExtensionAgent runs one extension attempt.

    A failed call or an extension that adds no more than the progress floor
    ends the loop; the last good text is kept in both cases.

    Args:
        state: Current generation state
        client: Completion client instance
        policy: Extension policy

    Returns:
        State updates for this attempt
    """
    request = state.request
    attempts = state.extension_attempts + 1
    print(
        f"📏 ExtensionAgent: Attempt {attempts}: {state.word_count}/{request.word_count} words"
    )

    prompt = get_extension_prompt(
        state.content,
        request.topic,
        request.thesis,
        request.word_count,
        state.word_count,
        request.style
    )
    max_tokens = token_budget(request.word_count, policy.extension_token_multiplier, policy.max_tokens)

    result = client.complete(prompt=prompt, max_tokens=max_tokens, name="essay_extend")

    if not result.success:
        print(f"  ✗ Extension attempt failed: {result.error}")
        return {
            "extension_attempts": attempts,
            "stop_reason": StopReason.EXTENSION_FAILED,
            "extension_error": result.error,
        }

    citations = merge_citations(state.citations, result.citations)
    new_count = count_words(result.content)

    if not made_progress(state.word_count, new_count, policy.progress_floor):
        print(
            f"  ⚠ Extension added only {new_count - state.word_count} words, stopping"
        )
        return {
            "extension_attempts": attempts,
            "citations": citations,
            "stop_reason": StopReason.INSUFFICIENT_PROGRESS,
        }

    print(f"  ✓ Extended to {new_count} words (+{new_count - state.word_count})")
    return {
        "extension_attempts": attempts,
        "content": result.content,
        "citations": citations,
        "word_count": new_count,
    }
