"""WriterAgent - Generates the initial essay draft from a brief."""

from typing import Dict, Any
from essay_writer.graph.guards import ExtensionPolicy
from essay_writer.state.state import GenerationState
from essay_writer.utils.completion_client import CompletionClient, token_budget
from essay_writer.utils.prompts import get_essay_prompt
from essay_writer.utils.text import count_words


def writer_agent(state: GenerationState, client: CompletionClient, policy: ExtensionPolicy) -> Dict[str, Any]:
    """
    WriterAgent issues the first generation call for a brief.

    Args:
        state: Current generation state
        client: Completion client instance
        policy: Extension policy supplying the token multiplier and cap

    Returns:
        State updates with the draft, its citations and word count,
        or generation_error when the call failed
    """
    request = state.request
    print(f"✍️  WriterAgent: Drafting {request.word_count}-word {request.style} essay...")

    prompt = get_essay_prompt(request)
    max_tokens = token_budget(request.word_count, policy.initial_token_multiplier, policy.max_tokens)

    result = client.complete(prompt=prompt, max_tokens=max_tokens, name="essay_generate")

    if not result.success:
        print(f"  ✗ Error in WriterAgent: {result.error}")
        return {"generation_error": result.error or "Failed to generate essay"}

    word_count = count_words(result.content)
    print(f"  ✓ Draft: {word_count} words, {len(result.citations)} citations")

    return {
        "content": result.content,
        "citations": list(dict.fromkeys(result.citations)),
        "word_count": word_count,
    }
