"""TweakAgent - Revises an essay to address reviewer or user feedback."""

from essay_writer.errors import UpstreamError
from essay_writer.utils.completion_client import CompletionClient
from essay_writer.utils.prompts import TWEAK_AGENT_SYSTEM_PROMPT, get_tweak_prompt
from essay_writer.utils.text import count_words, strip_code_fences

TWEAK_MAX_TOKENS = 3000


def tweak_agent(content: str, feedback: str, title: str, client: CompletionClient) -> str:
    """
    TweakAgent makes targeted edits while preserving the original essay.

    Args:
        content: Essay text
        feedback: Changes the user wants
        title: Optional essay title
        client: Completion client instance

    Returns:
        Improved essay text with any code fences removed

    Raises:
        UpstreamError: If the completion call fails
    """
    print("✨ TweakAgent: Revising essay against feedback...")

    input_word_count = count_words(content)
    result = client.complete(
        prompt=get_tweak_prompt(content, feedback, title),
        max_tokens=TWEAK_MAX_TOKENS,
        system=TWEAK_AGENT_SYSTEM_PROMPT,
        name="essay_tweak"
    )

    if not result.success:
        print(f"  ✗ Error in TweakAgent: {result.error}")
        raise UpstreamError("tweak essay", result.error)

    improved = strip_code_fences(result.content)
    output_word_count = count_words(improved)
    ratio = output_word_count / input_word_count if input_word_count > 0 else 0

    print(f"  📊 {input_word_count} → {output_word_count} words")
    if ratio < 0.7:
        print(f"  ⚠️  WARNING: Revision is only {ratio:.1%} of the original length.")

    return improved
