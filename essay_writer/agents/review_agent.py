"""ReviewAgent - Rates an essay and suggests improvements."""

import math
from typing import Any, Dict
from essay_writer.errors import ResponseParseError, UpstreamError
from essay_writer.state.state import Review, ReviewRatings
from essay_writer.utils.completion_client import CompletionClient
from essay_writer.utils.prompts import REVIEW_AGENT_SYSTEM_PROMPT, get_review_prompt
from essay_writer.utils.text import parse_json_response

RATING_KEYS = ("grammar", "structure", "substance", "overall")
DEFAULT_RATING = 5
REVIEW_MAX_TOKENS = 1000


def normalize_rating(value: Any) -> int:
    """
    Coerce a model-supplied rating into an integer in [1, 10].

    Missing, boolean, non-numeric and non-finite values fall back to 5.
    Numbers are rounded half up before clamping.
    """
    if isinstance(value, bool) or value is None:
        number = float(DEFAULT_RATING)
    else:
        try:
            number = float(value)
        except (TypeError, ValueError):
            number = float(DEFAULT_RATING)
    if not math.isfinite(number):
        number = float(DEFAULT_RATING)

    return max(1, min(10, math.floor(number + 0.5)))


def build_review(data: Any) -> Review:
    """
    Validate parsed review JSON and normalize its ratings.

    Raises:
        ResponseParseError: If ratings or suggestions are missing or mistyped
    """
    if not isinstance(data, dict):
        raise ResponseParseError("Review response has invalid structure")

    ratings = data.get("ratings")
    suggestions = data.get("suggestions")
    if not isinstance(ratings, dict) or not isinstance(suggestions, list):
        raise ResponseParseError("Review response has invalid structure")

    normalized: Dict[str, int] = {key: normalize_rating(ratings.get(key)) for key in RATING_KEYS}

    return Review(
        ratings=ReviewRatings(**normalized),
        suggestions=[str(s).strip() for s in suggestions if str(s).strip()]
    )


def review_agent(content: str, title: str, client: CompletionClient) -> Review:
    """
    ReviewAgent asks the model for ratings and suggestions.

    Args:
        content: Essay text
        title: Optional essay title
        client: Completion client instance

    Returns:
        Parsed and normalized review

    Raises:
        UpstreamError: If the completion call fails
        ResponseParseError: If the model output is not the expected JSON
    """
    print("🔎 ReviewAgent: Evaluating essay...")

    result = client.complete(
        prompt=get_review_prompt(content, title),
        max_tokens=REVIEW_MAX_TOKENS,
        system=REVIEW_AGENT_SYSTEM_PROMPT,
        name="essay_review"
    )

    if not result.success:
        print(f"  ✗ Error in ReviewAgent: {result.error}")
        raise UpstreamError("generate essay review", result.error)

    try:
        review = build_review(parse_json_response(result.content))
    except ResponseParseError:
        print(f"  ✗ Could not parse review: {result.content[:200]}")
        raise

    print(f"  ✓ Overall rating: {review.ratings.overall}/10")
    print(f"  ✓ Generated {len(review.suggestions)} suggestions")
    return review
