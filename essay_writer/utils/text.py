"""Text helpers: word counting and tolerant parsing of model output."""

import json
import re
from typing import Any

from essay_writer.errors import ResponseParseError

_FENCED_BLOCK = re.compile(r"```(?:json)?\s*([\s\S]*?)\s*```", re.IGNORECASE)
_FENCE_MARKERS = re.compile(r"```\w*\n|```")


def count_words(text: str) -> int:
    """Count whitespace-separated tokens in text."""
    if not text:
        return 0
    return len(text.split())


def strip_code_fences(text: str) -> str:
    """Remove markdown code fence markers, keeping the enclosed text."""
    return _FENCE_MARKERS.sub("", text or "").strip()


def parse_json_response(text: str) -> Any:
    """
    Parse JSON emitted by a model.

    Strict parsing is tried first; if that fails, the contents of the first
    fenced code block are parsed instead.

    Raises:
        ResponseParseError: If neither the raw text nor a fenced block is valid JSON
    """
    raw = (text or "").strip()
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        pass

    match = _FENCED_BLOCK.search(raw)
    if match:
        try:
            return json.loads(match.group(1))
        except json.JSONDecodeError as e:
            raise ResponseParseError(f"Failed to parse AI response: {str(e)}")

    raise ResponseParseError(f"Failed to parse AI response: {raw[:200]}")
