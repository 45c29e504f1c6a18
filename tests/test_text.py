"""Tests for word counting and tolerant JSON parsing."""

import pytest

from essay_writer.errors import ResponseParseError
from essay_writer.utils.text import count_words, parse_json_response, strip_code_fences


class TestCountWords:
    def test_mixed_whitespace(self):
        assert count_words("a  b\tc\n") == 3

    def test_empty_string(self):
        assert count_words("") == 0

    def test_whitespace_only(self):
        assert count_words(" \n\t ") == 0

    def test_idempotent_on_normalized_text(self):
        text = "  The   quick\n\nbrown fox  "
        assert count_words(text) == count_words(" ".join(text.split())) == 4

    def test_markdown_headings_count_as_words(self):
        assert count_words("## Introduction\nBody text.") == 4


class TestStripCodeFences:
    def test_removes_language_fence(self):
        assert strip_code_fences("```markdown\n# Title\nBody\n```") == "# Title\nBody"

    def test_plain_text_unchanged(self):
        assert strip_code_fences("  Just an essay.  ") == "Just an essay."


class TestParseJsonResponse:
    def test_strict_json(self):
        assert parse_json_response('{"a": 1}') == {"a": 1}

    def test_surrounding_whitespace(self):
        assert parse_json_response('\n  {"a": 1}\n') == {"a": 1}

    def test_json_fence(self):
        assert parse_json_response('```json\n{"a": [1, 2]}\n```') == {"a": [1, 2]}

    def test_uppercase_json_fence(self):
        assert parse_json_response('```JSON\n{"a": 1}\n```') == {"a": 1}

    def test_bare_fence_with_leading_prose(self):
        text = 'Here is the review:\n```\n{"ok": true}\n```\nThanks!'
        assert parse_json_response(text) == {"ok": True}

    def test_invalid_without_fence_raises(self):
        with pytest.raises(ResponseParseError):
            parse_json_response("The essay is great, 8/10.")

    def test_invalid_inside_fence_raises(self):
        with pytest.raises(ResponseParseError):
            parse_json_response("```json\n{not json}\n```")

    def test_empty_raises(self):
        with pytest.raises(ResponseParseError):
            parse_json_response("")
