"""Completion API client wrapper for essay generation calls."""

import math
import time
import requests
from typing import Dict, Any, Optional, List, TYPE_CHECKING

from essay_writer.state.state import CompletionResult

if TYPE_CHECKING:
    from essay_writer.utils.tracking.base_tracker import BaseTracker


DEFAULT_BASE_URL = "https://api.perplexity.ai"
DEFAULT_MODEL = "sonar"


def token_budget(words: int, multiplier: float, cap: int) -> int:
    """
    Derive a max-output-token budget from a word count.

    Args:
        words: Number of words the model is expected to produce
        multiplier: Tokens per word
        cap: Platform-wide token ceiling

    Returns:
        Token budget, never above cap
    """
    # round first so float noise (1000 * 2.2 == 2200.0000000000005) does not add a token
    return min(cap, math.ceil(round(max(words, 0) * multiplier, 6)))


class CompletionClient:
    """Wrapper for chat-completion calls that normalizes every failure into a result."""

    def __init__(
        self,
        api_key: Optional[str],
        model: str = DEFAULT_MODEL,
        base_url: str = DEFAULT_BASE_URL,
        timeout: Optional[float] = None,
        tracker: Optional["BaseTracker"] = None
    ):
        """
        Initialize completion client.

        Args:
            api_key: Bearer credential for the completion endpoint
            model: Model identifier (e.g., "sonar")
            base_url: API base URL
            timeout: Request timeout in seconds (None uses the transport default)
            tracker: Optional tracker instance for observability
        """
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.chat_url = f"{self.base_url}/chat/completions"
        self.tracker = tracker

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key or ''}",
            "Content-Type": "application/json",
        }

    @staticmethod
    def _parse_body(body: Any) -> CompletionResult:
        """Extract generated text and citations from a response body."""
        try:
            content = body["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            return CompletionResult(success=False, error="Malformed response: missing message content")

        if not isinstance(content, str):
            return CompletionResult(success=False, error="Malformed response: message content is not text")

        citations = body.get("citations") or []
        if not isinstance(citations, list):
            return CompletionResult(success=False, error="Malformed response: citations is not a list")

        return CompletionResult(
            success=True,
            content=content,
            citations=[str(c) for c in citations if c]
        )

    def complete(
        self,
        prompt: str,
        max_tokens: int,
        system: Optional[str] = None,
        name: str = "completion",
    ) -> CompletionResult:
        """
        Issue one chat-completion call.

        Args:
            prompt: User prompt
            max_tokens: Maximum tokens to generate
            system: System prompt (optional)
            name: Call name used for tracking

        Returns:
            CompletionResult with text and citations on success, or an error message
        """
        messages: List[Dict[str, str]] = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": prompt})

        payload = {
            "model": self.model,
            "messages": messages,
            "max_tokens": max_tokens,
        }

        start_time = time.time()
        try:
            response = requests.post(
                self.chat_url,
                headers=self._headers(),
                json=payload,
                timeout=self.timeout
            )
        except requests.exceptions.RequestException as e:
            result = CompletionResult(success=False, error=f"Completion API error: {str(e)}")
        else:
            if not response.ok:
                result = CompletionResult(
                    success=False,
                    error=f"Completion API returned HTTP {response.status_code}"
                )
            else:
                try:
                    body = response.json()
                except ValueError:
                    result = CompletionResult(success=False, error="Malformed response: body is not JSON")
                else:
                    result = self._parse_body(body)

        self._track(name, prompt, system, max_tokens, result, time.time() - start_time)
        return result

    def _track(
        self,
        name: str,
        prompt: str,
        system: Optional[str],
        max_tokens: int,
        result: CompletionResult,
        latency: float
    ) -> None:
        """Report the call to the tracker, if one is enabled."""
        if not self.tracker or not self.tracker.is_enabled():
            return

        full_prompt = prompt
        if system:
            full_prompt = f"System: {system}\n\nUser: {prompt}"

        metadata = {
            "model": self.model,
            "max_tokens": max_tokens,
            "latency_seconds": latency,
            "base_url": self.base_url,
            "citations_count": len(result.citations),
        }
        if result.success:
            response_text = result.content
        else:
            response_text = f"ERROR: {result.error}"
            metadata["error"] = result.error

        self.tracker.track_llm_call(
            name=name,
            prompt=full_prompt,
            response=response_text,
            metadata=metadata
        )
