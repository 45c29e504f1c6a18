"""User-facing essay operations: validate, authenticate, then call out."""

from typing import Any, Dict, List, Optional, Sequence

from pydantic import ValidationError

from essay_writer.agents.citation_agent import citation_agent
from essay_writer.agents.review_agent import review_agent
from essay_writer.agents.tweak_agent import tweak_agent
from essay_writer.errors import InvalidRequestError
from essay_writer.graph.workflow import create_workflow, run_generation
from essay_writer.storage.essay_store import validate_essay_id
from essay_writer.services.container import AppContainer
from essay_writer.state.state import (
    CitationStyle,
    Essay,
    EssayStatus,
    GenerationRequest,
    GenerationResult,
    Review,
)
from essay_writer.utils.text import count_words


def _require_text(value: Optional[str], message: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise InvalidRequestError(message)
    return value


def require_citation_style(style: Optional[str]) -> CitationStyle:
    """Resolve a citation style label or reject it."""
    parsed_style = CitationStyle.parse(style)
    if parsed_style is None:
        allowed = ", ".join(s.value for s in CitationStyle)
        raise InvalidRequestError(f"Unsupported citation style '{style}' (expected one of: {allowed})")
    return parsed_style


class EssayService:
    """
    Entry point for every essay operation.

    Each method rejects invalid input and missing identity before any call to
    the completion API or the store is made.
    """

    def __init__(self, container: AppContainer):
        self.container = container
        self._workflow = None

    @property
    def policy(self):
        return self.container.config.generation

    @property
    def workflow(self):
        if self._workflow is None:
            self._workflow = create_workflow(
                self.container.client,
                policy=self.policy,
                tracker=self.container.tracker
            )
        return self._workflow

    def authenticate(self, token: Optional[str]) -> str:
        return self.container.auth.verify_token(token)

    def write_essay(
        self,
        token: Optional[str],
        topic: str,
        thesis: str = "",
        arguments: Sequence[str] = (),
        word_count: int = 1000,
        style: str = "academic",
        save: bool = False
    ) -> GenerationResult:
        """
        Generate an essay, extending it toward the target length.

        With save=True the result is stored as a draft owned by the caller.
        """
        _require_text(topic, "Topic is required")
        try:
            request = GenerationRequest(
                topic=topic or "",
                thesis=thesis or "",
                arguments=list(arguments),
                word_count=word_count,
                style=style or "academic"
            )
        except ValidationError as e:
            first = e.errors()[0]
            field = ".".join(str(part) for part in first["loc"])
            raise InvalidRequestError(f"Invalid {field}: {first['msg']}")
        user_id = self.authenticate(token)

        result = run_generation(self.workflow, request, self.policy)

        if save:
            essay = self.container.store.create(user_id, {
                "topic": result.topic,
                "thesis": result.thesis,
                "content": result.content,
                "arguments": result.arguments,
                "citations": result.citations,
                "status": EssayStatus.DRAFT,
                "word_count": result.word_count,
            })
            print(f"💾 Saved essay {essay.id}")
        return result

    def review_essay(self, token: Optional[str], content: str, title: str = "") -> Review:
        _require_text(content, "Essay content is required")
        self.authenticate(token)
        return review_agent(content, title or "", self.container.client)

    def tweak_essay(self, token: Optional[str], content: str, feedback: str, title: str = "") -> str:
        _require_text(content, "Essay content is required")
        _require_text(feedback, "Feedback is required for tweaking the essay")
        self.authenticate(token)
        return tweak_agent(content, feedback, title or "", self.container.client)

    def works_cited(self, token: Optional[str], citations: Sequence[str], style: str = "MLA") -> str:
        urls = [c.strip() for c in (citations or []) if isinstance(c, str) and c.strip()]
        if not urls:
            raise InvalidRequestError("A list of citations (URLs) is required")
        parsed_style = require_citation_style(style)
        self.authenticate(token)
        return citation_agent(urls, parsed_style, self.container.client)

    # Persistence

    def create_essay(self, token: Optional[str], data: Dict[str, Any]) -> Essay:
        _require_text(data.get("topic"), "Topic is required")
        user_id = self.authenticate(token)
        return self.container.store.create(user_id, data)

    def get_essay(self, token: Optional[str], essay_id: str) -> Essay:
        validate_essay_id(essay_id)
        user_id = self.authenticate(token)
        return self.container.store.get(essay_id, user_id)

    def update_essay(self, token: Optional[str], essay_id: str, changes: Dict[str, Any]) -> Essay:
        validate_essay_id(essay_id)
        user_id = self.authenticate(token)
        changes = dict(changes)
        if changes.get("content") is not None and changes.get("word_count") is None:
            changes["word_count"] = count_words(changes["content"])
        return self.container.store.update(essay_id, user_id, changes)

    def delete_essay(self, token: Optional[str], essay_id: str) -> None:
        validate_essay_id(essay_id)
        user_id = self.authenticate(token)
        self.container.store.delete(essay_id, user_id)

    def list_essays(self, token: Optional[str]) -> List[Essay]:
        user_id = self.authenticate(token)
        return self.container.store.list_by_owner(user_id)
