"""Pydantic models for essay generation, review and persistence."""

from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


class EssayStatus(str, Enum):
    """Lifecycle status of a stored essay."""

    DRAFT = "draft"
    IN_PROGRESS = "in-progress"
    COMPLETE = "complete"


class CitationStyle(str, Enum):
    """Works-cited formatting styles accepted by the citation agent."""

    MLA = "MLA"
    APA = "APA"
    CHICAGO = "Chicago"

    @classmethod
    def parse(cls, value: str) -> Optional["CitationStyle"]:
        """Match a style label case-insensitively, returning None when unknown."""
        normalized = (value or "").strip().lower()
        for style in cls:
            if style.value.lower() == normalized:
                return style
        return None


class StopReason(str, Enum):
    """Why the extension loop stopped."""

    WITHIN_TOLERANCE = "within_tolerance"
    MAX_ATTEMPTS = "max_attempts"
    INSUFFICIENT_PROGRESS = "insufficient_progress"
    EXTENSION_FAILED = "extension_failed"


class GenerationRequest(BaseModel):
    """Immutable brief for a single essay generation run."""

    model_config = ConfigDict(frozen=True)

    topic: str = Field(description="Essay topic")
    thesis: str = Field(default="", description="Central thesis; empty lets the model develop one")
    arguments: List[str] = Field(default_factory=list, description="Key arguments to develop, in order")
    word_count: int = Field(default=1000, gt=0, description="Target essay length in words")
    style: str = Field(default="academic", description="Writing style label")

    @field_validator("topic")
    @classmethod
    def _topic_not_blank(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("Topic is required")
        return value.strip()

    @field_validator("arguments")
    @classmethod
    def _drop_blank_arguments(cls, value: List[str]) -> List[str]:
        return [arg.strip() for arg in value if arg and arg.strip()]

    @field_validator("style")
    @classmethod
    def _default_style(cls, value: str) -> str:
        return value.strip() if value and value.strip() else "academic"


class CompletionResult(BaseModel):
    """Outcome of one call to the completion endpoint."""

    success: bool
    content: str = ""
    citations: List[str] = Field(default_factory=list)
    error: Optional[str] = None


class GenerationState(BaseModel):
    """Shared state for the generation/extension workflow."""

    request: GenerationRequest
    content: str = Field(default="", description="Current essay text")
    citations: List[str] = Field(default_factory=list, description="Citation URLs gathered so far")
    word_count: int = Field(default=0, description="Word count of the current text")
    extension_attempts: int = Field(default=0, description="Extension calls issued")
    stop_reason: Optional[StopReason] = Field(default=None, description="Set when the loop terminates")
    extension_error: Optional[str] = Field(default=None, description="Failure message of the last extension call")
    generation_error: Optional[str] = Field(default=None, description="Failure message of the initial call")


class GenerationResult(BaseModel):
    """Final essay text and citations returned to the caller."""

    content: str
    citations: List[str] = Field(default_factory=list)
    word_count: int
    extension_attempts: int = 0
    topic: str
    thesis: str = ""
    arguments: List[str] = Field(default_factory=list)
    stop_reason: Optional[StopReason] = None
    extension_error: Optional[str] = None


class ReviewRatings(BaseModel):
    """Ratings on a 1-10 scale."""

    grammar: int = Field(ge=1, le=10)
    structure: int = Field(ge=1, le=10)
    substance: int = Field(ge=1, le=10)
    overall: int = Field(ge=1, le=10)


class Review(BaseModel):
    """Structured essay review."""

    ratings: ReviewRatings
    suggestions: List[str] = Field(default_factory=list)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Essay(BaseModel):
    """Stored essay owned by a single user."""

    id: str
    user: str
    topic: str
    thesis: str = ""
    content: str = ""
    arguments: List[str] = Field(default_factory=list)
    citations: List[str] = Field(default_factory=list)
    status: EssayStatus = EssayStatus.DRAFT
    ai_model: str = "sonar"
    word_count: int = 0
    created_at: datetime = Field(default_factory=_utc_now)
    updated_at: datetime = Field(default_factory=_utc_now)
