"""Extension policy and the transition guards of the extension loop."""

import math
from pydantic import BaseModel, Field

from essay_writer.state.state import GenerationState


class ExtensionPolicy(BaseModel):
    """Tunable constants for length convergence."""

    tolerance_ratio: float = Field(default=0.10, ge=0.0, lt=1.0, description="Allowed shortfall as a fraction of the target")
    progress_floor: int = Field(default=50, ge=0, description="Minimum words an extension must add to continue")
    max_attempts: int = Field(default=3, ge=0, description="Maximum extension calls per run")
    initial_token_multiplier: float = Field(default=2.2, gt=0, description="Tokens per target word for the first draft")
    extension_token_multiplier: float = Field(default=3.0, gt=0, description="Tokens per target word for extensions")
    max_tokens: int = Field(default=4000, gt=0, description="Platform-wide output token ceiling")


def tolerance_words(target: int, ratio: float) -> int:
    """Allowed shortfall in words: ceil(target * ratio)."""
    return math.ceil(target * ratio)


def is_short(word_count: int, target: int, ratio: float) -> bool:
    """True while the text is more than the tolerance below target."""
    return word_count < target - tolerance_words(target, ratio)


def has_attempts_left(attempts: int, max_attempts: int) -> bool:
    return attempts < max_attempts


def made_progress(previous_count: int, new_count: int, floor: int) -> bool:
    """An extension counts as progress only if it adds more than `floor` words."""
    return new_count > previous_count + floor


def should_extend(state: GenerationState, policy: ExtensionPolicy) -> bool:
    """Continue condition of the extension loop."""
    if state.stop_reason is not None:
        return False
    return (
        is_short(state.word_count, state.request.word_count, policy.tolerance_ratio)
        and has_attempts_left(state.extension_attempts, policy.max_attempts)
    )
