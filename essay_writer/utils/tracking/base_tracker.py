"""Abstract base class for tracking implementations."""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from typing import Dict, Any, Optional


class BaseTracker(ABC):
    """Interface for tracing CLI operations, workflow nodes and completion calls."""

    @abstractmethod
    def is_enabled(self) -> bool:
        """Check if tracking is enabled."""

    @abstractmethod
    def trace_context(self, name: str, metadata: Optional[Dict[str, Any]] = None) -> AbstractContextManager:
        """
        Context manager around one user-facing operation.

        Yields the trace handle, or None when tracking is disabled.
        """

    @abstractmethod
    def span_context(self, name: str, metadata: Optional[Dict[str, Any]] = None) -> AbstractContextManager:
        """
        Context manager around one workflow node.

        Yields the span handle, or None when tracking is disabled.
        """

    @abstractmethod
    def track_llm_call(
        self,
        name: str,
        prompt: str,
        response: str,
        metadata: Optional[Dict[str, Any]] = None
    ) -> None:
        """
        Record a completion call.

        Args:
            name: Call name/identifier
            prompt: Input prompt
            response: Generated response, or an ERROR: line on failure
            metadata: Model, token budget, latency and similar details
        """
