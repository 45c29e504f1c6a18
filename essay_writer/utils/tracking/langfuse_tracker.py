"""Langfuse implementation of BaseTracker for cloud-hosted tracking."""

import os
from typing import Dict, Any, Optional
from contextlib import contextmanager
from langfuse import Langfuse
from essay_writer.utils.tracking.base_tracker import BaseTracker


class LangfuseTracker(BaseTracker):
    """Langfuse tracking built on start_as_current_observation context managers."""

    def __init__(
        self,
        public_key: Optional[str] = None,
        secret_key: Optional[str] = None,
        host: str = "https://cloud.langfuse.com",
        enabled: bool = True
    ):
        """
        Initialize Langfuse tracker.

        Tracking disables itself when credentials are missing or the client
        cannot be created.

        Args:
            public_key: Langfuse public key (or from LANGFUSE_PUBLIC_KEY env var)
            secret_key: Langfuse secret key (or from LANGFUSE_SECRET_KEY env var)
            host: Langfuse host URL
            enabled: Whether tracking is enabled
        """
        self._client = None
        self._enabled = False

        if not enabled:
            return

        public_key = public_key or os.getenv("LANGFUSE_PUBLIC_KEY")
        secret_key = secret_key or os.getenv("LANGFUSE_SECRET_KEY")
        if not public_key or not secret_key:
            return

        try:
            self._client = Langfuse(public_key=public_key, secret_key=secret_key, host=host)
        except Exception as e:
            print(f"Warning: Failed to initialize Langfuse tracker: {str(e)}")
            return
        self._enabled = True

    def is_enabled(self) -> bool:
        return self._enabled and self._client is not None

    @contextmanager
    def _observation(self, name: str, metadata: Optional[Dict[str, Any]], flush: bool):
        if not self.is_enabled():
            yield None
            return

        with self._client.start_as_current_observation(
            as_type="span",
            name=name,
            metadata=metadata or {}
        ) as observation:
            try:
                yield observation
            finally:
                if flush:
                    self._client.flush()

    def trace_context(self, name: str, metadata: Optional[Dict[str, Any]] = None):
        """Root span for one operation; flushed on exit."""
        return self._observation(name, metadata, flush=True)

    def span_context(self, name: str, metadata: Optional[Dict[str, Any]] = None):
        """Child span for one workflow node."""
        return self._observation(name, metadata, flush=False)

    def track_llm_call(
        self,
        name: str,
        prompt: str,
        response: str,
        metadata: Optional[Dict[str, Any]] = None
    ) -> None:
        """Record a completion call as a generation observation."""
        if not self.is_enabled():
            return

        metadata = dict(metadata or {})
        try:
            with self._client.start_as_current_observation(
                as_type="generation",
                name=name,
                model=metadata.get("model", "unknown"),
                input=prompt,
                output=response,
                metadata=metadata
            ):
                pass
            self._client.flush()
        except Exception as e:
            print(f"Warning: Failed to track LLM call: {str(e)}")


def create_tracker(tracking_config: Dict[str, Any]) -> Optional[LangfuseTracker]:
    """
    Build a tracker from the `tracking` section of the configuration.

    Returns:
        A LangfuseTracker, or None when tracking is disabled or the provider is unknown
    """
    if not tracking_config.get("enabled", False):
        return None

    provider = tracking_config.get("provider", "langfuse")
    if provider != "langfuse":
        print(f"Warning: Unknown tracking provider: {provider}")
        return None

    langfuse_config = tracking_config.get("langfuse", {}) or {}
    return LangfuseTracker(
        public_key=langfuse_config.get("public_key"),
        secret_key=langfuse_config.get("secret_key"),
        host=langfuse_config.get("host") or "https://cloud.langfuse.com",
        enabled=True
    )
