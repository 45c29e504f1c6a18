"""Tracking utilities for observability."""

from essay_writer.utils.tracking.base_tracker import BaseTracker
from essay_writer.utils.tracking.langfuse_tracker import LangfuseTracker, create_tracker

__all__ = ["BaseTracker", "LangfuseTracker", "create_tracker"]
