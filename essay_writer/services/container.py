"""Application-scoped container of lazily constructed collaborators."""

from datetime import timedelta
from functools import cached_property
from pathlib import Path
from typing import Optional

from essay_writer.auth.tokens import TokenAuthority
from essay_writer.errors import ConfigError
from essay_writer.storage.essay_store import JsonEssayStore
from essay_writer.utils.completion_client import CompletionClient
from essay_writer.utils.config import AppConfig
from essay_writer.utils.tracking.base_tracker import BaseTracker
from essay_writer.utils.tracking.langfuse_tracker import create_tracker


class AppContainer:
    """
    Holds one instance of each collaborator for the life of the process.

    Nothing is constructed until first use, so commands that never touch the
    store or the completion API do not need their configuration.
    """

    def __init__(self, config: AppConfig):
        self.config = config

    @cached_property
    def tracker(self) -> Optional[BaseTracker]:
        return create_tracker(self.config.tracking.model_dump())

    @cached_property
    def client(self) -> CompletionClient:
        completion = self.config.completion
        if not completion.api_key:
            raise ConfigError("Completion API key is not defined (completion.api_key)")
        return CompletionClient(
            api_key=completion.api_key,
            model=completion.model,
            base_url=completion.base_url,
            timeout=completion.timeout,
            tracker=self.tracker
        )

    @cached_property
    def auth(self) -> TokenAuthority:
        return TokenAuthority(
            secret=self.config.auth.secret or "",
            ttl=timedelta(days=self.config.auth.token_ttl_days)
        )

    @cached_property
    def store(self) -> JsonEssayStore:
        return JsonEssayStore(Path(self.config.storage.directory))
