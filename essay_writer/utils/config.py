"""Configuration loading from config.yaml with ${VAR} environment substitution."""

import os
import re
import yaml
from pathlib import Path
from typing import Any, Dict, Optional
from pydantic import BaseModel, Field, ValidationError

from essay_writer.errors import ConfigError
from essay_writer.graph.guards import ExtensionPolicy
from essay_writer.utils.completion_client import DEFAULT_BASE_URL, DEFAULT_MODEL

_ENV_PATTERN = re.compile(r'\$\{([^}]+)\}')


class CompletionConfig(BaseModel):
    base_url: str = DEFAULT_BASE_URL
    model: str = DEFAULT_MODEL
    api_key: Optional[str] = None
    timeout: Optional[float] = None


class AuthConfig(BaseModel):
    secret: Optional[str] = None
    token_ttl_days: int = Field(default=7, gt=0)


class StorageConfig(BaseModel):
    directory: str = "./data/essays"


class LangfuseConfig(BaseModel):
    public_key: Optional[str] = None
    secret_key: Optional[str] = None
    host: str = "https://cloud.langfuse.com"


class TrackingConfig(BaseModel):
    enabled: bool = False
    provider: str = "langfuse"
    langfuse: LangfuseConfig = Field(default_factory=LangfuseConfig)


class AppConfig(BaseModel):
    """Validated application configuration."""

    completion: CompletionConfig = Field(default_factory=CompletionConfig)
    generation: ExtensionPolicy = Field(default_factory=ExtensionPolicy)
    auth: AuthConfig = Field(default_factory=AuthConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    tracking: TrackingConfig = Field(default_factory=TrackingConfig)


def substitute_env_vars(value: Any) -> Any:
    """
    Substitute environment variables in config values (e.g., ${VAR}).

    Strings whose placeholders cannot all be resolved become None so that
    unset credentials read as missing rather than as literal text.
    Dicts and lists are processed recursively.
    """
    if isinstance(value, dict):
        return {key: substitute_env_vars(item) for key, item in value.items()}
    if isinstance(value, list):
        return [substitute_env_vars(item) for item in value]
    if not isinstance(value, str):
        return value

    unresolved = False

    def replace_env(match):
        nonlocal unresolved
        resolved = os.getenv(match.group(1))
        if resolved is None:
            unresolved = True
            return match.group(0)
        return resolved

    substituted = _ENV_PATTERN.sub(replace_env, value)
    return None if unresolved else substituted


def parse_config(raw: Optional[Dict[str, Any]]) -> AppConfig:
    """Validate a raw config mapping after environment substitution."""
    try:
        return AppConfig(**substitute_env_vars(raw or {}))
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}")


def load_config(path: Optional[Path] = None) -> AppConfig:
    """
    Load configuration from a YAML file.

    A missing default config.yaml yields the built-in defaults; an explicitly
    requested file must exist.

    Raises:
        ConfigError: If the file is missing, is not valid YAML, or fails validation
    """
    config_path = Path(path) if path else Path("config.yaml")
    if not config_path.exists():
        if path:
            raise ConfigError(f"Config file not found: {config_path}")
        return parse_config({})

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_path}: {e}")

    if raw is not None and not isinstance(raw, dict):
        raise ConfigError(f"Config file must contain a mapping: {config_path}")

    return parse_config(raw)
