"""Shared pytest fixtures for essay writer tests."""

from unittest.mock import MagicMock

import pytest

from essay_writer.services.container import AppContainer
from essay_writer.services.essay_service import EssayService
from essay_writer.utils.completion_client import CompletionClient
from essay_writer.utils.config import parse_config

TEST_SECRET = "test-secret-key"


@pytest.fixture
def mock_client():
    """Completion client whose responses are set per test via complete.side_effect."""
    client = MagicMock(spec=CompletionClient)
    return client


@pytest.fixture
def app_config(tmp_path):
    return parse_config({
        "completion": {"api_key": "pplx-test"},
        "auth": {"secret": TEST_SECRET},
        "storage": {"directory": str(tmp_path / "essays")},
    })


@pytest.fixture
def container(app_config, mock_client):
    container = AppContainer(app_config)
    # cached_property values can be pre-seeded through the instance dict
    container.__dict__["client"] = mock_client
    container.__dict__["tracker"] = None
    return container


@pytest.fixture
def service(container):
    return EssayService(container)


@pytest.fixture
def token(container):
    return container.auth.issue_token("user-1")


@pytest.fixture
def other_token(container):
    return container.auth.issue_token("user-2")
