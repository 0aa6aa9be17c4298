"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import json
import tempfile
from pathlib import Path
from typing import Generator
from unittest.mock import MagicMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from markdowngit.http import HttpResponse, RequestExecutor
from markdowngit.models.config import (
    MarkdownGitConfig,
    MarkdownServiceConfig,
    ProviderCredentials,
)


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def config() -> MarkdownGitConfig:
    """Configuration with inline credentials (no environment lookups)."""
    return MarkdownGitConfig(
        providers={
            "github": ProviderCredentials(user="octocat", token="gh-token"),
            "gitlab": ProviderCredentials(user="tanuki", token="gl-token"),
            "bitbucket": ProviderCredentials(user="bucket", token="bb-app-password"),
        },
        limit=5,
        markdown_service=MarkdownServiceConfig(user="", token="", token_env=None),
    )


@pytest.fixture
def mock_github_commits() -> list[dict]:
    """Sample GitHub /commits response, newest first."""
    return [
        {
            "sha": "c3",
            "commit": {
                "author": {"name": "Ada Lovelace", "email": "ada@example.com", "date": "2021-03-01T10:00:00Z"},
                "message": "Fix typo in intro",
            },
        },
        {
            "sha": "c2",
            "commit": {
                "author": {"name": "Grace Hopper", "email": "grace@example.com", "date": "2021-02-14T08:30:15Z"},
                "message": "Add usage section",
            },
        },
        {
            "sha": "c1",
            "commit": {
                "author": {"name": "Alan Turing", "email": "alan@example.com", "date": "2020-12-31T23:59:59Z"},
                "message": "Initial post",
            },
        },
    ]


@pytest.fixture
def mock_gitlab_commits() -> list[dict]:
    """Sample GitLab /repository/commits response, newest first."""
    return [
        {
            "id": "ed899a2f4b50b4370feeea94676502b42383c746",
            "author_name": "Ada Lovelace",
            "created_at": "2021-03-01T11:00:00.000+01:00",
            "message": "Update notes",
        },
        {
            "id": "6104942438c14ec7bd21c6cd5bd995272b3faff6",
            "author_name": "Grace Hopper",
            "created_at": "2021-02-01T09:00:00.000+00:00",
            "message": "Create notes",
        },
    ]


@pytest.fixture
def mock_bitbucket_commits() -> dict:
    """Sample Bitbucket /commits response."""
    return {
        "pagelen": 30,
        "values": [
            {
                "hash": "abc123",
                "date": "2021-03-01T10:00:00+00:00",
                "message": "Reword conclusion\n",
                "author": {
                    "raw": "Ada Lovelace <ada@example.com>",
                    "user": {"display_name": "Ada L."},
                },
            },
            {
                "hash": "def456",
                "date": "2021-01-05T07:05:00+00:00",
                "message": "First draft",
                "author": {"raw": "Grace Hopper <grace@example.com>"},
            },
        ],
    }


@pytest.fixture
def mock_notebook_page() -> str:
    """A trimmed nbviewer page."""
    return (
        "<html><head><title>nbviewer</title></head><body>"
        '<div id="header">nav</div>'
        '<div id="notebook-container"><div class="cell"><p>Hello</p></div><div class="cell">World</div></div>'
        "</body></html>"
    )


@pytest.fixture
def mock_executor() -> MagicMock:
    """Request executor that never touches the network.

    Provider calls (execute/get) answer 200 with an empty JSON list; the
    Markdown service (post) echoes a fixed HTML body.
    """
    executor = MagicMock(spec=RequestExecutor)
    executor.execute.return_value = HttpResponse("[]", 200)
    executor.get.return_value = HttpResponse("", 200)
    executor.post.return_value = HttpResponse("<h1>Rendered</h1>", 200)
    return executor


@pytest.fixture
def json_response():
    """Build an HttpResponse carrying a JSON payload."""
    def build(payload, status_code: int = 200) -> HttpResponse:
        return HttpResponse(json.dumps(payload), status_code)
    return build


@pytest.fixture
def provider_registry(config, mock_executor):
    """Create a provider registry with a mocked executor."""
    from markdowngit.providers.registry import ProviderRegistry
    return ProviderRegistry(config, executor=mock_executor)


@pytest.fixture
def github_engine(provider_registry):
    return provider_registry.engine("github")


@pytest.fixture
def gitlab_engine(provider_registry):
    return provider_registry.engine("gitlab")


@pytest.fixture
def bitbucket_engine(provider_registry):
    return provider_registry.engine("bitbucket")


@pytest.fixture
def fastapi_app(provider_registry) -> FastAPI:
    """Create a FastAPI app with shortcode routes for testing."""
    from markdowngit.api.routes import create_shortcode_router, get_provider_registry

    app = FastAPI()
    app.include_router(create_shortcode_router(prefix="/shortcodes"))
    app.dependency_overrides[get_provider_registry] = lambda: provider_registry
    return app


@pytest.fixture
def api_client(fastapi_app: FastAPI) -> TestClient:
    """Create a test client for the FastAPI app."""
    return TestClient(fastapi_app)


# Markers for test categories
def pytest_configure(config):
    config.addinivalue_line("markers", "mock: tests using mocked API responses")
    config.addinivalue_line("markers", "integration: tests requiring network access")
