"""Configuration models.

Mirrors the plugin's config file: per-provider default credentials, a global
history limit and the credentials used for the Markdown rendering service.
Tokens can live in the file or in environment variables; never in source.
"""

from __future__ import annotations

import os
from pathlib import Path

import yaml
from pydantic import BaseModel, Field

from markdowngit.models.repository import DEFAULT_HISTORY_LIMIT, Credentials

GITHUB_MARKDOWN_API = "https://api.github.com/markdown"
NBVIEWER_URL = "https://nbviewer.jupyter.org"


class ProviderCredentials(BaseModel):
    """Default credentials for one provider."""

    user: str = Field(default="", description="Account name used for Basic auth")
    token: str = Field(default="", description="Access token (prefer token_env)")
    token_env: str | None = Field(default=None, description="Environment variable holding the token")

    @property
    def resolved_token(self) -> str:
        """Inline token first, then the environment variable."""
        if self.token:
            return self.token
        if self.token_env:
            return os.environ.get(self.token_env, "")
        return ""


class MarkdownServiceConfig(ProviderCredentials):
    """Markdown-to-HTML service endpoint and its credentials."""

    url: str = Field(default=GITHUB_MARKDOWN_API)
    token_env: str | None = Field(default="MARKDOWN_SERVICE_TOKEN")


def _default_providers() -> dict[str, ProviderCredentials]:
    return {
        "github": ProviderCredentials(token_env="GITHUB_TOKEN"),
        "gitlab": ProviderCredentials(token_env="GITLAB_TOKEN"),
        "bitbucket": ProviderCredentials(token_env="BITBUCKET_TOKEN"),
    }


class MarkdownGitConfig(BaseModel):
    """Complete plugin configuration."""

    providers: dict[str, ProviderCredentials] = Field(default_factory=_default_providers)
    limit: int = Field(default=DEFAULT_HISTORY_LIMIT, ge=0, description="Default number of history entries")
    markdown_service: MarkdownServiceConfig = Field(default_factory=MarkdownServiceConfig)
    notebook_viewer_url: str = Field(default=NBVIEWER_URL)
    timeout: float = Field(default=30.0, gt=0, description="HTTP timeout in seconds")

    @classmethod
    def from_yaml(cls, path: Path) -> "MarkdownGitConfig":
        """Load configuration from a YAML file."""
        with open(path) as f:
            data = yaml.safe_load(f) or {}
        providers = data.get("providers")
        if providers is not None:
            # Keys are matched case-insensitively ("Github" in older files)
            data["providers"] = {str(k).lower(): v or {} for k, v in providers.items()}
        return cls.model_validate(data)

    @classmethod
    def load(cls, path: Path | None) -> "MarkdownGitConfig":
        """Load from path if it exists, otherwise return defaults."""
        if path is not None and Path(path).exists():
            return cls.from_yaml(Path(path))
        return cls()

    def provider_defaults(self, provider_id: str) -> ProviderCredentials:
        return self.providers.get(provider_id.lower(), ProviderCredentials())

    def credentials_for(
        self,
        provider_id: str,
        user: str | None = None,
        token: str | None = None,
        limit: int | None = None,
    ) -> Credentials:
        """Build fresh credentials for one render call.

        Non-empty overrides win over the provider's configured defaults. A
        negative limit counts as not given.
        """
        defaults = self.provider_defaults(provider_id)
        if limit is not None and limit < 0:
            limit = None
        return Credentials(
            user=user or defaults.user,
            token=token or defaults.resolved_token,
            history_limit=self.limit if limit is None else limit,
        )
