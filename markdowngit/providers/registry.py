"""Provider registry and shortcode dispatch.

Registration is explicit: the registry enumerates the provider classes,
validates each one, builds a RenderEngine per provider and binds the four
shortcode names to the engine's methods. Constructing a provider has no
side effects.
"""

from __future__ import annotations

import logging
from typing import Any, Callable
from urllib.parse import urlsplit

from pydantic import BaseModel, field_validator, model_validator

from markdowngit.http import RequestExecutor
from markdowngit.models.config import MarkdownGitConfig
from markdowngit.providers.base import SHORTCODE_ACTIONS, GitProvider
from markdowngit.providers.bitbucket import BitbucketProvider
from markdowngit.providers.github import GitHubProvider
from markdowngit.providers.gitlab import GitLabProvider
from markdowngit.render.engine import RenderEngine

logger = logging.getLogger(__name__)


class ShortcodeAttributes(BaseModel):
    """Attributes an author may put on a shortcode.

    Empty strings mean "not given", so provider defaults apply.
    """

    url: str = ""
    user: str | None = None
    token: str | None = None
    limit: int | None = None

    @model_validator(mode="before")
    @classmethod
    def _lowercase_keys(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {str(k).lower(): v for k, v in data.items()}
        return data

    @field_validator("user", "token", mode="before")
    @classmethod
    def _blank_is_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("limit", mode="before")
    @classmethod
    def _parse_limit(cls, value: Any) -> int | None:
        if value is None or value == "":
            return None
        try:
            limit = int(value)
        except (TypeError, ValueError):
            return None
        return limit if limit >= 0 else None


class ProviderRegistry:
    """Registry of all available Git hosting providers.

    Provides:
    - Validation of provider classes at startup
    - One render engine per provider, sharing one request executor
    - Shortcode name to callable binding
    - Provider lookup by URL host
    """

    # Built-in providers
    PROVIDER_CLASSES: dict[str, type[GitProvider]] = {
        "github": GitHubProvider,
        "gitlab": GitLabProvider,
        "bitbucket": BitbucketProvider,
    }

    def __init__(
        self,
        config: MarkdownGitConfig | None = None,
        executor: RequestExecutor | None = None,
        enabled_providers: list[str] | None = None,
        provider_classes: dict[str, type[GitProvider]] | None = None,
    ) -> None:
        """Initialize registry.

        Args:
            config: Plugin configuration (defaults if omitted)
            executor: Shared HTTP executor
            enabled_providers: List of provider IDs to enable (None = all)
            provider_classes: Override the built-in provider classes
        """
        self.config = config or MarkdownGitConfig()
        self.executor = executor or RequestExecutor(timeout=self.config.timeout)
        self._enabled = enabled_providers
        self._provider_classes = self.PROVIDER_CLASSES if provider_classes is None else provider_classes
        self._providers: dict[str, GitProvider] = {}
        self._engines: dict[str, RenderEngine] = {}
        self._shortcodes: dict[str, Callable[..., str]] = {}

        self._init_providers()

    def _init_providers(self) -> None:
        """Validate and register all enabled providers."""
        for key, provider_class in self._provider_classes.items():
            if self._enabled is not None and key not in self._enabled:
                continue
            provider_class.validate()
            provider = provider_class(notebook_viewer_url=self.config.notebook_viewer_url)
            if provider.id in self._providers:
                raise ValueError(f"Duplicate provider id: {provider.id}")
            self.register(provider)

    def register(self, provider: GitProvider) -> None:
        """Bind a provider's shortcodes to a new render engine."""
        engine = RenderEngine(provider, self.config, self.executor)
        self._providers[provider.id] = provider
        self._engines[provider.id] = engine
        bindings: dict[str, Callable[..., str]] = {
            "markdown": engine.render_markdown,
            "jupyter": engine.render_notebook,
            "checkout": engine.render_checkout_date,
            "history": engine.render_history,
        }
        for action in SHORTCODE_ACTIONS:
            self._shortcodes[provider.shortcode(action)] = bindings[action]
        logger.debug(f"Registered provider {provider.id}")

    def get(self, provider_id: str) -> GitProvider | None:
        """Get a specific provider by ID."""
        return self._providers.get(provider_id)

    def engine(self, provider_id: str) -> RenderEngine:
        engine = self._engines.get(provider_id)
        if engine is None:
            raise KeyError(f"Provider not found: {provider_id}")
        return engine

    def list_providers(self) -> list[str]:
        """List all registered provider IDs."""
        return list(self._providers.keys())

    def list_shortcodes(self) -> list[str]:
        return list(self._shortcodes.keys())

    def js_configs(self) -> list[dict[str, Any]]:
        """Provider descriptions for clients (no credentials)."""
        return [p.js_config() for p in self._providers.values()]

    def for_url(self, url: str) -> GitProvider | None:
        """Find the provider serving the host of a URL."""
        host = urlsplit(url).netloc.lower()
        for provider in self._providers.values():
            if provider.handles_host(host):
                return provider
        return None

    def render(self, shortcode: str, attrs: dict[str, Any] | None = None) -> str:
        """Expand a shortcode with the given attributes into HTML."""
        handler = self._shortcodes.get(shortcode.lower())
        if handler is None:
            raise KeyError(f"Unknown shortcode: {shortcode}")
        parsed = ShortcodeAttributes.model_validate(attrs or {})
        action = shortcode.lower().rsplit("-", 1)[1]
        if action == "jupyter":
            return handler(parsed.url)
        if action == "history":
            return handler(parsed.url, user=parsed.user, token=parsed.token, limit=parsed.limit)
        return handler(parsed.url, user=parsed.user, token=parsed.token)

    def close(self) -> None:
        """Close the shared HTTP client."""
        self.executor.close()


# Global registry instance
_registry: ProviderRegistry | None = None


def get_registry(config: MarkdownGitConfig | None = None) -> ProviderRegistry:
    """Get or create the global provider registry."""
    global _registry
    if _registry is None:
        _registry = ProviderRegistry(config)
    return _registry


def reset_registry() -> None:
    """Drop the global registry (primarily for tests)."""
    global _registry
    if _registry is not None:
        _registry.close()
    _registry = None
