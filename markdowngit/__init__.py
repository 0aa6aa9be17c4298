"""markdowngit - Embed Markdown, notebooks and commit history from Git hosting providers."""

from markdowngit.models.config import MarkdownGitConfig
from markdowngit.providers.registry import ProviderRegistry
from markdowngit.render.engine import RenderEngine

__version__ = "0.1.0"
__all__ = ["MarkdownGitConfig", "ProviderRegistry", "RenderEngine"]
