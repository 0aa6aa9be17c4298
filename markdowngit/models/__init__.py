"""Data models for markdowngit."""

from markdowngit.models.config import (
    MarkdownGitConfig,
    MarkdownServiceConfig,
    ProviderCredentials,
)
from markdowngit.models.repository import CommitRecord, Credentials, UrlDescriptor

__all__ = [
    # Per-call values
    "UrlDescriptor",
    "Credentials",
    "CommitRecord",
    # Configuration
    "MarkdownGitConfig",
    "MarkdownServiceConfig",
    "ProviderCredentials",
]
