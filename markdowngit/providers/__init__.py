"""Git hosting providers for markdowngit.

Each provider turns a web URL into API requests for raw file content and
commit history. The registry binds them to shortcode names.
"""

from markdowngit.providers.base import (
    SHORTCODE_ACTIONS,
    GitProvider,
    ProviderAuthType,
    ProviderConfig,
)
from markdowngit.providers.bitbucket import BitbucketProvider
from markdowngit.providers.github import GitHubProvider
from markdowngit.providers.gitlab import GitLabProvider
from markdowngit.providers.registry import (
    ProviderRegistry,
    ShortcodeAttributes,
    get_registry,
)

__all__ = [
    # Base classes
    "GitProvider",
    "ProviderAuthType",
    "ProviderConfig",
    "SHORTCODE_ACTIONS",
    # Providers
    "GitHubProvider",
    "GitLabProvider",
    "BitbucketProvider",
    # Registry
    "ProviderRegistry",
    "ShortcodeAttributes",
    "get_registry",
]
