"""Base Git hosting provider.

A provider knows how to:
1. Decompose a human-authored web URL into a UrlDescriptor
2. Build the API requests for raw file content and commit history
3. Read author, date and message out of one commit of its JSON payload
4. Build a notebook viewer URL, where the provider exposes raw files publicly

Providers never touch the network; they only build ApiRequest values.
"""

from __future__ import annotations

import base64
import inspect
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any
from urllib.parse import unquote, urlsplit

from pydantic import BaseModel, Field

from markdowngit.errors import MalformedUrlError, UnsupportedOperationError
from markdowngit.http import ApiRequest
from markdowngit.models.config import NBVIEWER_URL
from markdowngit.models.repository import CommitRecord, Credentials, UrlDescriptor

SHORTCODE_ACTIONS = ("markdown", "jupyter", "checkout", "history")


def basic_auth(user: str, token: str) -> str:
    """Authorization header value for HTTP Basic auth."""
    pair = f"{user}:{token}".encode()
    return "Basic " + base64.b64encode(pair).decode("ascii")


class ProviderAuthType(str, Enum):
    """How the provider authenticates requests."""
    BASIC = "basic"  # base64(user:token) in Authorization header
    BEARER = "bearer"  # Bearer token in Authorization header


class ProviderConfig(BaseModel):
    """Static description of a Git hosting provider."""
    id: str = Field(..., description="Lowercase identifier used in shortcode names")
    name: str = Field(..., description="Display name, e.g. 'Github'")
    hosts: list[str] = Field(default_factory=list, description="Web hosts served by this provider")
    auth_type: ProviderAuthType = ProviderAuthType.BASIC
    supports_notebooks: bool = False


class GitProvider(ABC):
    """Abstract base class for Git hosting providers.

    Implementations must provide URL parsing, request construction and
    commit field extraction. Instances hold no per-request state, so a
    single instance may serve any number of render calls.
    """

    config: ProviderConfig

    def __init__(self, notebook_viewer_url: str = NBVIEWER_URL) -> None:
        self.notebook_viewer_url_base = notebook_viewer_url.rstrip("/")

    @property
    def id(self) -> str:
        return self.config.id

    @property
    def name(self) -> str:
        return self.config.name

    @classmethod
    def validate(cls) -> None:
        """Check the class is a usable provider; called at registration."""
        if inspect.isabstract(cls):
            missing = ", ".join(sorted(cls.__abstractmethods__))
            raise ValueError(f"{cls.__name__} does not implement: {missing}")
        config = getattr(cls, "config", None)
        if not isinstance(config, ProviderConfig):
            raise ValueError(f"Class attribute config must be set for {cls.__name__}")
        if not config.id or not config.name:
            raise ValueError(f"Provider {cls.__name__} needs a non-empty id and name")

    def shortcode(self, action: str) -> str:
        return f"git-{self.config.id}-{action}"

    def handles_host(self, host: str) -> bool:
        return host.lower() in self.config.hosts

    # --- URL parsing ---

    @abstractmethod
    def parse_url(self, raw_url: str) -> UrlDescriptor:
        """Decompose a web URL pointing at a file."""
        ...

    @staticmethod
    def split_url(raw_url: str) -> tuple[str, str]:
        """Split a URL into (host, path), rejecting anything without a host."""
        parts = urlsplit(raw_url.strip())
        if not parts.scheme or not parts.netloc:
            raise MalformedUrlError(f"Not an absolute URL: {raw_url!r}")
        return parts.netloc, parts.path

    def parse_owner_repo_path(self, raw_url: str, kinds: tuple[str, ...]) -> UrlDescriptor:
        """Parse /owner/repo/<kind>/branch/file/path URLs."""
        host, path = self.split_url(raw_url)
        segments = path.strip("/").split("/")
        if len(segments) < 5 or not all(segments[:5]):
            raise MalformedUrlError(
                f"Expected /owner/repo/<kind>/branch/path in {raw_url!r}"
            )
        if segments[2] not in kinds:
            raise MalformedUrlError(
                f"Unexpected path kind {segments[2]!r} in {raw_url!r}, expected one of {kinds}"
            )
        # Stored decoded; request builders encode exactly once
        segments = [unquote(segment) for segment in segments]
        return UrlDescriptor(
            host=host,
            owner=segments[0],
            repository=segments[1],
            branch=segments[3],
            file_path="/".join(segments[4:]),
        )

    # --- Request construction ---

    @abstractmethod
    def raw_file_request(self, descriptor: UrlDescriptor, credentials: Credentials) -> ApiRequest:
        """Request returning the raw file content."""
        ...

    @abstractmethod
    def commit_history_request(self, descriptor: UrlDescriptor, credentials: Credentials) -> ApiRequest:
        """Request returning the commits touching the file, newest first."""
        ...

    def last_commit_date_request(self, descriptor: UrlDescriptor, credentials: Credentials) -> ApiRequest:
        """The last commit date is read from the full history."""
        return self.commit_history_request(descriptor, credentials)

    def notebook_viewer_url(self, descriptor: UrlDescriptor) -> str:
        """URL of the rendered notebook on the viewer service."""
        raise UnsupportedOperationError(f"{self.config.name} does not support notebook rendering")

    def get_auth_headers(self, credentials: Credentials) -> dict[str, str]:
        """Get authentication headers for requests."""
        if self.config.auth_type == ProviderAuthType.BEARER:
            if not credentials.token:
                return {}
            return {"Authorization": f"Bearer {credentials.token}"}
        if credentials.is_anonymous:
            return {}
        return {"Authorization": basic_auth(credentials.user, credentials.token)}

    # --- Response interpretation ---

    def commit_entries(self, payload: Any) -> list[dict[str, Any]] | None:
        """The commit objects inside a decoded history payload, or None if absent."""
        if isinstance(payload, list):
            return [entry for entry in payload if isinstance(entry, dict)]
        return None

    @abstractmethod
    def extract_history_fields(self, commit: dict[str, Any]) -> CommitRecord:
        """Map one commit object to a CommitRecord."""
        ...

    def last_commit_date(self, payload: Any, status_code: int) -> tuple[str, int]:
        """Date of the newest commit and the effective status code.

        An empty commit collection means the file does not exist on that
        ref, whatever status the transport reported.
        """
        entries = self.commit_entries(payload)
        if entries is None:
            return "", status_code
        if not entries:
            return "", 404
        return self.extract_history_fields(entries[0]).timestamp_raw, status_code

    def js_config(self) -> dict[str, Any]:
        """Public provider description (never includes credentials)."""
        return {
            "id": self.config.id,
            "name": self.config.name,
            "hosts": list(self.config.hosts),
            "authType": self.config.auth_type.value,
            "supportsNotebooks": self.config.supports_notebooks,
            "shortcodes": [self.shortcode(action) for action in SHORTCODE_ACTIONS],
        }

