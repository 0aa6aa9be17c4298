"""GitHub provider.

API Documentation: https://docs.github.com/en/rest

URL shape: https://github.com/{owner}/{repo}/blob/{branch}/{path}
GitHub Enterprise hosts serve the API under https://{host}/api/v3.

Authentication: Basic base64(user:token)

Commit JSON keys:
- author: commit.author.name
- date: commit.author.date
- message: commit.message
"""

from __future__ import annotations

from typing import Any
from urllib.parse import quote

from markdowngit.http import ApiRequest
from markdowngit.models.repository import CommitRecord, Credentials, UrlDescriptor
from markdowngit.providers.base import GitProvider, ProviderAuthType, ProviderConfig


GITHUB_CONFIG = ProviderConfig(
    id="github",
    name="Github",
    hosts=["github.com", "www.github.com"],
    auth_type=ProviderAuthType.BASIC,
    supports_notebooks=True,
)

GITHUB_RAW_HOST = "raw.githubusercontent.com"


class GitHubProvider(GitProvider):
    """GitHub REST API provider implementation."""

    config = GITHUB_CONFIG

    def api_base(self, descriptor: UrlDescriptor) -> str:
        if descriptor.host in ("github.com", "www.github.com"):
            return "https://api.github.com"
        return f"https://{descriptor.host}/api/v3"

    def parse_url(self, raw_url: str) -> UrlDescriptor:
        return self.parse_owner_repo_path(raw_url, kinds=("blob", "tree", "raw"))

    def raw_file_request(self, descriptor: UrlDescriptor, credentials: Credentials) -> ApiRequest:
        path = quote(descriptor.file_path)
        return ApiRequest(
            url=f"{self.api_base(descriptor)}/repos/{descriptor.owner}/{descriptor.repository}/contents/{path}",
            headers={
                "Accept": "application/vnd.github.v3.raw",
                **self.get_auth_headers(credentials),
            },
            params={"ref": descriptor.branch},
        )

    def commit_history_request(self, descriptor: UrlDescriptor, credentials: Credentials) -> ApiRequest:
        return ApiRequest(
            url=f"{self.api_base(descriptor)}/repos/{descriptor.owner}/{descriptor.repository}/commits",
            headers={
                "Accept": "application/vnd.github+json",
                **self.get_auth_headers(credentials),
            },
            params={"path": descriptor.file_path, "sha": descriptor.branch},
        )

    def extract_history_fields(self, commit: dict[str, Any]) -> CommitRecord:
        details = commit.get("commit") or {}
        author = details.get("author") or {}
        return CommitRecord(
            author_name=author.get("name") or "",
            timestamp_raw=author.get("date") or "",
            message=details.get("message") or "",
        )

    def notebook_viewer_url(self, descriptor: UrlDescriptor) -> str:
        if descriptor.host in ("github.com", "www.github.com"):
            raw_location = (
                f"{GITHUB_RAW_HOST}/{descriptor.owner}/{descriptor.repository}"
                f"/{descriptor.branch}/{descriptor.file_path}"
            )
        else:
            raw_location = (
                f"{descriptor.host}/{descriptor.owner}/{descriptor.repository}"
                f"/raw/{descriptor.branch}/{descriptor.file_path}"
            )
        return f"{self.notebook_viewer_url_base}/urls/{quote(raw_location)}"
