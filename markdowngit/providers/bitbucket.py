"""Bitbucket Cloud provider.

API Documentation: https://developer.atlassian.com/cloud/bitbucket/rest/

URL shape: https://bitbucket.org/{workspace}/{repo}/src/{branch}/{path}

Authentication: Basic base64(user:app_password)

The commits endpoint is paginated; commits live under "values".

Commit JSON keys:
- author: author.user.display_name, falling back to author.raw
- date: date
- message: message
"""

from __future__ import annotations

from typing import Any
from urllib.parse import quote

from markdowngit.http import ApiRequest
from markdowngit.models.repository import CommitRecord, Credentials, UrlDescriptor
from markdowngit.providers.base import GitProvider, ProviderAuthType, ProviderConfig


BITBUCKET_CONFIG = ProviderConfig(
    id="bitbucket",
    name="Bitbucket",
    hosts=["bitbucket.org", "www.bitbucket.org"],
    auth_type=ProviderAuthType.BASIC,
    supports_notebooks=False,
)

BITBUCKET_API = "https://api.bitbucket.org/2.0"


class BitbucketProvider(GitProvider):
    """Bitbucket Cloud REST API (2.0) provider implementation."""

    config = BITBUCKET_CONFIG

    def repository_url(self, descriptor: UrlDescriptor) -> str:
        return f"{BITBUCKET_API}/repositories/{descriptor.owner}/{descriptor.repository}"

    def parse_url(self, raw_url: str) -> UrlDescriptor:
        return self.parse_owner_repo_path(raw_url, kinds=("src", "raw"))

    def raw_file_request(self, descriptor: UrlDescriptor, credentials: Credentials) -> ApiRequest:
        path = quote(descriptor.file_path)
        return ApiRequest(
            url=f"{self.repository_url(descriptor)}/src/{quote(descriptor.branch, safe='')}/{path}",
            headers=self.get_auth_headers(credentials),
        )

    def commit_history_request(self, descriptor: UrlDescriptor, credentials: Credentials) -> ApiRequest:
        return ApiRequest(
            url=f"{self.repository_url(descriptor)}/commits/{quote(descriptor.branch, safe='')}",
            headers={
                "Accept": "application/json",
                **self.get_auth_headers(credentials),
            },
            params={"path": descriptor.file_path},
        )

    def commit_entries(self, payload: Any) -> list[dict[str, Any]] | None:
        if isinstance(payload, dict) and isinstance(payload.get("values"), list):
            return [entry for entry in payload["values"] if isinstance(entry, dict)]
        return super().commit_entries(payload)

    def extract_history_fields(self, commit: dict[str, Any]) -> CommitRecord:
        author = commit.get("author") or {}
        user = author.get("user") or {}
        return CommitRecord(
            author_name=user.get("display_name") or author.get("raw") or "",
            timestamp_raw=commit.get("date") or "",
            message=commit.get("message") or "",
        )
