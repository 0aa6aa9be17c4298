"""GitLab provider.

API Documentation: https://docs.gitlab.com/ee/api/rest/

URL shape: https://gitlab.com/{namespace/project}/-/blob/{branch}/{path}
The whole project path before "/-/" is the owner; it is percent-encoded
because the API takes it as a single path segment.

Authentication: Bearer token

Commit JSON keys:
- author: author_name
- date: created_at
- message: message

Notebook rendering is not available: nbviewer cannot fetch GitLab raw files.
"""

from __future__ import annotations

from typing import Any
from urllib.parse import quote, unquote

from markdowngit.errors import MalformedUrlError
from markdowngit.http import ApiRequest
from markdowngit.models.repository import CommitRecord, Credentials, UrlDescriptor
from markdowngit.providers.base import GitProvider, ProviderAuthType, ProviderConfig


GITLAB_CONFIG = ProviderConfig(
    id="gitlab",
    name="Gitlab",
    hosts=["gitlab.com", "www.gitlab.com"],
    auth_type=ProviderAuthType.BEARER,
    supports_notebooks=False,
)

PATH_SEPARATOR = "/-/"


class GitLabProvider(GitProvider):
    """GitLab REST API (v4) provider implementation."""

    config = GITLAB_CONFIG

    def api_base(self, descriptor: UrlDescriptor) -> str:
        return f"https://{descriptor.host}/api/v4/projects/{descriptor.owner}/repository"

    def parse_url(self, raw_url: str) -> UrlDescriptor:
        host, path = self.split_url(raw_url)
        if PATH_SEPARATOR not in path:
            raise MalformedUrlError(f"Missing '{PATH_SEPARATOR}' in GitLab URL {raw_url!r}")

        head, tail = path.split(PATH_SEPARATOR, 1)
        owner = unquote(head.strip("/"))
        tail_segments = [unquote(segment) for segment in tail.split("/")]
        if not owner or len(tail_segments) < 3:
            raise MalformedUrlError(f"Expected /owner/-/blob/branch/path in {raw_url!r}")

        branch = tail_segments[1]
        file_path = "/".join(tail_segments[2:])
        if not branch or not file_path.strip("/"):
            raise MalformedUrlError(f"Missing branch or file path in {raw_url!r}")

        return UrlDescriptor(
            host=host,
            owner=quote(owner, safe=""),
            branch=branch,
            file_path=file_path,
        )

    def raw_file_request(self, descriptor: UrlDescriptor, credentials: Credentials) -> ApiRequest:
        path = quote(descriptor.file_path, safe="")
        return ApiRequest(
            url=f"{self.api_base(descriptor)}/files/{path}/raw",
            headers=self.get_auth_headers(credentials),
            params={"ref": descriptor.branch},
        )

    def commit_history_request(self, descriptor: UrlDescriptor, credentials: Credentials) -> ApiRequest:
        return ApiRequest(
            url=f"{self.api_base(descriptor)}/commits",
            headers={
                "Accept": "application/json",
                **self.get_auth_headers(credentials),
            },
            params={"path": descriptor.file_path, "ref_name": descriptor.branch},
        )

    def extract_history_fields(self, commit: dict[str, Any]) -> CommitRecord:
        return CommitRecord(
            author_name=commit.get("author_name") or "",
            timestamp_raw=commit.get("created_at") or "",
            message=commit.get("message") or "",
        )
