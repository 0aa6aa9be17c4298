"""Tests for the GitHub provider."""

from __future__ import annotations

import base64

import pytest

from markdowngit.errors import MalformedUrlError
from markdowngit.models.repository import Credentials
from markdowngit.providers.github import GitHubProvider


@pytest.fixture
def provider() -> GitHubProvider:
    return GitHubProvider()


@pytest.fixture
def creds() -> Credentials:
    return Credentials(user="octocat", token="gh-token")


class TestParseUrl:
    @pytest.mark.parametrize("kind", ["tree", "blob", "raw"])
    def test_owner_repo_branch_path(self, provider, kind):
        descriptor = provider.parse_url(f"https://github.com/owner/repo/{kind}/branch/a/b/c")

        assert descriptor.host == "github.com"
        assert descriptor.owner == "owner"
        assert descriptor.repository == "repo"
        assert descriptor.branch == "branch"
        assert descriptor.file_path == "a/b/c"

    def test_single_file_at_root(self, provider):
        descriptor = provider.parse_url("https://github.com/o/r/blob/main/README.md")
        assert descriptor.file_path == "README.md"

    def test_parse_is_idempotent(self, provider):
        url = "https://github.com/o/r/blob/main/docs/post.md"
        assert provider.parse_url(url) == provider.parse_url(url)

    def test_percent_encoded_segments_are_decoded(self, provider):
        descriptor = provider.parse_url("https://github.com/o/r/blob/release%2F1.0/docs/my%20post%C3%A9.md")

        assert descriptor.branch == "release/1.0"
        assert descriptor.file_path == "docs/my post\u00e9.md"

    @pytest.mark.parametrize(
        "url",
        [
            "https://github.com/owner/repo",
            "https://github.com/owner/repo/blob/main",
            "https://github.com/owner/repo/blob/main/",
            "https://github.com/owner/repo/issues/main/1",
            "github.com/owner/repo/blob/main/a.md",
            "",
        ],
    )
    def test_malformed(self, provider, url):
        with pytest.raises(MalformedUrlError):
            provider.parse_url(url)


class TestRequests:
    def test_raw_file_request(self, provider, creds):
        descriptor = provider.parse_url("https://github.com/o/r/blob/dev/docs/post.md")
        request = provider.raw_file_request(descriptor, creds)

        assert request.url == "https://api.github.com/repos/o/r/contents/docs/post.md"
        assert request.params == {"ref": "dev"}
        assert request.headers["Accept"] == "application/vnd.github.v3.raw"

    def test_encoded_file_path_is_encoded_once(self, provider, creds):
        descriptor = provider.parse_url("https://github.com/o/r/blob/main/docs/my%20post.md")
        request = provider.raw_file_request(descriptor, creds)

        assert request.url == "https://api.github.com/repos/o/r/contents/docs/my%20post.md"
        assert "%2520" not in request.url
        assert provider.commit_history_request(descriptor, creds).params["path"] == "docs/my post.md"

    def test_basic_auth_header(self, provider, creds):
        descriptor = provider.parse_url("https://github.com/o/r/blob/dev/post.md")
        header = provider.raw_file_request(descriptor, creds).headers["Authorization"]

        assert header.startswith("Basic ")
        assert base64.b64decode(header[len("Basic "):]).decode() == "octocat:gh-token"

    def test_anonymous_request_has_no_auth(self, provider):
        descriptor = provider.parse_url("https://github.com/o/r/blob/dev/post.md")
        request = provider.raw_file_request(descriptor, Credentials())
        assert "Authorization" not in request.headers

    def test_commit_history_request(self, provider, creds):
        descriptor = provider.parse_url("https://github.com/o/r/blob/dev/docs/post.md")
        request = provider.commit_history_request(descriptor, creds)

        assert request.url == "https://api.github.com/repos/o/r/commits"
        assert request.params == {"path": "docs/post.md", "sha": "dev"}

    def test_last_commit_date_reuses_history(self, provider, creds):
        descriptor = provider.parse_url("https://github.com/o/r/blob/dev/docs/post.md")
        assert provider.last_commit_date_request(descriptor, creds) == provider.commit_history_request(descriptor, creds)

    def test_enterprise_api_base(self, provider, creds):
        descriptor = provider.parse_url("https://git.example.com/o/r/blob/main/a.md")
        request = provider.commit_history_request(descriptor, creds)
        assert request.url == "https://git.example.com/api/v3/repos/o/r/commits"


class TestCommits:
    def test_extract_history_fields(self, provider, mock_github_commits):
        record = provider.extract_history_fields(mock_github_commits[0])

        assert record.author_name == "Ada Lovelace"
        assert record.timestamp_raw == "2021-03-01T10:00:00Z"
        assert record.message == "Fix typo in intro"

    def test_last_commit_date(self, provider, mock_github_commits):
        assert provider.last_commit_date(mock_github_commits, 200) == ("2021-03-01T10:00:00Z", 200)

    def test_empty_history_is_not_found(self, provider):
        assert provider.last_commit_date([], 200) == ("", 404)

    def test_error_payload_keeps_status(self, provider):
        assert provider.last_commit_date({"message": "Bad credentials"}, 401) == ("", 401)

    def test_null_fields_become_empty(self, provider):
        commit = {"commit": {"author": {"name": None, "date": None}, "message": None}}
        record = provider.extract_history_fields(commit)
        assert (record.author_name, record.timestamp_raw, record.message) == ("", "", "")

    def test_non_object_entries_are_skipped(self, provider, mock_github_commits):
        assert provider.commit_entries([None, "x", mock_github_commits[0]]) == [mock_github_commits[0]]


class TestNotebookViewer:
    def test_github_com_uses_raw_host(self, provider):
        descriptor = provider.parse_url("https://github.com/o/r/blob/main/nb/demo.ipynb")
        assert provider.notebook_viewer_url(descriptor) == (
            "https://nbviewer.jupyter.org/urls/raw.githubusercontent.com/o/r/main/nb/demo.ipynb"
        )

    def test_viewer_url_encodes_file_path(self, provider):
        descriptor = provider.parse_url("https://github.com/o/r/blob/main/nb/my%20demo.ipynb")
        assert provider.notebook_viewer_url(descriptor).endswith("/o/r/main/nb/my%20demo.ipynb")

    def test_custom_viewer_base(self):
        provider = GitHubProvider(notebook_viewer_url="https://viewer.example.org/")
        descriptor = provider.parse_url("https://github.com/o/r/blob/main/demo.ipynb")
        assert provider.notebook_viewer_url(descriptor).startswith("https://viewer.example.org/urls/")
