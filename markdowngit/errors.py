"""Exception hierarchy for markdowngit.

All exceptions inherit from MarkdownGitError (single catch point).
The render engine converts every one of them into a fixed HTML fragment,
so none of these ever reach a page author as a traceback.
"""

from __future__ import annotations


class MarkdownGitError(Exception):
    """Base exception for all markdowngit errors."""


class MalformedUrlError(MarkdownGitError):
    """URL does not match the provider's expected shape."""


class UpstreamHttpError(MarkdownGitError):
    """Provider API answered with a non-success status code."""

    def __init__(self, status_code: int, message: str = "") -> None:
        self.status_code = status_code
        super().__init__(message or f"Upstream returned HTTP {status_code}")


class UnsupportedOperationError(MarkdownGitError):
    """Provider lacks a capability, e.g. notebook viewing."""


class TransportError(MarkdownGitError):
    """Network-level failure talking to a provider or render service."""
