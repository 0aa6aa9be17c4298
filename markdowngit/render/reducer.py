"""Status-code reduction shared by every render operation.

Each reducer takes the upstream status code and the successful payload and
returns either the payload or the fixed user-facing error text. The table is
the same for every provider.
"""

from __future__ import annotations

from datetime import datetime, timezone

from dateutil import parser as date_parser

from markdowngit.errors import MalformedUrlError, MarkdownGitError, UpstreamHttpError

DATE_FORMAT = "%d/%m/%Y %H:%M:%S"


def format_timestamp(raw: str) -> str:
    """Render a provider timestamp as dd/mm/yyyy HH:mm:ss.

    Offset-aware values are shown in UTC. Anything unparseable is returned
    unchanged.
    """
    try:
        parsed = date_parser.isoparse(raw)
    except (ValueError, OverflowError):
        try:
            parsed = date_parser.parse(raw)
        except (ValueError, OverflowError):
            return raw
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc)
    return parsed.strftime(DATE_FORMAT)


def status_for_error(error: MarkdownGitError) -> int:
    """Map an internal error to the status code it renders as."""
    if isinstance(error, MalformedUrlError):
        return 404
    if isinstance(error, UpstreamHttpError):
        return error.status_code
    return 500


class ResponseReducer:
    """Turns (status, payload) into content or a fixed error rendering."""

    def markdown(self, body: str, status_code: int, user: str) -> str:
        """Markdown source to send to the Markdown service."""
        if status_code == 200:
            return body
        if status_code == 404:
            return "# 404 - Not found\nDocument not found."
        if status_code in (401, 403):
            return f"# {status_code} - Bad credentials.\nPlease review access token for user {user}"
        return f"# 500 - Server Error.\n{body}"

    def notebook(self, inner_html: str, status_code: int) -> str:
        if status_code == 200:
            return inner_html
        if status_code == 404:
            return "<h1>404 - Not found</h1>Document not found"
        return "<h1>500 - Server Error</h1>"

    def checkout(self, date_raw: str, status_code: int, user: str, url: str) -> str:
        """Label shown after 'Last updated:'."""
        if status_code == 200:
            return format_timestamp(date_raw)
        if status_code == 401:
            return f"401 - Invalid credentials for user {user}"
        if status_code == 404:
            return f"404 - Post not found on {url}"
        return "500 - Server Error"

    def history_error(self, status_code: int, user: str, url: str) -> str:
        """Message shown in place of history entries when the listing failed."""
        return self.checkout("", status_code, user, url)
