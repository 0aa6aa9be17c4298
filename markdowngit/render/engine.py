"""Render engine: the four shortcode operations for one provider.

Each operation is a short saga: parse the URL, build and execute the
provider request(s), reduce the status code and format the HTML. Every
failure is turned into a renderable fragment; nothing is raised to the
caller.
"""

from __future__ import annotations

import json
import logging
from html import escape
from typing import Any

from bs4 import BeautifulSoup

from markdowngit.errors import MarkdownGitError, UpstreamHttpError
from markdowngit.http import RequestExecutor
from markdowngit.models.config import MarkdownGitConfig
from markdowngit.models.repository import Credentials
from markdowngit.providers.base import GitProvider, basic_auth
from markdowngit.render.reducer import ResponseReducer, format_timestamp, status_for_error

logger = logging.getLogger(__name__)

NOTEBOOK_CONTAINER_ID = "notebook-container"
HISTORY_RULE = '<hr style="margin: 20px 0; width: 70%; border-top: 1.5px solid #aaaaaa;" />'

CHECKOUT_TEMPLATE = """
        <div class="markdown-github">
          <div class="markdown-github-labels">
            <label class="github-link">
              <a href="{url}" target="_blank">Check it out on {provider}</a>
              <label class="github-last-update"> Last updated: {label}</label>
            </label>
          </div>
        </div>"""


def decode_json(body: str) -> Any:
    """Decode a JSON body, returning None for anything that is not JSON."""
    try:
        return json.loads(body)
    except ValueError:
        return None


class RenderEngine:
    """Shortcode operations bound to a single provider."""

    def __init__(
        self,
        provider: GitProvider,
        config: MarkdownGitConfig,
        executor: RequestExecutor,
        reducer: ResponseReducer | None = None,
    ) -> None:
        self.provider = provider
        self.config = config
        self.executor = executor
        self.reducer = reducer or ResponseReducer()

    def credentials(
        self,
        user: str | None = None,
        token: str | None = None,
        limit: int | None = None,
    ) -> Credentials:
        """Effective credentials for one call; never cached."""
        return self.config.credentials_for(self.provider.id, user=user, token=token, limit=limit)

    # --- markdown ---

    def render_markdown(self, url: str, user: str | None = None, token: str | None = None) -> str:
        """Fetch a Markdown file and render it through the Markdown service."""
        credentials = self.credentials(user, token)
        try:
            descriptor = self.provider.parse_url(url)
            request = self.provider.raw_file_request(descriptor, credentials)
            body, status_code = self.executor.execute(request)
        except MarkdownGitError as e:
            logger.warning(f"Markdown fetch failed for {url}: {e}")
            body, status_code = str(e), status_for_error(e)

        if status_code != 200:
            logger.warning(f"{self.provider.name} returned {status_code} for {url}")
        raw_markdown = self.reducer.markdown(body, status_code, credentials.user)
        return f'<div class="markdown-body">{self.convert_markdown(raw_markdown)}</div>'

    def convert_markdown(self, text: str) -> str:
        """POST Markdown to the rendering service and return its HTML."""
        service = self.config.markdown_service
        headers = {"Content-Type": "application/json"}
        service_token = service.resolved_token
        # Authenticated calls get much higher rate limits on the GitHub endpoint
        if service.user or service_token:
            headers["Authorization"] = basic_auth(service.user, service_token)

        try:
            html_body, status_code = self.executor.post(service.url, headers=headers, json={"text": text})
        except MarkdownGitError as e:
            logger.warning(f"Markdown service unavailable: {e}")
            return "<h1>500 - Server Error</h1>"

        if status_code != 200:
            logger.warning(f"Markdown service returned {status_code}")
        return html_body

    # --- jupyter ---

    def render_notebook(self, url: str) -> str:
        """Render a notebook through the notebook viewer service."""
        try:
            descriptor = self.provider.parse_url(url)
            viewer_url = self.provider.notebook_viewer_url(descriptor)
            html, status_code = self.executor.get(viewer_url)
        except MarkdownGitError as e:
            logger.warning(f"Notebook render failed for {url}: {e}")
            return f'<div class="nbconvert">{self.reducer.notebook("", status_for_error(e))}</div>'

        inner_html = ""
        node = BeautifulSoup(html, "html.parser").find(id=NOTEBOOK_CONTAINER_ID) if html else None
        if node is not None:
            inner_html = "".join(str(child) for child in node.children)
        else:
            status_code = 404

        return f'<div class="nbconvert">{self.reducer.notebook(inner_html, status_code)}</div>'

    # --- checkout ---

    def render_checkout_date(self, url: str, user: str | None = None, token: str | None = None) -> str:
        """Render the 'last updated' label for a file."""
        credentials = self.credentials(user, token)
        date_raw = ""
        try:
            descriptor = self.provider.parse_url(url)
            request = self.provider.last_commit_date_request(descriptor, credentials)
            body, status_code = self.executor.execute(request)
            date_raw, status_code = self.provider.last_commit_date(decode_json(body), status_code)
        except MarkdownGitError as e:
            logger.warning(f"Checkout date lookup failed for {url}: {e}")
            status_code = status_for_error(e)

        label = self.reducer.checkout(date_raw, status_code, credentials.user, url)
        return CHECKOUT_TEMPLATE.format(
            url=escape(url, quote=True),
            provider=escape(self.provider.name),
            label=escape(label),
        )

    # --- history ---

    def render_history(
        self,
        url: str,
        user: str | None = None,
        token: str | None = None,
        limit: int | None = None,
    ) -> str:
        """Render the last `limit` commits touching a file."""
        credentials = self.credentials(user, token, limit)
        link = escape(url, quote=True)
        html_string = (
            f"{HISTORY_RULE}<article class=\"markdown-body\"><h2><strong>"
            f"<a target=\"_blank\" href=\"{link}\">Post history - Last {credentials.history_limit} commits</a>"
            f"</strong></h2>"
        )

        try:
            descriptor = self.provider.parse_url(url)
            request = self.provider.commit_history_request(descriptor, credentials)
            body, status_code = self.executor.execute(request)
            if status_code != 200:
                raise UpstreamHttpError(status_code)
            entries = self.provider.commit_entries(decode_json(body))
            if entries is None:
                raise UpstreamHttpError(500, "History response is not a list of commits")
        except MarkdownGitError as e:
            logger.warning(f"History lookup failed for {url}: {e}")
            message = self.reducer.history_error(status_for_error(e), credentials.user, url)
            return f"{html_string}<p>{escape(message)}</p></article>"

        for item in entries[: credentials.history_limit]:
            record = self.provider.extract_history_fields(item)
            html_string += (
                f"<p><strong>{format_timestamp(record.timestamp_raw)}</strong>"
                f" - {escape(record.message)} ( {escape(record.author_name)} )</p>"
            )
        return html_string + "</article>"
