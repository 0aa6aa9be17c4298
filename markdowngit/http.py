"""Synchronous HTTP execution for provider and render-service calls."""

from __future__ import annotations

import logging
from typing import Any, NamedTuple

import httpx
from pydantic import BaseModel, Field

from markdowngit.errors import TransportError

logger = logging.getLogger(__name__)


class ApiRequest(BaseModel):
    """A fully built GET request, ready to be executed."""

    url: str
    headers: dict[str, str] = Field(default_factory=dict)
    params: dict[str, str] = Field(default_factory=dict)


class HttpResponse(NamedTuple):
    body: str
    status_code: int


class RequestExecutor:
    """Performs blocking GET/POST calls and returns (body, status_code).

    Non-2xx statuses are returned as-is; only transport failures raise.
    """

    def __init__(self, timeout: float = 30.0, client: httpx.Client | None = None) -> None:
        self.timeout = timeout
        self._client = client

    @property
    def client(self) -> httpx.Client:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.Client(timeout=self.timeout, follow_redirects=True)
        return self._client

    def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            self._client.close()
            self._client = None

    def get(
        self,
        url: str,
        headers: dict[str, str] | None = None,
        params: dict[str, str] | None = None,
    ) -> HttpResponse:
        logger.debug(f"GET {url} params={params or {}}")
        try:
            response = self.client.get(url, headers=headers, params=params)
        except httpx.HTTPError as e:
            raise TransportError(f"GET {url} failed: {e}") from e
        return HttpResponse(response.text, response.status_code)

    def post(
        self,
        url: str,
        headers: dict[str, str] | None = None,
        json: dict[str, Any] | None = None,
    ) -> HttpResponse:
        logger.debug(f"POST {url}")
        try:
            response = self.client.post(url, headers=headers, json=json)
        except httpx.HTTPError as e:
            raise TransportError(f"POST {url} failed: {e}") from e
        return HttpResponse(response.text, response.status_code)

    def execute(self, request: ApiRequest) -> HttpResponse:
        """Run a GET request built by a provider."""
        return self.get(request.url, headers=request.headers, params=request.params)
