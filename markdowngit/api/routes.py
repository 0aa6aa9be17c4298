"""FastAPI routes exposing the shortcodes over HTTP.

Usage:
    from fastapi import FastAPI
    from markdowngit.api import create_shortcode_router

    app = FastAPI()
    app.include_router(create_shortcode_router(prefix="/shortcodes"))

    # GET /shortcodes/git-github-markdown?url=https://github.com/o/r/blob/main/README.md
"""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Query
from fastapi.responses import HTMLResponse
from pydantic import BaseModel

from markdowngit.models.config import MarkdownGitConfig
from markdowngit.providers.registry import ProviderRegistry, get_registry


# Global registry dependency - must be at module level for FastAPI annotation resolution
_config: MarkdownGitConfig | None = None


def get_provider_registry() -> ProviderRegistry:
    """Get or create the global provider registry."""
    return get_registry(_config)


class ProviderConfigResponse(BaseModel):
    """Provider description (no credentials)."""
    id: str
    name: str
    hosts: list[str]
    authType: str
    supportsNotebooks: bool
    shortcodes: list[str]


class ShortcodeListResponse(BaseModel):
    shortcodes: list[str]
    providers: list[ProviderConfigResponse]


def create_shortcode_router(
    prefix: str = "/shortcodes",
    tags: list[str] | None = None,
    config: MarkdownGitConfig | None = None,
) -> APIRouter:
    """Create FastAPI router for shortcode rendering.

    Args:
        prefix: URL prefix for routes (default: /shortcodes)
        tags: OpenAPI tags
        config: Configuration used when the global registry is first created

    Returns:
        APIRouter to include in FastAPI app
    """
    global _config
    _config = config

    if tags is None:
        tags = ["shortcodes"]

    router = APIRouter(prefix=prefix, tags=tags)

    @router.get("/", response_model=ShortcodeListResponse)
    def list_shortcodes(
        registry: Annotated[ProviderRegistry, Depends(get_provider_registry)],
    ) -> ShortcodeListResponse:
        """List registered shortcodes and providers."""
        return ShortcodeListResponse(
            shortcodes=registry.list_shortcodes(),
            providers=[ProviderConfigResponse(**c) for c in registry.js_configs()],
        )

    @router.get("/{shortcode}", response_class=HTMLResponse)
    def render_shortcode(
        shortcode: str,
        registry: Annotated[ProviderRegistry, Depends(get_provider_registry)],
        url: Annotated[str, Query(description="Web URL of the file")],
        user: Annotated[str, Query()] = "",
        token: Annotated[str, Query()] = "",
        limit: Annotated[str, Query(description="History entries to show")] = "",
    ) -> HTMLResponse:
        """Expand a shortcode into an HTML fragment."""
        attrs: dict[str, Any] = {"url": url, "user": user, "token": token, "limit": limit}
        try:
            html = registry.render(shortcode, attrs)
        except KeyError:
            raise HTTPException(status_code=404, detail=f"Shortcode not found: {shortcode}")
        return HTMLResponse(content=html)

    return router


def create_app(config: MarkdownGitConfig | None = None, prefix: str = "/shortcodes") -> FastAPI:
    """Build a standalone application serving the shortcodes."""
    app = FastAPI(title="markdowngit")
    app.include_router(create_shortcode_router(prefix=prefix, config=config))
    return app
