"""HTTP API for markdowngit."""

from markdowngit.api.routes import create_app, create_shortcode_router

__all__ = ["create_app", "create_shortcode_router"]
