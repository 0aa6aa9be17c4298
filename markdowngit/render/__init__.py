"""Rendering of shortcodes into HTML fragments."""

from markdowngit.render.engine import RenderEngine
from markdowngit.render.reducer import ResponseReducer, format_timestamp

__all__ = ["RenderEngine", "ResponseReducer", "format_timestamp"]
