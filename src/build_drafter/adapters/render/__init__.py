"""Draft rendering adapters."""

from build_drafter.adapters.render.markdown_renderer import MarkdownDraftRenderer

__all__ = ["MarkdownDraftRenderer"]
