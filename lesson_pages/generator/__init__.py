"""Utilities for rendering lesson Markdown and wrapping it in site templates."""

from .link_rewriter import RelativeLinkExtension
from .page_template import PageTemplate
from .renderer import LessonRenderer

__all__ = [
    "LessonRenderer",
    "PageTemplate",
    "RelativeLinkExtension",
]
