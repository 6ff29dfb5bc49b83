"""Typed dataclasses describing lesson site configuration structures."""

from __future__ import annotations

import dataclasses as dc

from lesson_pages.errors import ConfigError

DEFAULT_PYGMENTS_STYLE = "monokai"
DEFAULT_INDEX_TITLE = "Lessons"


@dc.dataclass(slots=True, frozen=True)
class MenuLinkConfig:
    """Navigation link rendered in the shared page header."""

    label: str
    href: str


@dc.dataclass(slots=True, frozen=True)
class SiteConfig:
    """Global settings shared by every rendered page.

    Attributes
    ----------
    title : str
        Site title shown in the header and appended to page titles. Required.
    base_url : str
        Public root URL used for canonical links. Required.
    description : str
        Optional site description for the index page and meta tags.
    author : str
        Fallback author for documents that do not declare one.
    language_code : str
        Value of the ``lang`` attribute on every page.
    pygments_style : str
        Pygments style used to highlight code fences.
    footer_note : str
        Free text rendered in the page footer.
    index_title : str
        Heading of the generated lesson index.
    build_drafts : bool
        Whether documents marked ``draft: true`` are rendered.
    ignore_files : tuple[str, ...]
        Glob patterns (relative to the content root) excluded from the build.
    menu : tuple[MenuLinkConfig, ...]
        Header navigation links; ``href`` values are site-relative.
    """

    title: str
    base_url: str
    description: str = ""
    author: str = ""
    language_code: str = "en"
    pygments_style: str = DEFAULT_PYGMENTS_STYLE
    footer_note: str = ""
    index_title: str = DEFAULT_INDEX_TITLE
    build_drafts: bool = False
    ignore_files: tuple[str, ...] = ()
    menu: tuple[MenuLinkConfig, ...] = ()

    def require_template_variables(self) -> None:
        """Raise ``ConfigError`` when a required template variable is blank."""
        missing = [
            name
            for name, value in (("title", self.title), ("base_url", self.base_url))
            if not (value or "").strip()
        ]
        if missing:
            msg = f"Site configuration is missing required keys: {', '.join(missing)}"
            raise ConfigError(msg)

    def canonical_url(self, output_path: str) -> str:
        """Return the absolute public URL for a site-relative output path."""
        return f"{self.base_url.rstrip('/')}/{output_path.lstrip('/')}"


__all__ = [
    "DEFAULT_INDEX_TITLE",
    "DEFAULT_PYGMENTS_STYLE",
    "ConfigError",
    "MenuLinkConfig",
    "SiteConfig",
]
