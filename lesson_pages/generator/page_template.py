"""Wrap rendered lesson bodies in the shared site templates.

:class:`PageTemplate` owns the Jinja environment used for every page of a
build: lesson pages (``lesson_page.jinja``), the lesson index
(``site_index.jinja``), and per-tag listings (``tag_page.jinja``). All three
extend ``base.jinja`` so header, navigation, and footer stay identical.

The document title is the ``<h1>`` of a lesson page. The ``<title>`` element
appends the site title (``"Pipes | Shell Lessons"``); the index page uses the
site title alone.

Links emitted by the templates are relative to the page being rendered, so a
built site can be browsed straight from disk; ``base_url`` only feeds the
canonical link.

Example
-------
>>> from pathlib import PurePosixPath
>>> from lesson_pages.config import SiteConfig
>>> from lesson_pages.models import LessonDocument
>>> template = PageTemplate(SiteConfig(title="Lessons", base_url="https://x.org"))
>>> doc = LessonDocument(PurePosixPath("shell/intro.md"), {}, "")
>>> page = template.apply(doc, "<p>Hi</p>")
>>> page.output_path
'shell/intro.html'
"""

from __future__ import annotations

import posixpath
import typing as typ
from pathlib import Path, PurePosixPath

from jinja2 import Environment, FileSystemLoader

from lesson_pages._constants import INDEX_FILENAME, STYLESHEET_PATH
from lesson_pages.models import RenderedPage, tag_output_path

if typ.TYPE_CHECKING:
    from lesson_pages.config import SiteConfig
    from lesson_pages.models import LessonDocument, ManifestEntry, SiteManifest


class PageTemplate:
    """Render complete HTML pages around rendered Markdown bodies."""

    def __init__(self, site: SiteConfig, *, templates_dir: Path | None = None) -> None:
        """Initialize the Jinja environment for ``site``.

        Parameters
        ----------
        site : SiteConfig
            Global configuration; ``title`` and ``base_url`` must be set.
        templates_dir : Path, optional
            Directory containing Jinja templates; defaults to the package
            templates.

        Raises
        ------
        ConfigError
            If ``site`` lacks a title or base URL.
        """
        site.require_template_variables()
        self.site = site
        default_templates = Path(__file__).resolve().parents[1] / "templates"
        self.templates_dir = templates_dir or default_templates
        self.env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=True,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )
        self.lesson_template = self.env.get_template("lesson_page.jinja")
        self.index_template = self.env.get_template("site_index.jinja")
        self.tag_template = self.env.get_template("tag_page.jinja")

    def apply(self, document: LessonDocument, body_html: str) -> RenderedPage:
        """Wrap ``body_html`` for ``document`` and return the finished page.

        Missing front matter falls back to defaults: the title is derived from
        the filename, the author from the site configuration, and an absent
        date is simply not shown.
        """
        output_path = document.output_path
        context = self._base_context(output_path, html_title=document.title)
        context.update(
            {
                "page": {
                    "title": document.title,
                    "author": document.author or self.site.author,
                    "date": document.date,
                    "page_type": document.page_type,
                    "summary": document.summary,
                    "tags": [
                        {
                            "label": tag,
                            "href": self._relative(
                                output_path, tag_output_path(tag)
                            ),
                        }
                        for tag in document.tags
                    ],
                },
                "body_html": body_html,
            }
        )
        html = self.lesson_template.render(**context)
        return RenderedPage(output_path=output_path, html=self._finish(html))

    def render_index(
        self, manifest: SiteManifest, *, intro_html: str = ""
    ) -> RenderedPage:
        """Render the lesson index listing every manifest entry."""
        context = self._base_context(INDEX_FILENAME, html_title=self.site.title)
        context.update(
            {
                "heading": self.site.index_title,
                "intro_html": intro_html,
                "entries": self._entry_rows(INDEX_FILENAME, manifest.entries),
                "tags": [
                    {
                        "label": label,
                        "href": self._relative(
                            INDEX_FILENAME, tag_output_path(tag_slug)
                        ),
                        "count": len(manifest.for_tag(label)),
                    }
                    for tag_slug, label in manifest.tags().items()
                ],
            }
        )
        html = self.index_template.render(**context)
        return RenderedPage(output_path=INDEX_FILENAME, html=self._finish(html))

    def render_tag_page(self, manifest: SiteManifest, tag: str) -> RenderedPage:
        """Render the listing of entries carrying ``tag``."""
        output_path = tag_output_path(tag)
        context = self._base_context(output_path, html_title=tag)
        context.update(
            {
                "tag": tag,
                "entries": self._entry_rows(output_path, manifest.for_tag(tag)),
            }
        )
        html = self.tag_template.render(**context)
        return RenderedPage(output_path=output_path, html=self._finish(html))

    def _base_context(
        self, output_path: str, *, html_title: str
    ) -> dict[str, typ.Any]:
        """Return variables shared by every template.

        ``html_title`` becomes ``"<html_title> | <site title>"`` unless it is the
        site title itself.
        """
        title = html_title
        if html_title != self.site.title:
            title = f"{html_title} | {self.site.title}"
        return {
            "site": self.site,
            "html_title": title,
            "canonical_url": self.site.canonical_url(output_path),
            "stylesheet_href": self._relative(output_path, STYLESHEET_PATH),
            "home_href": self._relative(output_path, INDEX_FILENAME),
            "menu": [
                {"label": link.label, "href": self._menu_href(output_path, link.href)}
                for link in self.site.menu
            ],
        }

    def _entry_rows(
        self, output_path: str, entries: typ.Iterable[ManifestEntry]
    ) -> list[dict[str, typ.Any]]:
        return [
            {
                "title": entry.title,
                "href": self._relative(output_path, entry.href),
                "date": entry.date,
                "summary": entry.summary,
                "page_type": entry.page_type,
            }
            for entry in entries
        ]

    def _menu_href(self, output_path: str, href: str) -> str:
        """Resolve site-root menu links relative to ``output_path``."""
        if "://" in href or href.startswith(("#", "mailto:", "//")):
            return href
        target = href.lstrip("/") or INDEX_FILENAME
        if target.endswith("/"):
            target = f"{target}{INDEX_FILENAME}"
        return self._relative(output_path, target)

    @staticmethod
    def _relative(from_page: str, target: str) -> str:
        """Return ``target`` relative to the directory containing ``from_page``."""
        start = PurePosixPath(from_page).parent.as_posix()
        return posixpath.relpath(target, start=start)

    @staticmethod
    def _finish(html: str) -> str:
        return html if html.endswith("\n") else f"{html}\n"


__all__ = ["PageTemplate"]
