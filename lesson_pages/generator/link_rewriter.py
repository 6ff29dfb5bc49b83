"""Helpers for rewriting relative links between lesson sources to rendered pages."""

from __future__ import annotations

import posixpath
import typing as typ
from urllib.parse import urlsplit

from markdown.extensions import Extension
from markdown.treeprocessors import Treeprocessor

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from xml.etree.ElementTree import Element

    from markdown import Markdown
else:  # pragma: no cover - type-checking fallback
    Markdown = typ.Any
    Element = typ.Any


class RelativeLinkExtension(Extension):
    """Rewrite links to other content files into links to their HTML pages.

    Authors link lessons by their source filename (``../shell/intro.md``).
    Pages are written under their slug, so a lesson declaring
    ``slug: first-steps`` lives at ``shell/first-steps.html``. ``link_map``
    maps source paths to output paths (both relative to the content root) and
    ``base_dir`` is the directory of the document being rendered.
    """

    def __init__(self, link_map: cabc.Mapping[str, str], base_dir: str) -> None:
        self.link_map = link_map
        self.base_dir = base_dir

    def extendMarkdown(self, md: Markdown) -> None:  # type: ignore[override]  # noqa: N802
        """Register the relative-link treeprocessor on the Markdown instance."""
        processor = RelativeLinkTreeprocessor(md, self.link_map, self.base_dir)
        md.treeprocessors.register(processor, "lesson_relative_links", 15)


class RelativeLinkTreeprocessor(Treeprocessor):
    """Point anchors at the rendered page of the linked content file."""

    def __init__(
        self, md: Markdown, link_map: cabc.Mapping[str, str], base_dir: str
    ) -> None:
        super().__init__(md)
        self.link_map = link_map
        self.base_dir = base_dir

    def run(self, root: Element) -> Element:
        """Rewrite relative anchors in the parsed markdown tree."""
        for element in root.iter():
            if element.tag == "a":
                href = element.get("href")
                rewritten = self._rewrite(href)
                if rewritten:
                    element.set("href", rewritten)
        return root

    def _rewrite(self, target: str | None) -> str | None:
        """Return the page-relative URL for ``target`` or None to leave it as is."""
        if not target or target.startswith(("#", "//")) or "://" in target:
            return None

        parsed = urlsplit(target)
        if parsed.scheme or parsed.netloc or not parsed.path:
            return None
        if parsed.path.startswith("/"):
            return None

        joined = posixpath.normpath(posixpath.join(self.base_dir, parsed.path))
        output = self.link_map.get(joined)
        if output is None:
            return None

        url = posixpath.relpath(output, start=self.base_dir or ".")
        if parsed.query:
            url = f"{url}?{parsed.query}"
        if parsed.fragment:
            url = f"{url}#{parsed.fragment}"
        return url


__all__ = ["RelativeLinkExtension", "RelativeLinkTreeprocessor"]
