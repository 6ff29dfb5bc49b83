"""Shared dataclasses used by the site build pipeline.

``LessonDocument`` is produced once per source file by the front matter
parser, ``RenderedPage`` once per successfully rendered document, and
``SiteManifest`` orders rendered pages for the index and tag listings.
"""

from __future__ import annotations

import dataclasses as dc
import re
import typing as typ
from pathlib import PurePosixPath

from ._constants import TAG_PAGE_TEMPLATE

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from .frontmatter import FrontMatterValue

TRUTHY_FLAGS = frozenset({"true", "yes", "on", "1"})


def slugify(value: str) -> str:
    """Convert a string into a lowercase hyphen-separated slug.

    >>> slugify("Monte Carlo: Notes")
    'monte-carlo-notes'
    """
    return re.sub(r"[^a-z0-9]+", "-", value.lower()).strip("-")


def title_from_stem(stem: str) -> str:
    """Derive a display title from a filename stem.

    >>> title_from_stem("intro-to-shell")
    'Intro To Shell'
    """
    words = re.sub(r"[-_]+", " ", stem).strip()
    return words.title() if words else stem


def tag_output_path(tag: str) -> str:
    """Return the site-relative path of the listing page for ``tag``.

    >>> tag_output_path("Monte Carlo")
    'tags/monte-carlo.html'
    """
    return TAG_PAGE_TEMPLATE.format(tag=slugify(tag) or "tag")


@dc.dataclass(slots=True)
class LessonDocument:
    """A parsed content file.

    Attributes
    ----------
    source_path : PurePosixPath
        Path of the source file relative to the content root.
    front_matter : dict[str, FrontMatterValue]
        Normalised metadata; unknown keys are preserved as parsed.
    body_markdown : str
        Markdown following the front matter block.
    """

    source_path: PurePosixPath
    front_matter: dict[str, FrontMatterValue]
    body_markdown: str

    def _text(self, key: str) -> str | None:
        value = self.front_matter.get(key)
        if isinstance(value, list):
            value = value[0] if value else None
        if not isinstance(value, str):
            return None
        return value.strip() or None

    @property
    def declared_slug(self) -> str | None:
        """Front matter slug reduced to URL-safe characters.

        Path separators and dots are folded into hyphens, so a declared slug
        can never move the page out of its source directory.
        """
        return slugify(self._text("slug") or "") or None

    @property
    def slug(self) -> str:
        """Declared slug, or one derived from the filename."""
        return self.declared_slug or slugify(self.source_path.stem) or "page"

    @property
    def title(self) -> str:
        return self._text("title") or title_from_stem(self.source_path.stem)

    @property
    def author(self) -> str | None:
        return self._text("author")

    @property
    def date(self) -> str | None:
        return self._text("date")

    @property
    def page_type(self) -> str | None:
        return self._text("type")

    @property
    def summary(self) -> str | None:
        return self._text("summary") or self._text("description")

    @property
    def tags(self) -> list[str]:
        value = self.front_matter.get("tags")
        if isinstance(value, str):
            value = [value]
        if not isinstance(value, list):
            return []
        return [tag.strip() for tag in value if tag.strip()]

    @property
    def draft(self) -> bool:
        return (self._text("draft") or "").lower() in TRUTHY_FLAGS

    @property
    def relative_dir(self) -> PurePosixPath:
        return self.source_path.parent

    @property
    def output_path(self) -> str:
        """Site-relative output path, preserving the source directory."""
        return (self.relative_dir / f"{self.slug}.html").as_posix()


@dc.dataclass(slots=True, frozen=True)
class RenderedPage:
    """Final HTML for one document and its site-relative output path."""

    output_path: str
    html: str


@dc.dataclass(slots=True, frozen=True)
class ManifestEntry:
    """Index metadata for one rendered page."""

    title: str
    slug: str
    href: str
    date: str | None = None
    tags: tuple[str, ...] = ()
    summary: str | None = None
    page_type: str | None = None

    @classmethod
    def from_document(cls, document: LessonDocument) -> ManifestEntry:
        return cls(
            title=document.title,
            slug=document.slug,
            href=document.output_path,
            date=document.date,
            tags=tuple(document.tags),
            summary=document.summary,
            page_type=document.page_type,
        )


@dc.dataclass(slots=True, frozen=True)
class SiteManifest:
    """Rendered pages ordered by date (newest first), then slug.

    Entries without a date sort after every dated entry.
    """

    entries: tuple[ManifestEntry, ...] = ()

    @classmethod
    def from_entries(cls, entries: cabc.Iterable[ManifestEntry]) -> SiteManifest:
        by_slug = sorted(entries, key=lambda entry: (entry.slug, entry.href))
        ordered = sorted(by_slug, key=lambda entry: entry.date or "", reverse=True)
        return cls(entries=tuple(ordered))

    def tags(self) -> dict[str, str]:
        """Map each distinct tag slug to its display label, sorted by slug.

        Tags that slugify identically (``"R"`` and ``"r"``) share one label,
        taken from the alphabetically first spelling.
        """
        labels: dict[str, str] = {}
        for tag in sorted({tag for entry in self.entries for tag in entry.tags}):
            labels.setdefault(slugify(tag) or "tag", tag)
        return dict(sorted(labels.items()))

    def for_tag(self, tag: str) -> list[ManifestEntry]:
        """Return entries carrying ``tag``, compared by slug."""
        wanted = slugify(tag) or "tag"
        return [
            entry
            for entry in self.entries
            if any((slugify(candidate) or "tag") == wanted for candidate in entry.tags)
        ]

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> cabc.Iterator[ManifestEntry]:
        return iter(self.entries)


@dc.dataclass(slots=True)
class DocumentFailure:
    """A document skipped because it could not be read, parsed, or written."""

    source_path: PurePosixPath
    error: Exception

    @property
    def message(self) -> str:
        return str(self.error)


@dc.dataclass(slots=True)
class BuildReport:
    """Outcome of a site build."""

    written: list[str] = dc.field(default_factory=list)
    copied: list[str] = dc.field(default_factory=list)
    skipped_drafts: list[str] = dc.field(default_factory=list)
    failures: list[DocumentFailure] = dc.field(default_factory=list)

    @property
    def exit_code(self) -> int:
        return 1 if self.failures else 0


__all__ = [
    "BuildReport",
    "DocumentFailure",
    "LessonDocument",
    "ManifestEntry",
    "RenderedPage",
    "SiteManifest",
    "slugify",
    "tag_output_path",
    "title_from_stem",
]
