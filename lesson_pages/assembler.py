"""Walk a content tree and write the rendered lesson site.

:class:`SiteAssembler` runs the whole build for one content root:

1. discover Markdown sources and static assets (sorted, hidden and ignored
   paths skipped);
2. read and parse every source, isolating per-document ``ParseError`` and
   ``OSError`` failures;
3. plan every output path and raise :class:`~lesson_pages.errors.CollisionError`
   before anything is written when two inputs claim the same path or slug;
4. render each document independently (optionally on a thread pool);
5. write pages, copy assets byte-for-byte, and emit the stylesheet, index,
   and tag listings.

Nothing in the output depends on when the build ran, so rebuilding unchanged
sources reproduces identical bytes.

Example
-------
>>> from pathlib import Path
>>> from lesson_pages.assembler import SiteAssembler
>>> from lesson_pages.config import load_site_config
>>> site = load_site_config(Path("config.yaml"))  # doctest: +SKIP
>>> assembler = SiteAssembler(site, Path("content"), Path("public"))  # doctest: +SKIP
>>> report = assembler.run()  # doctest: +SKIP
>>> report.exit_code  # doctest: +SKIP
0
"""

from __future__ import annotations

import collections
import dataclasses as dc
import fnmatch
import logging
import shutil
import typing as typ
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path, PurePosixPath

from pygments.util import ClassNotFound

from ._constants import (
    INDEX_FILENAME,
    MARKDOWN_SUFFIXES,
    SECTION_INDEX_STEM,
    STYLESHEET_PATH,
)
from .errors import CollisionError, ConfigError, ParseError
from .frontmatter import parse_front_matter
from .generator import LessonRenderer, PageTemplate, RelativeLinkExtension
from .models import (
    BuildReport,
    DocumentFailure,
    LessonDocument,
    ManifestEntry,
    RenderedPage,
    SiteManifest,
    tag_output_path,
)

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from .config import SiteConfig

logger = logging.getLogger(__name__)


@dc.dataclass(slots=True)
class _ContentTree:
    """Relative paths of the sources and assets found under the content root."""

    sources: list[PurePosixPath] = dc.field(default_factory=list)
    assets: list[PurePosixPath] = dc.field(default_factory=list)


class SiteAssembler:
    """Build a static lesson site from a content directory."""

    def __init__(
        self,
        site: SiteConfig,
        content_dir: Path,
        output_dir: Path,
        *,
        build_drafts: bool | None = None,
        jobs: int = 1,
        clean: bool = False,
        templates_dir: Path | None = None,
    ) -> None:
        """Initialize the assembler.

        Parameters
        ----------
        site : SiteConfig
            Global configuration shared by every page.
        content_dir : Path
            Root directory holding Markdown sources and static assets.
        output_dir : Path
            Directory receiving the rendered site.
        build_drafts : bool or None, optional
            Render documents marked ``draft: true``; ``None`` defers to
            ``site.build_drafts``.
        jobs : int, optional
            Number of worker threads used to render documents. Values below
            two render sequentially.
        clean : bool, optional
            Remove ``output_dir`` before writing.
        templates_dir : Path, optional
            Override for the Jinja templates directory.

        Raises
        ------
        ConfigError
            If ``site`` lacks a required template variable or names an
            unknown Pygments style.
        """
        self.site = site
        self.content_dir = content_dir
        self.output_dir = output_dir
        self.build_drafts = site.build_drafts if build_drafts is None else build_drafts
        self.jobs = max(1, jobs)
        self.clean = clean
        self.template = PageTemplate(site, templates_dir=templates_dir)
        try:
            self.stylesheet = LessonRenderer(site.pygments_style).stylesheet
        except ClassNotFound as exc:
            msg = f"Unknown pygments_style '{site.pygments_style}'."
            raise ConfigError(msg) from exc

    def run(self) -> BuildReport:
        """Build the site and return a report of what was written.

        Returns
        -------
        BuildReport
            Written pages, copied assets, skipped drafts, and per-document
            failures. ``exit_code`` is 1 when any document failed.

        Raises
        ------
        ConfigError
            If the content directory does not exist, or ``clean`` would remove
            the content directory.
        CollisionError
            If two inputs claim the same output path or slug. Raised before
            any file is written.
        """
        if not self.content_dir.is_dir():
            msg = f"Content directory '{self.content_dir}' not found."
            raise ConfigError(msg)

        report = BuildReport()
        tree = self._discover()
        documents, intro_document = self._read_documents(tree.sources, report)
        tag_pages = self._plan_tag_pages(documents)
        self._check_collisions(documents, tree.assets, tag_pages)

        if self.clean:
            self._clean_output_dir()

        link_map = {doc.source_path.as_posix(): doc.output_path for doc in documents}
        pages = self._render_documents(documents, link_map)
        rendered: list[LessonDocument] = []
        for document, page in zip(documents, pages, strict=True):
            if self._write_page(page, report, source=document.source_path):
                rendered.append(document)

        for asset in tree.assets:
            self._copy_asset(asset, report)

        self._write_generated(STYLESHEET_PATH, self.stylesheet, report)
        manifest = SiteManifest.from_entries(
            ManifestEntry.from_document(document) for document in rendered
        )
        intro_html = ""
        if intro_document is not None:
            intro_html = self._render_body(intro_document, link_map)
        generated = [self.template.render_index(manifest, intro_html=intro_html)]
        generated.extend(
            self.template.render_tag_page(manifest, label)
            for label in manifest.tags().values()
        )
        for page in generated:
            self._write_generated(page.output_path, page.html, report)

        logger.info(
            "Built %d pages and copied %d assets into %s (%d failed)",
            len(report.written),
            len(report.copied),
            self.output_dir,
            len(report.failures),
        )
        return report

    def _discover(self) -> _ContentTree:
        """Return sorted relative paths of sources and assets to build."""
        tree = _ContentTree()
        content_root = self.content_dir.resolve()
        output_root = self.output_dir.resolve()
        nested_output = output_root != content_root and output_root.is_relative_to(
            content_root
        )
        for path in sorted(self.content_dir.rglob("*")):
            if not path.is_file():
                continue
            if nested_output and path.resolve().is_relative_to(output_root):
                continue
            relative = PurePosixPath(path.relative_to(self.content_dir).as_posix())
            if self._is_excluded(relative):
                continue
            if relative.suffix.lower() in MARKDOWN_SUFFIXES:
                tree.sources.append(relative)
            else:
                tree.assets.append(relative)
        return tree

    def _is_excluded(self, relative: PurePosixPath) -> bool:
        """Return True for hidden paths and paths matching ``ignore_files``."""
        if any(part.startswith(".") for part in relative.parts):
            return True
        text = relative.as_posix()
        return any(
            fnmatch.fnmatchcase(text, pattern)
            or fnmatch.fnmatchcase(relative.name, pattern)
            for pattern in self.site.ignore_files
        )

    def _read_documents(
        self, sources: cabc.Iterable[PurePosixPath], report: BuildReport
    ) -> tuple[list[LessonDocument], LessonDocument | None]:
        """Parse every source, recording failures instead of raising them.

        Returns the buildable documents and the root ``_index`` document that
        supplies the index introduction, if present.
        """
        documents: list[LessonDocument] = []
        intro: LessonDocument | None = None
        for relative in sources:
            try:
                document = self._read_document(relative)
            except (ParseError, OSError) as exc:
                logger.warning("Skipping %s: %s", relative, exc)
                report.failures.append(DocumentFailure(relative, exc))
                continue
            if document.draft and not self.build_drafts:
                logger.info("Skipping draft %s", relative)
                report.skipped_drafts.append(relative.as_posix())
                continue
            if relative.stem == SECTION_INDEX_STEM and not relative.parent.parts:
                intro = document
                continue
            documents.append(document)
        return documents, intro

    def _read_document(self, relative: PurePosixPath) -> LessonDocument:
        path = self.content_dir / relative
        try:
            text = path.read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            msg = f"not valid UTF-8 text ({exc.reason})"
            raise ParseError(msg, source=relative) from exc
        metadata, body = parse_front_matter(text, source=relative)
        return LessonDocument(
            source_path=relative, front_matter=metadata, body_markdown=body
        )

    @staticmethod
    def _plan_tag_pages(documents: cabc.Iterable[LessonDocument]) -> dict[str, str]:
        """Map each generated tag page path to its tag label."""
        pages: dict[str, str] = {}
        for document in documents:
            for tag in document.tags:
                pages.setdefault(tag_output_path(tag), tag)
        return pages

    @staticmethod
    def _check_collisions(
        documents: cabc.Sequence[LessonDocument],
        assets: cabc.Sequence[PurePosixPath],
        tag_pages: cabc.Mapping[str, str],
    ) -> None:
        """Raise ``CollisionError`` for the first contested slug or output path."""
        slugs: dict[str, list[str]] = collections.defaultdict(list)
        for document in documents:
            if document.declared_slug:
                slugs[document.declared_slug].append(document.source_path.as_posix())
        for slug, claimants in sorted(slugs.items()):
            if len(claimants) > 1:
                raise CollisionError(f"slug:{slug}", claimants)

        claims: dict[str, list[str]] = collections.defaultdict(list)
        claims[INDEX_FILENAME].append("<site index>")
        claims[STYLESHEET_PATH].append("<code stylesheet>")
        for path, tag in tag_pages.items():
            claims[path].append(f"<tag page '{tag}'>")
        for document in documents:
            claims[document.output_path].append(document.source_path.as_posix())
        for asset in assets:
            claims[asset.as_posix()].append(asset.as_posix())
        for output_path, claimants in sorted(claims.items()):
            if len(claimants) > 1:
                raise CollisionError(output_path, claimants)

    def _clean_output_dir(self) -> None:
        """Remove the output directory unless it contains the content root."""
        output_root = self.output_dir.resolve()
        if not output_root.exists():
            return
        if self.content_dir.resolve().is_relative_to(output_root):
            msg = (
                f"Refusing to clean '{self.output_dir}': "
                "it contains the content directory."
            )
            raise ConfigError(msg)
        logger.info("Removing %s", self.output_dir)
        shutil.rmtree(output_root)

    def _render_documents(
        self,
        documents: cabc.Sequence[LessonDocument],
        link_map: cabc.Mapping[str, str],
    ) -> list[RenderedPage]:
        """Render documents in order, on a thread pool when ``jobs`` > 1."""

        def _render(document: LessonDocument) -> RenderedPage:
            return self.template.apply(document, self._render_body(document, link_map))

        if self.jobs == 1 or len(documents) < 2:
            return [_render(document) for document in documents]
        with ThreadPoolExecutor(max_workers=self.jobs) as pool:
            return list(pool.map(_render, documents))

    def _render_body(
        self, document: LessonDocument, link_map: cabc.Mapping[str, str]
    ) -> str:
        extension = RelativeLinkExtension(link_map, document.relative_dir.as_posix())
        renderer = LessonRenderer(
            self.site.pygments_style, link_extension=extension
        )
        return renderer.to_html(document.body_markdown)

    def _write_page(
        self, page: RenderedPage, report: BuildReport, *, source: PurePosixPath
    ) -> bool:
        """Write a lesson page, recording a failure instead of raising."""
        try:
            self._write(page.output_path, page.html)
        except OSError as exc:
            logger.error(
                "Could not write %s for %s: %s", page.output_path, source, exc
            )
            report.failures.append(DocumentFailure(source, exc))
            return False
        report.written.append(page.output_path)
        return True

    def _write_generated(
        self, output_path: str, text: str, report: BuildReport
    ) -> None:
        """Write a generated file; failures here abort the build."""
        self._write(output_path, text)
        report.written.append(output_path)

    def _write(self, output_path: str, text: str) -> None:
        target = self.output_dir / output_path
        if not target.resolve().is_relative_to(self.output_dir.resolve()):
            msg = f"'{output_path}' resolves outside '{self.output_dir}'"
            raise OSError(msg)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(text, encoding="utf-8", newline="\n")
        logger.debug("wrote %s", target)

    def _copy_asset(self, relative: PurePosixPath, report: BuildReport) -> None:
        """Copy a static asset byte-for-byte, recording failures."""
        target = self.output_dir / relative
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(self.content_dir / relative, target)
        except OSError as exc:
            logger.error("Could not copy %s: %s", relative, exc)
            report.failures.append(DocumentFailure(relative, exc))
            return
        logger.debug("copied %s", target)
        report.copied.append(relative.as_posix())


__all__ = ["SiteAssembler"]
